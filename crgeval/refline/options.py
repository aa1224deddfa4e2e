#!/usr/bin/env python

import copy

# Option keys
CURV_MODE = "curv_mode"
XY_TO_UV_MAX_ITERATIONS = "xy_to_uv_max_iterations"
XY_TO_UV_TOLERANCE = "xy_to_uv_tolerance"
XY_TO_UV_NUM_CANDIDATES = "xy_to_uv_num_candidates"

# Values for the "curv_mode" option
CURV_MODE_REF_LINE = "ref_line"
CURV_MODE_LATERAL = "lateral"

DEFAULT_OPTIONS = {
    CURV_MODE : CURV_MODE_REF_LINE,
    XY_TO_UV_MAX_ITERATIONS : 20,
    XY_TO_UV_TOLERANCE : 1.0e-12,
    XY_TO_UV_NUM_CANDIDATES : 8,
}



class Options:
    """
    A set of named options that is consulted when evaluating a reference
    line. Each contact point owns one of these, so that, for example, one
    contact point can compute curvature of the reference line while another
    contact point computes curvature of the laterally offset path.

    Supported options (key : default)
    - "curv_mode" : "ref_line"
        Either "ref_line" (curvature of the reference line) or "lateral"
        (curvature of the path at lateral offset v from the reference line).
    - "xy_to_uv_max_iterations" : 20
        Newton iterations per candidate segment when inverting x/y to u/v.
    - "xy_to_uv_tolerance" : 1e-12
        Newton step size below which the inversion is considered converged.
    - "xy_to_uv_num_candidates" : 8
        Number of nearest segments tested when inverting x/y to u/v.
    """

    def __init__(self, option_dict=None):
        """
        Initialization function for the "Options" class.

        Parameters
        ----------
            option_dict : dictionary [OPTIONAL]
                Values that override the defaults, keyed by option name.
                Unknown keys are reported and ignored.
        """
        self.__values = dict(DEFAULT_OPTIONS)
        if (option_dict is not None):
            for key, value in option_dict.items():
                self.set_option(key, value)

    def set_option(self, key, value):
        """
        Sets the value of an option.

        Returns
        -------
            success : bool
                False if the key is not a known option (nothing is changed).
        """
        if key not in DEFAULT_OPTIONS:
            print("[OPTIONS] WARNING: unknown option \"" + str(key) + "\" ignored.")
            return False
        if (key == CURV_MODE) and (value not in (CURV_MODE_REF_LINE, CURV_MODE_LATERAL)):
            print("[OPTIONS] WARNING: invalid value \"" + str(value) + "\" for option \"" + CURV_MODE + "\" ignored.")
            return False
        self.__values[key] = value
        return True

    def get_option(self, key, default=None):
        return self.__values.get(key, default)

    def remove_option(self, key):
        """Restores the default value of an option."""
        if key not in DEFAULT_OPTIONS:
            return False
        self.__values[key] = DEFAULT_OPTIONS[key]
        return True

    def copy(self):
        return copy.deepcopy(self)

    def as_dict(self):
        return dict(self.__values)



def has_flag(options, key, value):
    """
    Checks whether an option set holds a given value for a given key. A
    missing option set (None) is treated as the default options.
    """
    if (options is None):
        return DEFAULT_OPTIONS.get(key) == value
    return options.get_option(key) == value



def get_option(options, key):
    """Looks up an option, falling back to the default when "options" is None."""
    if (options is None):
        return DEFAULT_OPTIONS.get(key)
    return options.get_option(key, DEFAULT_OPTIONS.get(key))

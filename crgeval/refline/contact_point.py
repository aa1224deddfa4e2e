#!/usr/bin/env python

from crgeval.refline.options import Options
from crgeval.refline.uv_to_xy import evaluate_uv_to_xy as data_evaluate_uv_to_xy
from crgeval.refline.heading_curvature import evaluate_uv_to_heading_curvature as data_evaluate_uv_to_heading_curvature
from crgeval.refline.xy_to_uv import evaluate_xy_to_uv as data_evaluate_xy_to_uv



class ContactPoint:
    """
    A cursor through which one caller evaluates one data set. It remembers
    the last queried position and the last computed results, and it owns the
    options that are applied to its queries.

    Properties
    - id          : integer handle of this contact point.
    - data_set_id : integer handle of the data set this contact point is bound to.
    - sample_table: the data set (not owned, shared with other contact points).
    - options     : the Options applied to each evaluation.
    - u, v        : last road-relative position (units: m).
    - x, y        : last world frame position (units: m).
    - phi         : last heading (units: radians).
    - curv        : last curvature (units: 1/m).
    """

    def __init__(self, cp_id, data_set_id, sample_table, options=None):
        self.id = cp_id
        self.data_set_id = data_set_id
        self.sample_table = sample_table
        self.options = options if (options is not None) else Options()
        self.u = 0.0
        self.v = 0.0
        self.x = 0.0
        self.y = 0.0
        self.phi = 0.0
        self.curv = 0.0



class CrgRegistry:
    """
    This class keeps the data sets (i.e., the sample tables of reference
    lines) and the contact points that evaluate them, each addressed by an
    integer handle. A data set may be shared by any number of contact points.
    Releasing a data set also deletes the contact points bound to it, hence
    a contact point never outlives its data set.

    The evaluation functions never raise: an unknown contact point handle is
    reported through the returned "is_ok" flag, together with the fallback
    values (x=u, y=v for positions, u=x, v=y for the inverse, phi=0 and
    curv=0 for heading and curvature).

    Concurrent evaluation through distinct contact points of the same data
    set is safe as long as the data set is not modified. A single contact
    point must not be used concurrently, as each evaluation overwrites its
    cursor.
    """

    def __init__(self, verbose=0):
        """
        Initialization function for the "CrgRegistry" class.

        Parameters
        ----------
            verbose : int
                Level of messages printed for unknown handles, 0 for none.
        """
        self.verbose = verbose
        self.__data_sets = {}
        self.__contact_points = {}
        self.__next_data_set_id = 1
        self.__next_contact_point_id = 1



    # -------------------------------------------------------------------
    # Data sets
    # -------------------------------------------------------------------

    def add_data_set(self, sample_table):
        """
        Adds a data set and returns its handle. Invalid sample tables are
        accepted, evaluations on them return the fallback values.
        """
        if not(sample_table.is_valid()):
            print("[CRG REGISTRY] WARNING: adding a data set without a valid reference line, all evaluations will return fallback values.")
        data_set_id = self.__next_data_set_id
        self.__next_data_set_id = self.__next_data_set_id + 1
        self.__data_sets[data_set_id] = sample_table
        return data_set_id

    def get_data_set(self, data_set_id):
        return self.__data_sets.get(data_set_id, None)

    def get_data_set_ids(self):
        return sorted(self.__data_sets.keys())

    def release_data_set(self, data_set_id):
        """
        Removes a data set and deletes all contact points bound to it.

        Returns
        -------
            success : bool
                False if the handle is unknown.
        """
        if data_set_id not in self.__data_sets:
            self.__report("release_data_set", "unknown data set id " + str(data_set_id))
            return False
        cp_ids_to_delete = [cp.id for cp in self.__contact_points.values() if (cp.data_set_id == data_set_id)]
        for cp_id in cp_ids_to_delete:
            del self.__contact_points[cp_id]
        del self.__data_sets[data_set_id]
        return True



    # -------------------------------------------------------------------
    # Contact points
    # -------------------------------------------------------------------

    def create_contact_point(self, data_set_id, options=None):
        """
        Creates a contact point bound to a data set.

        Parameters
        ----------
            data_set_id : int
                Handle of the data set to evaluate.
            options : Options [OPTIONAL]
                Options of the new contact point (copied). Defaults otherwise.

        Returns
        -------
            cp_id : int
                Handle of the new contact point, -1 if the data set is unknown.
        """
        if data_set_id not in self.__data_sets:
            print("[CRG REGISTRY] ERROR: cannot create a contact point for unknown data set id " + str(data_set_id) + ".")
            return -1
        cp_id = self.__next_contact_point_id
        self.__next_contact_point_id = self.__next_contact_point_id + 1
        cp_options = options.copy() if (options is not None) else Options()
        self.__contact_points[cp_id] = ContactPoint(cp_id, data_set_id, self.__data_sets[data_set_id], cp_options)
        return cp_id

    def get_contact_point(self, cp_id):
        return self.__contact_points.get(cp_id, None)

    def delete_contact_point(self, cp_id):
        """Deletes a contact point, the data set it is bound to is not affected."""
        if cp_id not in self.__contact_points:
            self.__report("delete_contact_point", "unknown contact point id " + str(cp_id))
            return False
        del self.__contact_points[cp_id]
        return True

    def set_contact_point_option(self, cp_id, key, value):
        cp = self.__lookup(cp_id, "set_contact_point_option")
        if (cp is None):
            return False
        return cp.options.set_option(key, value)



    # -------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------

    def evaluate_uv_to_xy(self, cp_id, u, v):
        """
        Converts a road-relative position (u,v) into world frame coordinates
        (x,y) on the data set of a contact point.

        Returns
        -------
            is_ok : bool
            x, y : float
                (units: m), equal to (u,v) if is_ok is False.
        """
        cp = self.__lookup(cp_id, "evaluate_uv_to_xy")
        if (cp is None):
            return False, u, v

        cp.u = u
        cp.v = v
        is_ok, cp.x, cp.y = data_evaluate_uv_to_xy(cp.sample_table, cp.options, u, v)
        return is_ok, cp.x, cp.y

    def evaluate_uv_to_heading_curvature(self, cp_id, u, v):
        """
        Computes heading and curvature at a road-relative position (u,v) on
        the data set of a contact point.

        Returns
        -------
            is_ok : bool
            phi : float
                (units: radians), 0.0 if is_ok is False.
            curv : float
                (units: 1/m), 0.0 if is_ok is False.
        """
        cp = self.__lookup(cp_id, "evaluate_uv_to_heading_curvature")
        if (cp is None):
            return False, 0.0, 0.0

        cp.u = u
        cp.v = v
        is_ok, cp.phi, cp.curv = data_evaluate_uv_to_heading_curvature(cp.sample_table, cp.options, u, v)
        return is_ok, cp.phi, cp.curv

    def evaluate_xy_to_uv(self, cp_id, x, y):
        """
        Converts world frame coordinates (x,y) into a road-relative position
        (u,v) on the data set of a contact point.

        Returns
        -------
            is_ok : bool
            u, v : float
                (units: m), equal to (x,y) if is_ok is False.
        """
        cp = self.__lookup(cp_id, "evaluate_xy_to_uv")
        if (cp is None):
            return False, x, y

        cp.x = x
        cp.y = y
        is_ok, cp.u, cp.v = data_evaluate_xy_to_uv(cp.sample_table, cp.options, x, y)
        return is_ok, cp.u, cp.v

    def evaluate_xy_to_heading_curvature(self, cp_id, x, y):
        """
        Computes heading and curvature at world frame coordinates (x,y), by
        first converting them into a road-relative position.
        """
        if cp_id not in self.__contact_points:
            self.__report("evaluate_xy_to_heading_curvature", "unknown contact point id " + str(cp_id))
            return False, 0.0, 0.0
        # An invalid data set yields the fallback in both steps
        is_ok, u, v = self.evaluate_xy_to_uv(cp_id, x, y)
        is_ok_pk, phi, curv = self.evaluate_uv_to_heading_curvature(cp_id, u, v)
        return (is_ok and is_ok_pk), phi, curv



    def __lookup(self, cp_id, caller_name):
        cp = self.__contact_points.get(cp_id, None)
        if (cp is None):
            self.__report(caller_name, "unknown contact point id " + str(cp_id))
        return cp

    def __report(self, caller_name, message):
        if (self.verbose > 0):
            print("[CRG REGISTRY] WARNING: " + caller_name + ": " + message + ".")

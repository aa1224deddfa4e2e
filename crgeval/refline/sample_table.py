#!/usr/bin/env python

import numpy as np
from scipy.spatial import cKDTree



class UAxis:
    """
    The constantly spaced u axis of a reference line.

    - first : u value of the first sample (units: m).
    - inc   : spacing between two samples (units: m), required > 0.
    - size  : number of samples, required >= 2 for a valid table.
    - last  : u value of the last sample, first + (size-1)*inc (units: m).
    """

    def __init__(self, first=0.0, inc=1.0, size=0):
        self.first = float(first)
        self.inc = float(inc)
        self.size = int(size)
        self.last = self.first + max(0, self.size-1) * self.inc



class Channel:
    """
    One sampled quantity along the u axis (x, y or heading phi), with the
    first and last values cached for the extrapolation beyond the ends.
    """

    def __init__(self, data=None):
        if (data is None):
            self.data = np.empty((0,), dtype=np.float64)
            self.valid = False
        else:
            self.data = np.array(data, dtype=np.float64).reshape(-1)
            self.valid = (self.data.shape[0] > 0)
        self.size = self.data.shape[0]
        self.first = self.data[0] if (self.size > 0) else 0.0
        self.last = self.data[-1] if (self.size > 0) else 0.0



class SampleTable:
    """
    This class holds a road reference line (i.e., the centerline of the road)
    that is sampled at a constant spacing along the u axis. Together with
    the functions in "uv_to_xy", "heading_curvature" and "xy_to_uv", it
    provides the mapping between road-relative coordinates (u,v) and world
    frame coordinates (x,y).

    Quantities that fully specify the reference line
    - u_axis      : first value, increment, number of samples (see UAxis).
    - channel_x   : world frame x-axis coordinate of each sample (units: m).
    - channel_y   : world frame y-axis coordinate of each sample (units: m).
    - channel_phi : heading of the road at each sample (units: radians).
                    This is a step function: phi[i] is the direction of the
                    straight chord from sample i to sample i+1, and the last
                    sample repeats the heading of the last chord.

    Additional quantities derived from the above:
    - is_closed     : whether the last sample connects back to the first one.
    - phi_first_cos, phi_first_sin : direction of the first sample, used for
                    the straight-line extrapolation before the start.
    - phi_last_cos,  phi_last_sin  : direction of the last sample, used for
                    the straight-line extrapolation beyond the end.

    A table built from inconsistent input is NOT an error: the problem is
    printed and the x channel is left invalid, in which case all evaluation
    functions return their fallback values.
    """



    def __init__(self, u_first=0.0, u_inc=1.0, x=None, y=None, phi=None, is_closed=None, close_tolerance=1.0e-3):
        """
        Initialization function for the "SampleTable" class.

        Parameters
        ----------
            u_first : float
                The u value of the first sample (units: m).
            u_inc : float
                The constant spacing of the samples along u (units: m).
            x : numpy array, 1-dimensional
                World frame x-axis coordinates of the samples (units: m).
            y : numpy array, 1-dimensional
                World frame y-axis coordinates of the samples (units: m).
            phi : numpy array, 1-dimensional [OPTIONAL]
                Heading at each sample (units: radians). If not provided,
                the headings are computed from the chords between samples.
            is_closed : bool [OPTIONAL]
                Whether the reference line is a closed loop. If not provided,
                the line is considered closed when its first and last samples
                are less than "close_tolerance" apart.
            close_tolerance : float
                Distance used for detecting a closed reference line (units: m).

        Returns
        -------
        Nothing
        """
        # Initialize an empty, i.e., invalid, table
        self.u_axis = UAxis(first=u_first, inc=u_inc, size=0)
        self.channel_x = Channel()
        self.channel_y = Channel()
        self.channel_phi = Channel()
        self.is_closed = False
        self.phi_first_cos = 1.0
        self.phi_first_sin = 0.0
        self.phi_last_cos = 1.0
        self.phi_last_sin = 0.0
        self.__midpoint_tree = None

        # Check the inputs
        if (x is None) or (y is None):
            print("[SAMPLE TABLE] ERROR: both the x and y samples are required. The table is left empty.")
            return
        if not(np.isfinite(u_first)) or not(np.isfinite(u_inc)) or (u_inc <= 0.0):
            print("[SAMPLE TABLE] ERROR: the u increment must be positive, u_inc = " + str(u_inc) + ". The table is left empty.")
            return

        x = np.array(x, dtype=np.float64).reshape(-1)
        y = np.array(y, dtype=np.float64).reshape(-1)
        if not(x.shape[0] == y.shape[0]):
            print("[SAMPLE TABLE] ERROR: the x and y samples have different lengths (" + str(x.shape[0]) + " and " + str(y.shape[0]) + "). The table is left empty.")
            return
        if (x.shape[0] < 2):
            print("[SAMPLE TABLE] ERROR: at least two samples are required. The table is left empty.")
            return
        if not(np.all(np.isfinite(x))) or not(np.all(np.isfinite(y))):
            print("[SAMPLE TABLE] ERROR: the x and y samples must be finite. The table is left empty.")
            return

        # Get the headings
        if (phi is None):
            phi = SampleTable.compute_chord_headings(x, y)
        else:
            phi = np.array(phi, dtype=np.float64).reshape(-1)
            if not(phi.shape[0] == x.shape[0]):
                print("[SAMPLE TABLE] ERROR: the phi samples have a different length than the x and y samples. The table is left empty.")
                return
            if not(np.all(np.isfinite(phi))):
                print("[SAMPLE TABLE] ERROR: the phi samples must be finite. The table is left empty.")
                return

        # Fill in the channels
        self.u_axis = UAxis(first=u_first, inc=u_inc, size=x.shape[0])
        self.channel_x = Channel(x)
        self.channel_y = Channel(y)
        self.channel_phi = Channel(phi)

        # Cache the directions at both ends for the extrapolation
        self.phi_first_cos = np.cos(self.channel_phi.first)
        self.phi_first_sin = np.sin(self.channel_phi.first)
        self.phi_last_cos = np.cos(self.channel_phi.last)
        self.phi_last_sin = np.sin(self.channel_phi.last)

        # Check if the reference line is closed
        if (is_closed is None):
            gap = np.hypot(x[-1]-x[0], y[-1]-y[0])
            self.is_closed = bool((x.shape[0] > 2) and (gap < close_tolerance))
        else:
            self.is_closed = bool(is_closed)



    @classmethod
    def from_points(cls, x, y, u_first=0.0, is_closed=None, close_tolerance=1.0e-3):
        """
        Constructs a table from a polyline whose points are (approximately)
        equally spaced. The u increment is the mean length of the chords.
        """
        x = np.array(x, dtype=np.float64).reshape(-1)
        y = np.array(y, dtype=np.float64).reshape(-1)
        if (x.shape[0] < 2) or not(x.shape[0] == y.shape[0]):
            print("[SAMPLE TABLE] ERROR: \"from_points\" requires at least two (x,y) points of equal length arrays.")
            return cls(u_first=u_first, u_inc=1.0, x=None, y=None)

        chord_lengths = np.hypot(np.diff(x), np.diff(y))
        u_inc = np.mean(chord_lengths)
        if (u_inc > 0.0) and (np.max(np.abs(chord_lengths - u_inc)) > 0.01*u_inc):
            print("[SAMPLE TABLE] WARNING: the points given to \"from_points\" are not equally spaced (more than 1% deviation). Using the mean spacing of " + "{:.6f}".format(u_inc) + " as the u increment.")

        return cls(u_first=u_first, u_inc=u_inc, x=x, y=y, is_closed=is_closed, close_tolerance=close_tolerance)



    @classmethod
    def from_headings(cls, phi, u_inc, u_first=0.0, x_first=0.0, y_first=0.0, is_closed=None, close_tolerance=1.0e-3):
        """
        Constructs a table by integrating a sequence of headings, i.e., each
        sample is placed one increment along the heading of the previous
        sample: x[i+1] = x[i] + u_inc * cos(phi[i]).

        Parameters
        ----------
            phi : numpy array, 1-dimensional
                Heading at each sample (units: radians).
            u_inc : float
                The constant spacing of the samples along u (units: m).
            u_first : float
                The u value of the first sample (units: m).
            x_first, y_first : float
                World frame coordinates of the first sample (units: m).

        Returns
        -------
            sample_table : SampleTable
        """
        phi = np.array(phi, dtype=np.float64).reshape(-1)
        if (phi.shape[0] < 2):
            print("[SAMPLE TABLE] ERROR: \"from_headings\" requires at least two headings.")
            return cls(u_first=u_first, u_inc=u_inc, x=None, y=None)

        # Integrate the chords
        x = np.empty_like(phi)
        y = np.empty_like(phi)
        x[0] = x_first
        y[0] = y_first
        x[1:] = x_first + np.cumsum(u_inc * np.cos(phi[:-1]))
        y[1:] = y_first + np.cumsum(u_inc * np.sin(phi[:-1]))

        return cls(u_first=u_first, u_inc=u_inc, x=x, y=y, phi=phi, is_closed=is_closed, close_tolerance=close_tolerance)



    @classmethod
    def from_road_elements(cls, road_elements_list, u_inc=0.1, u_first=0.0, epsilon_c=1.0/10000.0, is_closed=None, close_tolerance=1.0e-3):
        """
        Constructs a table by sampling a road that is described by a sequence
        of straight-line and circular-arc elements. The road starts at (0,0)
        with heading 0, and each element continues smoothly from the end of
        the previous element.

        Example element dictionaries:
        > {"type":"straight", "length":3.0}
        > {"type":"curved", "curvature":1/50.0, "angle_in_degrees":45.0}
        > {"type":"curved", "curvature":1/50.0, "length":30.0}

        Parameters
        ----------
            road_elements_list : list of dictionaries
                The road elements, in order from the start of the road.
            u_inc : float
                The requested spacing of the samples (units: m). This is
                adjusted slightly so that the end of the road is a sample.
            u_first : float
                The u value of the first sample (units: m).
            epsilon_c : float
                Minimum magnitude of curvature for a curved element (units: 1/m).
                Curved elements below this are raised to this value.

        Returns
        -------
            sample_table : SampleTable
        """
        # Collect the curvature and length of each element
        curvatures = []
        lengths = []
        for element in road_elements_list:
            element_type = element.get("type", None)
            if (element_type == "straight"):
                length = element.get("length", 0.0)
                curvature = 0.0
            elif (element_type == "curved"):
                curvature = element.get("curvature", 0.0)
                if (abs(curvature) < epsilon_c):
                    print("[SAMPLE TABLE] WARNING: curved road element must have curvature greater than " + str(epsilon_c) + ". Hence, increasing the curvature of this element to the minimum.")
                    curvature = np.copysign(epsilon_c, curvature)
                if ("angle_in_degrees" in element):
                    length = (np.pi/180.0) * element["angle_in_degrees"] / abs(curvature)
                elif ("length" in element):
                    length = element["length"]
                else:
                    print("[SAMPLE TABLE] ERROR: curved road element specification is invalid, element = " + str(element) + ". SKIPPING this element.")
                    continue
            else:
                print("[SAMPLE TABLE] ERROR: road element type is invalid, element = " + str(element) + ". SKIPPING this element.")
                continue

            if (length <= 0):
                print("[SAMPLE TABLE] ERROR: road elements must have a positive length, element = " + str(element) + ". SKIPPING this element.")
                continue

            curvatures.append(float(curvature))
            lengths.append(float(length))

        if (len(lengths) == 0) or (u_inc <= 0.0):
            print("[SAMPLE TABLE] ERROR: no valid road elements (or a non-positive u increment) given to \"from_road_elements\".")
            return cls(u_first=u_first, u_inc=1.0, x=None, y=None)

        # Adjust the increment so that the end of the road is a sample
        total_length = float(np.sum(lengths))
        num_samples = max(2, int(round(total_length / u_inc)) + 1)
        u_inc_adjusted = total_length / (num_samples - 1)
        s_queries = np.arange(num_samples, dtype=np.float64) * u_inc_adjusted
        s_queries[-1] = total_length

        x, y = SampleTable.points_along_road_elements(np.array(curvatures), np.array(lengths), s_queries)

        return cls(u_first=u_first, u_inc=u_inc_adjusted, x=x, y=y, is_closed=is_closed, close_tolerance=close_tolerance)



    @staticmethod
    def points_along_road_elements(curvatures, lengths, s_queries):
        """
        Computes the world frame coordinates of points along a road made of
        straight and circular-arc elements, where the length of the road from
        its start equals the query values.

        Parameters
        ----------
            curvatures : numpy array, 1-dimensional
                Curvature of each element, zero for a straight (units: 1/m).
            lengths : numpy array, 1-dimensional
                Length of each element (units: m).
            s_queries : numpy array, 1-dimensional
                Length along the road of each point, within [0, sum(lengths)] (units: m).

        Returns
        -------
            x, y : numpy arrays, 1-dimensional
                World frame coordinates of each query point (units: m).
        """
        num_elements = lengths.shape[0]

        # Compute the start point and start angle of each element
        start_points = np.zeros((num_elements, 2), dtype=np.float64)
        start_angles = np.zeros((num_elements,), dtype=np.float64)
        for idx in range(1, num_elements):
            chord_length, chord_angle = SampleTable.__chord_along_element(curvatures[idx-1], start_angles[idx-1], lengths[idx-1])
            start_points[idx,0] = start_points[idx-1,0] + chord_length * np.cos(chord_angle)
            start_points[idx,1] = start_points[idx-1,1] + chord_length * np.sin(chord_angle)
            start_angles[idx] = start_angles[idx-1] + curvatures[idx-1] * lengths[idx-1]

        # Compute the index of the road element for each query
        l_total_at_end = np.cumsum(lengths)
        element_idxs = np.searchsorted(l_total_at_end, s_queries, side="left")
        element_idxs = np.minimum(element_idxs, num_elements-1)

        # Compute the coordinates
        x = np.zeros((s_queries.shape[0],), dtype=np.float64)
        y = np.zeros((s_queries.shape[0],), dtype=np.float64)
        for i_query, this_idx in enumerate(element_idxs):
            # > Distance from the start of this element
            this_ds = s_queries[i_query] - (l_total_at_end[this_idx] - lengths[this_idx])
            chord_length, chord_angle = SampleTable.__chord_along_element(curvatures[this_idx], start_angles[this_idx], this_ds)
            x[i_query] = start_points[this_idx,0] + chord_length * np.cos(chord_angle)
            y[i_query] = start_points[this_idx,1] + chord_length * np.sin(chord_angle)

        return x, y



    @staticmethod
    def __chord_along_element(curvature, start_angle, ds):
        # Straight chord from the start of an element to the point "ds" along it
        if (curvature == 0.0):
            return ds, start_angle
        this_phi = ds * abs(curvature)
        chord_length = 2.0 * (1.0/abs(curvature)) * np.sin(0.5*this_phi)
        chord_angle = start_angle + np.sign(curvature) * 0.5 * this_phi
        return chord_length, chord_angle



    @staticmethod
    def compute_chord_headings(x, y):
        """
        Computes the heading of the chord from each sample to the next one,
        with the last sample repeating the heading of the last chord. The
        result is unwrapped, i.e., free of 2*pi jumps.
        """
        phi = np.empty((x.shape[0],), dtype=np.float64)
        phi[:-1] = np.arctan2(np.diff(y), np.diff(x))
        phi[-1] = phi[-2]
        return np.unwrap(phi)



    def is_valid(self):
        return bool(self.channel_x.valid and (self.channel_x.size > 0))

    def get_u_axis(self): return np.copy(self.u_axis.first + np.arange(self.u_axis.size) * self.u_axis.inc)
    def get_x(self): return np.copy(self.channel_x.data)
    def get_y(self): return np.copy(self.channel_y.data)
    def get_phi(self): return np.copy(self.channel_phi.data)
    def get_num_samples(self): return self.u_axis.size

    def get_u_range(self):
        return self.u_axis.first, self.u_axis.last



    def get_segment_midpoint_tree(self):
        """
        Returns a KD-tree of the midpoints of all segments, i.e., of the
        chords between consecutive samples. Built on first use and then kept,
        which requires the table not to be modified afterwards.
        """
        if (self.__midpoint_tree is None) and self.is_valid():
            midpoints = np.column_stack((
                0.5 * (self.channel_x.data[:-1] + self.channel_x.data[1:]),
                0.5 * (self.channel_y.data[:-1] + self.channel_y.data[1:]),
            ))
            self.__midpoint_tree = cKDTree(midpoints)
        return self.__midpoint_tree



    def render_reference_line(self, axis_handle):
        """
        Plot the reference line.

        Parameters
        ----------
            axis_handle : matplotlib.axes
                A handle for where the reference line is plotted.

        Returns
        -------
            plot_handles : [matplotlib.lines.Line2D]
                The handles to the lines that are plotted.
        """
        plot_handles = []
        if not(self.is_valid()):
            print("[SAMPLE TABLE] WARNING: nothing to render, the table is empty.")
            return plot_handles

        # Plot the centerline
        this_handles = axis_handle.plot(self.channel_x.data, self.channel_y.data, color=(0.0,0.0,0.0), linewidth=1.0)
        for handle in this_handles: plot_handles.append( handle )

        # Mark the start of the line
        this_handles = axis_handle.plot(self.channel_x.first, self.channel_y.first, color=(0.3,0.3,0.3), marker="o", markersize=4, linewidth=0)
        for handle in this_handles: plot_handles.append( handle )

        return plot_handles

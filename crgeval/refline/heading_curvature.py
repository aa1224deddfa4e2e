#!/usr/bin/env python

import numpy as np

from crgeval.refline.geometry import cross_2d
from crgeval.refline.options import has_flag, CURV_MODE, CURV_MODE_LATERAL
from crgeval.refline.uv_to_xy import wrap_u_if_closed, find_u_index

# Length of road over which the curvature is computed (units: m)
CURVATURE_BASE_LENGTH = 0.5
# Curvatures below this are treated as a straight line (units: 1/m)
EPSILON_CURVATURE = 1.0e-10
# Radii below this are treated as hitting the center of the curve (units: m)
EPSILON_RADIUS = 1.0e-6
# Curvature returned at the center of the curve (units: 1/m)
MAX_CURVATURE = 1.0e6



def curvature_span(sample_table):
    """
    Number of samples that cover approximately CURVATURE_BASE_LENGTH of road,
    at least one.
    """
    return max(1, int(np.floor(CURVATURE_BASE_LENGTH / sample_table.u_axis.inc)))



def evaluate_uv_to_heading_curvature(sample_table, options, u, v):
    """
    Computes the heading and the curvature of the road at a road-relative
    position (u,v).

    The heading is NOT interpolated: the reference line is a sequence of
    straight chords with a discrete change of direction at each sample, so
    the heading of the sample at or before u is returned.

    The curvature is computed from the cross product of two consecutive
    chords spanning approximately CURVATURE_BASE_LENGTH each, defined by the
    three samples P0 = index-nU, P1 = index, P2 = index+nU:
        curv = dphi/ds = (P1-P0) x (P2-P1) / (nU*u_inc)**3
    Within nU samples of either end, the heading of that end and zero
    curvature are returned.

    If the option "curv_mode" is set to "lateral", the curvature of the path
    at lateral offset v is returned instead, i.e., 1/(1/curv - v). When v
    hits the center of the curve, MAX_CURVATURE is returned.

    Parameters
    ----------
        sample_table : SampleTable
            The reference line. May be None.
        options : Options
            The options of the caller (may be None for the defaults).
        u : float
            Position along the reference line (units: m).
        v : float
            Lateral offset from the reference line, positive to the left (units: m).

    Returns
    -------
        is_ok : bool
            False if no valid reference line is available.
        phi : float
            Heading of the road, 0.0 if is_ok is False (units: radians).
        curv : float
            Curvature of the road, positive for a left turn, 0.0 if is_ok is
            False (units: 1/m).
    """
    # The fallback solution
    if (sample_table is None) or not(sample_table.is_valid()):
        return False, 0.0, 0.0
    if not(np.isfinite(u)) or not(np.isfinite(v)):
        return False, 0.0, 0.0

    # On closed reference lines, u must be adapted
    u = wrap_u_if_closed(sample_table, options, u)

    # Find the sample at or before u
    index, _ = find_u_index(sample_table, u)

    n_u = curvature_span(sample_table)

    # Too close to the start of the road
    if (index < n_u):
        return True, float(sample_table.channel_phi.first), 0.0

    # Too close to the end of the road
    if (index + n_u >= sample_table.channel_phi.size):
        return True, float(sample_table.channel_phi.last), 0.0

    data_x = sample_table.channel_x.data
    data_y = sample_table.channel_y.data
    chord_0 = np.array([data_x[index] - data_x[index-n_u], data_y[index] - data_y[index-n_u]], dtype=np.float64)
    chord_1 = np.array([data_x[index+n_u] - data_x[index], data_y[index+n_u] - data_y[index]], dtype=np.float64)
    curv = cross_2d(chord_0, chord_1) / (sample_table.u_axis.inc * n_u)**3

    # Take v into account if the corresponding option is set
    if has_flag(options, CURV_MODE, CURV_MODE_LATERAL) and (abs(curv) > EPSILON_CURVATURE):
        radius = 1.0/curv - v
        if (abs(radius) < EPSILON_RADIUS):
            curv = MAX_CURVATURE
        else:
            curv = 1.0/radius

    phi = sample_table.channel_phi.data[index]

    return True, float(phi), float(curv)

#!/usr/bin/env python

import numpy as np

from crgeval.refline.geometry import normal_2d, normalize_2d, dot_2d

# Dot products below this leave the averaged normal unscaled
EPSILON_DOT = 1.0e-10



def wrap_u_if_closed(sample_table, options, u):
    """
    Maps u into the valid domain of a closed reference line, i.e., the half
    open interval [u_first, u_last). The last sample of a closed line lies on
    top of the first one, hence u_last is mapped onto u_first. On an open
    reference line, u is returned unchanged.

    Parameters
    ----------
        sample_table : SampleTable
            The reference line.
        options : Options
            Currently not consulted, kept so that all evaluation functions
            share one signature.
        u : float
            Position along the reference line (units: m).

    Returns
    -------
        u : float
            The wrapped position along the reference line (units: m).
    """
    if not(sample_table.is_closed):
        return u
    u_first, u_last = sample_table.get_u_range()
    period = u_last - u_first
    if (period <= 0.0):
        return u
    return u_first + np.mod(u - u_first, period)



def find_u_index(sample_table, u):
    """
    Locates the segment [index, index+1] for u on the constantly spaced u
    axis. The index is clamped to [0, size-2], so the returned fraction is
    below 0 before the first sample and above 1 beyond the last sample.

    Returns
    -------
        index : int
        frac : float
            Position within the segment, in units of the increment.
    """
    frac = (u - sample_table.u_axis.first) / sample_table.u_axis.inc
    if (frac < 0.0):
        index = 0
    else:
        index = int(np.floor(frac))
        if (index >= sample_table.channel_x.size - 1):
            index = sample_table.channel_x.size - 2
    return index, frac - index



def segment_corners(sample_table, index):
    """
    Computes the corners of the quadrilateral that is swept by the segment
    [index, index+1] when offset laterally: the segment end points P1 and P2
    and the (scaled) offset directions n1 and n2 through them, such that the
    point at lateral offset v is P1 + v*n1 at the start of the segment and
    P2 + v*n2 at its end.

    The direction through a sample averages the two segments that meet
    there, by taking the normal of the chord between its neighbouring samples.
    It is then scaled by 1/(n.n12), so that moving v along it moves exactly v
    away from the segment. On a closed line, the neighbours of the first and
    last segments are taken from across the seam. Without a neighbouring
    sample, i.e., at the ends of an open line, the normal of the segment
    itself is used.

    Returns
    -------
        p1, p2, n1, n2 : numpy arrays, shape (2,)
    """
    data_x = sample_table.channel_x.data
    data_y = sample_table.channel_y.data

    # End points of the segment
    p1 = np.array([data_x[index], data_y[index]], dtype=np.float64)
    p2 = np.array([data_x[index+1], data_y[index+1]], dtype=np.float64)

    # Normal of the segment
    n12 = normalize_2d(normal_2d(p1, p2))

    # > On a closed line, the samples across the seam are the neighbours
    #   (the last sample lies on top of the first one)
    num_samples = sample_table.channel_x.size
    wraps_at_seam = sample_table.is_closed and (num_samples > 3)

    # Direction through P1, taking P0 into account if it exists
    n1 = n12
    idx_p0 = index - 1
    if (idx_p0 < 0) and wraps_at_seam:
        idx_p0 = num_samples - 2
    if (idx_p0 >= 0):
        p0 = np.array([data_x[idx_p0], data_y[idx_p0]], dtype=np.float64)
        n1 = normalize_2d(normal_2d(p0, p2))
    dot_prod = dot_2d(n1, n12)
    if (abs(dot_prod) > EPSILON_DOT):
        n1 = n1 / dot_prod

    # Direction through P2, taking P3 into account if it exists
    n2 = n12
    idx_p3 = index + 2
    if (idx_p3 > num_samples - 1) and wraps_at_seam:
        idx_p3 = 1
    if (idx_p3 <= num_samples - 1):
        p3 = np.array([data_x[idx_p3], data_y[idx_p3]], dtype=np.float64)
        n2 = normalize_2d(normal_2d(p1, p3))
    dot_prod = dot_2d(n2, n12)
    if (abs(dot_prod) > EPSILON_DOT):
        n2 = n2 / dot_prod

    return p1, p2, n1, n2



def evaluate_uv_to_xy(sample_table, options, u, v):
    """
    Converts a road-relative position (u,v) into world frame coordinates
    (x,y).

    Before the first sample and beyond the last sample, the reference line is
    extended by a straight line along the heading of the respective end.
    Within the samples, the offset point is interpolated linearly between the
    points at lateral offset v at both ends of the segment (see
    "segment_corners").

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
        x : float
            World frame x-axis coordinate, equal to u if is_ok is False (units: m).
        y : float
            World frame y-axis coordinate, equal to v if is_ok is False (units: m).
    """
    # The fallback solution
    if (sample_table is None) or not(sample_table.is_valid()):
        return False, u, v
    if not(np.isfinite(u)) or not(np.isfinite(v)):
        return False, u, v

    # On closed reference lines, u must be adapted
    u = wrap_u_if_closed(sample_table, options, u)

    # Find the u interval on the constantly spaced u axis
    index, frac = find_u_index(sample_table, u)
    u_inc = sample_table.u_axis.inc

    # Extrapolation before the first sample
    if (frac < 0.0):
        du = frac * u_inc
        x = sample_table.channel_x.first + du * sample_table.phi_first_cos - v * sample_table.phi_first_sin
        y = sample_table.channel_y.first + du * sample_table.phi_first_sin + v * sample_table.phi_first_cos
        return True, float(x), float(y)

    # Extrapolation beyond the last sample
    if (frac > 1.0):
        du = (frac - 1.0) * u_inc
        x = sample_table.channel_x.last + du * sample_table.phi_last_cos - v * sample_table.phi_last_sin
        y = sample_table.channel_y.last + du * sample_table.phi_last_sin + v * sample_table.phi_last_cos
        return True, float(x), float(y)

    # Interpolate between the offset points at both ends of the segment
    p1, p2, n1, n2 = segment_corners(sample_table, index)
    a = p1 + v * n1
    b = p2 + v * n2
    p = a + frac * (b - a)

    return True, float(p[0]), float(p[1])

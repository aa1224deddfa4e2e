#!/usr/bin/env python

import numpy as np

from crgeval.refline.options import get_option, XY_TO_UV_MAX_ITERATIONS, XY_TO_UV_TOLERANCE, XY_TO_UV_NUM_CANDIDATES
from crgeval.refline.uv_to_xy import segment_corners, wrap_u_if_closed

# Slack on the segment fraction when accepting a candidate
EPSILON_FRAC = 1.0e-9
# Jacobian determinants below this stop the Newton iterations
EPSILON_DET = 1.0e-14



def invert_segment(sample_table, index, p_query, max_iterations, tolerance):
    """
    Inverts the lateral offset mapping of one segment, i.e., finds (frac,v)
    such that
        P1 + v*n1 + frac * (P2 - P1 + v*(n2 - n1)) = p_query
    which is the mapping used by "evaluate_uv_to_xy" within a segment. The
    mapping is bilinear in (frac,v), hence a few Newton iterations started
    from the orthogonal projection onto the segment are enough.

    Returns
    -------
        frac : float
            Position within the segment, in units of the increment. NaN if
            the iterations failed or did not converge within "max_iterations".
        v : float
            Lateral offset (units: m). NaN if the iterations failed.
    """
    p1, p2, n1, n2 = segment_corners(sample_table, index)
    d12 = p2 - p1
    dn = n2 - n1

    # Initial guess from projecting onto the segment
    length_sq = float(np.dot(d12, d12))
    if (length_sq <= 0.0):
        return np.nan, np.nan
    w = p_query - p1
    frac = float(np.dot(w, d12)) / length_sq
    v = float(w[0]*(-d12[1]) + w[1]*d12[0]) / np.sqrt(length_sq)

    # Residuals at round-off level of the coordinates also count as converged
    residual_tolerance = tolerance * max(1.0, float(np.max(np.abs(p_query))))

    has_converged = False
    for _ in range(max_iterations):
        # Residual of the mapping
        residual = p1 + v*n1 + frac*(d12 + v*dn) - p_query
        if (np.hypot(residual[0], residual[1]) <= residual_tolerance):
            has_converged = True
            break
        # Jacobian with respect to (frac,v)
        j_frac = d12 + v*dn
        j_v = n1 + frac*dn
        det = j_frac[0]*j_v[1] - j_frac[1]*j_v[0]
        if (abs(det) < EPSILON_DET):
            return np.nan, np.nan
        # Solve the 2x2 system by Cramer's rule
        step_frac = (residual[0]*j_v[1] - residual[1]*j_v[0]) / det
        step_v = (j_frac[0]*residual[1] - j_frac[1]*residual[0]) / det
        frac = frac - step_frac
        v = v - step_v
        if (abs(step_frac) < tolerance) and (abs(step_v) < tolerance):
            has_converged = True
            break

    if not(has_converged):
        return np.nan, np.nan
    return frac, v



def evaluate_xy_to_uv(sample_table, options, x, y):
    """
    Converts world frame coordinates (x,y) into a road-relative position
    (u,v), as the inverse of "evaluate_uv_to_xy".

    The segments with the nearest midpoints are inverted one by one, and on
    an open reference line also the straight extensions before the first and
    beyond the last sample. Of all candidates that actually contain the query
    point, the one with the smallest lateral offset is returned. If no
    candidate contains the query point, it is projected onto the heading
    normal of the nearest sample.

    Parameters
    ----------
        sample_table : SampleTable
            The reference line. May be None.
        options : Options
            The options of the caller (may be None for the defaults).
        x : float
            World frame x-axis coordinate (units: m).
        y : float
            World frame y-axis coordinate (units: m).

    Returns
    -------
        is_ok : bool
            False if no valid reference line is available.
        u : float
            Position along the reference line, equal to x if is_ok is False (units: m).
        v : float
            Lateral offset from the reference line, equal to y if is_ok is False (units: m).
    """
    # The fallback solution
    if (sample_table is None) or not(sample_table.is_valid()):
        return False, x, y
    if not(np.isfinite(x)) or not(np.isfinite(y)):
        return False, x, y

    max_iterations = int(get_option(options, XY_TO_UV_MAX_ITERATIONS))
    tolerance = float(get_option(options, XY_TO_UV_TOLERANCE))
    num_candidates = int(get_option(options, XY_TO_UV_NUM_CANDIDATES))

    u_first = sample_table.u_axis.first
    u_inc = sample_table.u_axis.inc
    p_query = np.array([x, y], dtype=np.float64)

    # Candidates as tuples of (u, v)
    candidates = []

    # > The segments nearest to the query point
    tree = sample_table.get_segment_midpoint_tree()
    num_segments = sample_table.channel_x.size - 1
    _, idxs = tree.query(p_query, k=max(1, min(num_candidates, num_segments)))
    for index in np.atleast_1d(idxs):
        frac, v = invert_segment(sample_table, int(index), p_query, max_iterations, tolerance)
        if np.isnan(frac):
            continue
        if (frac >= -EPSILON_FRAC) and (frac <= 1.0 + EPSILON_FRAC):
            frac = min(max(frac, 0.0), 1.0)
            candidates.append((u_first + (int(index) + frac) * u_inc, v))

    # > The straight extensions at both ends of an open reference line
    if not(sample_table.is_closed):
        dx = x - sample_table.channel_x.first
        dy = y - sample_table.channel_y.first
        du = dx * sample_table.phi_first_cos + dy * sample_table.phi_first_sin
        if (du < 0.0):
            v = -dx * sample_table.phi_first_sin + dy * sample_table.phi_first_cos
            candidates.append((u_first + du, v))

        dx = x - sample_table.channel_x.last
        dy = y - sample_table.channel_y.last
        du = dx * sample_table.phi_last_cos + dy * sample_table.phi_last_sin
        if (du > 0.0):
            v = -dx * sample_table.phi_last_sin + dy * sample_table.phi_last_cos
            candidates.append((sample_table.u_axis.last + du, v))

    if (len(candidates) > 0):
        u, v = min(candidates, key=lambda candidate: abs(candidate[1]))
        # > The seam sample of a closed line is reported as the first one
        u = wrap_u_if_closed(sample_table, options, u)
        return True, float(u), float(v)

    # Nothing contains the query point, project onto the nearest sample
    distances = np.hypot(sample_table.channel_x.data - x, sample_table.channel_y.data - y)
    nearest_idx = int(np.argmin(distances))
    this_phi = sample_table.channel_phi.data[nearest_idx]
    dx = x - sample_table.channel_x.data[nearest_idx]
    dy = y - sample_table.channel_y.data[nearest_idx]
    u = u_first + nearest_idx * u_inc + dx * np.cos(this_phi) + dy * np.sin(this_phi)
    v = -dx * np.sin(this_phi) + dy * np.cos(this_phi)
    u = wrap_u_if_closed(sample_table, options, u)
    return True, float(u), float(v)

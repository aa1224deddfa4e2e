#!/usr/bin/env python

import numpy as np

# Vectors shorter than this are left unnormalized
EPSILON_LENGTH = 1.0e-10



def normal_2d(p_from, p_to):
    """
    Computes the left-hand perpendicular of the chord from "p_from" to "p_to",
    i.e., the chord rotated by +90 degrees. The result is NOT normalized.

    Parameters
    ----------
        p_from : numpy array, shape (2,)
            Start point of the chord (units: m).
        p_to : numpy array, shape (2,)
            End point of the chord (units: m).

    Returns
    -------
        n : numpy array, shape (2,)
            The perpendicular vector, same length as the chord (units: m).
    """
    return np.array([-(p_to[1] - p_from[1]), (p_to[0] - p_from[0])], dtype=np.float64)



def normalize_2d(vec):
    """
    Returns a unit-length copy of "vec". Vectors with a magnitude below
    EPSILON_LENGTH are returned unchanged, so a degenerate (zero-length) chord
    never causes a division by zero.
    """
    length = np.sqrt(vec[0]*vec[0] + vec[1]*vec[1])
    if (length < EPSILON_LENGTH):
        return np.array(vec, dtype=np.float64)
    return np.array([vec[0]/length, vec[1]/length], dtype=np.float64)



def dot_2d(a, b):
    return float(a[0]*b[0] + a[1]*b[1])



def cross_2d(a, b):
    """z-component of the cross product of two 2D vectors, positive for a left turn from a to b."""
    return float(a[0]*b[1] - a[1]*b[0])

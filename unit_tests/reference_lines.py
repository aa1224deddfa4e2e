#!/usr/bin/env python

import numpy as np

from crgeval.refline.sample_table import SampleTable

# Road used by the round-trip tests and the example scripts
ROAD_ELEMENTS_LIST = [
    {"type":"straight", "length":10.0},
    {"type":"curved", "curvature":1/20.0, "angle_in_degrees":90.0},
    {"type":"straight", "length":10.0},
    {"type":"curved", "curvature":-1/25.0, "angle_in_degrees":60.0},
    {"type":"straight", "length":5.0},
]

def make_straight_table(num_samples=11, u_inc=1.0, heading=0.0):
    """Straight reference line starting at the origin, with a sample every "u_inc" along "heading"."""
    s = np.arange(num_samples, dtype=np.float64) * u_inc
    x = s * np.cos(heading)
    y = s * np.sin(heading)
    phi = np.full((num_samples,), heading, dtype=np.float64)
    return SampleTable(u_first=0.0, u_inc=u_inc, x=x, y=y, phi=phi)

def make_arc_table(radius=10.0, u_inc=0.1, num_segments=157, clockwise=False):
    """
    Circular arc starting at the origin with heading 0, turning left (or
    right if "clockwise"), with "num_segments" chords of equal length.
    """
    theta = np.arange(num_segments+1, dtype=np.float64) * (u_inc / radius)
    x = radius * np.sin(theta)
    y = radius * (1.0 - np.cos(theta))
    if clockwise:
        y = -y
    return SampleTable.from_points(x, y)

def make_closed_circle_table(radius=10.0, num_segments=400):
    """Full circle, counterclockwise, whose last sample is on top of the first one."""
    theta = np.linspace(0.0, 2.0*np.pi, num=num_segments+1, endpoint=True)
    x = radius * np.sin(theta)
    y = radius * (1.0 - np.cos(theta))
    return SampleTable.from_points(x, y)

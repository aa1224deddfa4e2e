#!/usr/bin/env python

import numpy as np
import matplotlib.pyplot as plt

from crgeval.refline.uv_to_xy import evaluate_uv_to_xy, wrap_u_if_closed
from crgeval.refline.xy_to_uv import evaluate_xy_to_uv

def plot_uv_grid_in_xy(sample_table, plot_path_and_name, v_half_width=2.0, num_steps_u=20, num_steps_v=8, num_border_u=5):

    print("[UNIT TESTING] Starting test for mapping a grid of (u,v) road positions to (x,y) coordinates")

    # Open a figure
    fig, axs = plt.subplots(1, 1, sharex=False, sharey=False, gridspec_kw={"left":0.15, "right": 0.95, "top":0.92,"bottom":0.18})

    # Render the reference line
    road_handles = sample_table.render_reference_line(axs)

    # Make the reference line thicker
    for handle in road_handles:
        handle.set_linewidth(3.0)

    # Create the grid, extending beyond both ends of the u axis
    u_first, u_last = sample_table.get_u_range()
    u_step = (u_last - u_first) / num_steps_u
    u_grid_test = u_first + u_step * np.arange(-num_border_u, num_steps_u+num_border_u+1, dtype=np.float64)
    v_grid_test = np.linspace(-v_half_width, v_half_width, num=num_steps_v+1, endpoint=True)

    # Initialize arrays for storing the results
    plot_points_x = np.empty((u_grid_test.size, v_grid_test.size))
    plot_points_y = np.empty((u_grid_test.size, v_grid_test.size))

    print("[UNIT TESTING] Now computing (x,y) for " + str(plot_points_x.size) + " grid points.")

    # Overall flag
    found_nan_somewhere = False

    # Iterate through all the points
    for i_u, u in enumerate(u_grid_test):
        for i_v, v in enumerate(v_grid_test):
            is_ok, x, y = evaluate_uv_to_xy(sample_table, None, u, v)
            if not(is_ok) or np.isnan(x) or np.isnan(y):
                print("[UNIT TESTING] invalid result for test coordinate (u,v) = ( " + str(u) + " , " + str(v) + " )")
                found_nan_somewhere = True
            plot_points_x[i_u,i_v] = x
            plot_points_y[i_u,i_v] = y

    print("[UNIT TESTING] Finished computing the grid points.")

    if not(found_nan_somewhere):
        print("[UNIT TESTING] Test PASSED.")
    else:
        print("[UNIT TESTING] Test FAILED.")

    print("[UNIT TESTING] Now plotting the results")
    # Plot the lines of constant v, and the lines of constant u
    axs.plot(plot_points_x, plot_points_y, color="blue", linewidth=0.5, linestyle="-")
    axs.plot(np.transpose(plot_points_x), np.transpose(plot_points_y), color="red", linewidth=0.5, linestyle="-")

    # Set the labels:
    axs.set_xlabel('x [meters]', fontsize=10)
    axs.set_ylabel('y [meters]', fontsize=10)

    # Add grid lines
    axs.grid(visible=True, which="both", axis="both", linestyle='--')

    # Set the aspect ratio for equally scaled axes
    axs.set_aspect('equal', adjustable='box')

    # Add an overall figure title
    fig.suptitle("Testing the (u,v) to (x,y) mapping", fontsize=12)

    # Save the plot
    fig.savefig(plot_path_and_name)
    plt.close(fig)
    print("[UNIT TESTING] Finished plotting results, figure saved at: " + str(plot_path_and_name))

    return not(found_nan_somewhere)



def round_trip_is_valid(sample_table, plot_path_and_name, v_half_width=2.0, num_steps_u=20, num_steps_v=8, num_border_u=2, tolerance=1.0e-5):

    print("[UNIT TESTING] Starting test for converting (u,v) to (x,y) and back to (u,v)")

    # Open a figure
    fig, axs = plt.subplots(1, 1, sharex=False, sharey=False, gridspec_kw={"left":0.15, "right": 0.95, "top":0.92,"bottom":0.18})

    # Render the reference line
    sample_table.render_reference_line(axs)

    # Create the grid, extending beyond both ends of the u axis
    u_first, u_last = sample_table.get_u_range()
    period = u_last - u_first
    u_step = (u_last - u_first) / num_steps_u
    u_grid_test = u_first + u_step * np.arange(-num_border_u, num_steps_u+num_border_u+1, dtype=np.float64)
    v_grid_test = np.linspace(-v_half_width, v_half_width, num=num_steps_v+1, endpoint=True)

    # Initialize lists for storing the points that pass and fail
    points_passed = []
    points_failed = []

    for u in u_grid_test:
        for v in v_grid_test:
            is_ok_xy, x, y = evaluate_uv_to_xy(sample_table, None, u, v)
            is_ok_uv, u_back, v_back = evaluate_xy_to_uv(sample_table, None, x, y)

            delta_u = u - u_back
            delta_v = v - v_back
            # > On a closed line, u is only defined up to multiples of the period
            if (sample_table.is_closed):
                delta_u = wrap_u_if_closed(sample_table, None, u_first + delta_u + 0.5*period) - u_first - 0.5*period

            if not(is_ok_xy and is_ok_uv) or (abs(delta_u) > tolerance) or (abs(delta_v) > tolerance):
                print("[UNIT TESTING] computation error when converting back: u/v = " + "{:+10.4f} / {:+10.4f}".format(u, v) + " ----> x/y = " + "{:+10.4f} / {:+10.4f}".format(x, y) + " ----> du/dv = " + "{:.8f} / {:.8f}".format(delta_u, delta_v))
                points_failed.append((x, y))
            else:
                points_passed.append((x, y))

    print("[UNIT TESTING] Finished checking " + str(len(points_passed) + len(points_failed)) + " round trips.")

    if (len(points_failed) == 0):
        print("[UNIT TESTING] Test PASSED.")
    else:
        print("[UNIT TESTING] Test FAILED.")

    print("[UNIT TESTING] Now plotting the results")
    if (len(points_passed) > 0):
        points_passed = np.array(points_passed)
        axs.plot(points_passed[:,0], points_passed[:,1], color="blue", linewidth=0, marker="o", markersize=2, markeredgewidth=0.0)
    if (len(points_failed) > 0):
        points_failed = np.array(points_failed)
        axs.plot(points_failed[:,0], points_failed[:,1], color="red", linewidth=0, marker="x", markersize=4)

    # Set the labels:
    axs.set_xlabel('x [meters]', fontsize=10)
    axs.set_ylabel('y [meters]', fontsize=10)

    # Add grid lines
    axs.grid(visible=True, which="both", axis="both", linestyle='--')

    # Set the aspect ratio for equally scaled axes
    axs.set_aspect('equal', adjustable='box')

    # Add an overall figure title
    fig.suptitle("Testing the (u,v) to (x,y) to (u,v) round trip", fontsize=12)

    # Save the plot
    fig.savefig(plot_path_and_name)
    plt.close(fig)
    print("[UNIT TESTING] Finished plotting results, figure saved at: " + str(plot_path_and_name))

    return (len(points_failed) == 0)

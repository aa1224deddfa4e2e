#!/usr/bin/env python

import numpy as np
import matplotlib.pyplot as plt

from crgeval import SampleTable, Options, CrgRegistry
from crgeval.refline.options import CURV_MODE, CURV_MODE_LATERAL



## ----------------------
#  PRINT THE RUNNING PATH
#  ----------------------
import os
# get the current working directory
current_working_directory = os.getcwd()
# print output to the console
print('This script is running from the following path:')
print(current_working_directory)



## -----------------------------------
#  SPECIFY THE PATH FOR SAVING FIGURES
#  -----------------------------------
path_for_saving_figures = 'examples/saved_figures'
os.makedirs(path_for_saving_figures, exist_ok=True)



## ----------------
#  SPECIFY THE ROAD
#  ----------------

road_elements_list = [
    {"type":"straight", "length":10.0},
    {"type":"curved", "curvature":1/20.0, "angle_in_degrees":90.0},
    {"type":"straight", "length":10.0},
    {"type":"curved", "curvature":-1/25.0, "angle_in_degrees":60.0},
    {"type":"straight", "length":5.0},
]

sample_table = SampleTable.from_road_elements(road_elements_list, u_inc=0.1)



## ----------------------------------------
#  REGISTER THE ROAD AND TWO CONTACT POINTS
#  ----------------------------------------

registry = CrgRegistry(verbose=1)
data_set_id = registry.add_data_set(sample_table)

# One contact point for the curvature of the reference line,
# and one for the curvature of the path at the lateral offset
cp_ref_line = registry.create_contact_point(data_set_id)
cp_lateral  = registry.create_contact_point(data_set_id, Options({CURV_MODE: CURV_MODE_LATERAL}))



## -------------------
#  WALK ALONG THE ROAD
#  -------------------

u_first, u_last = sample_table.get_u_range()
v_offset = 1.5

print(" u [m]   | x [m]     y [m]     | u back [m]  v back [m] | phi [deg] | curv ref [1/m]  curv lat [1/m]")

u_walk = np.linspace(u_first - 5.0, u_last + 5.0, num=21, endpoint=True)
xy_walk = np.empty((u_walk.size, 2))
curv_walk = np.empty((u_walk.size, 2))

for i_u, u in enumerate(u_walk):
    # > Road-relative to world frame, and back again
    is_ok_xy, x, y = registry.evaluate_uv_to_xy(cp_ref_line, u, v_offset)
    is_ok_uv, u_back, v_back = registry.evaluate_xy_to_uv(cp_ref_line, x, y)
    # > Heading and curvature, for both curvature modes
    is_ok_ref, phi, curv_ref = registry.evaluate_uv_to_heading_curvature(cp_ref_line, u, v_offset)
    is_ok_lat, _, curv_lat = registry.evaluate_xy_to_heading_curvature(cp_lateral, x, y)

    if not(is_ok_xy and is_ok_uv and is_ok_ref and is_ok_lat):
        print("[EVAL] WARNING: evaluation failed at u = " + str(u))

    xy_walk[i_u,:] = [x, y]
    curv_walk[i_u,:] = [curv_ref, curv_lat]
    print("{:+8.3f} | {:+9.3f} {:+9.3f} | {:+10.4f}  {:+10.4f} | {:+9.3f} | {:+14.5f}  {:+14.5f}".format(u, x, y, u_back, v_back, phi*180.0/np.pi, curv_ref, curv_lat))



## ---------------------------
#  PLOT THE WALK AND CURVATURE
#  ---------------------------

fig, axs = plt.subplots(1, 2, sharex=False, sharey=False, figsize=(10, 4), gridspec_kw={"left":0.08, "right": 0.98, "top":0.90,"bottom":0.15, "wspace":0.3})

# > The road and the offset points
sample_table.render_reference_line(axs[0])
axs[0].plot(xy_walk[:,0], xy_walk[:,1], color="red", linewidth=0, marker="o", markersize=3)
axs[0].set_xlabel('x [meters]', fontsize=10)
axs[0].set_ylabel('y [meters]', fontsize=10)
axs[0].grid(visible=True, which="both", axis="both", linestyle='--')
axs[0].set_aspect('equal', adjustable='box')

# > The curvature along the road, for both curvature modes
axs[1].plot(u_walk, curv_walk[:,0], color="black", linewidth=1.0, marker="o", markersize=3, label="reference line")
axs[1].plot(u_walk, curv_walk[:,1], color="red", linewidth=1.0, marker="x", markersize=4, label="offset " + str(v_offset) + " m")
axs[1].set_xlabel('u [meters]', fontsize=10)
axs[1].set_ylabel('curvature [1/meters]', fontsize=10)
axs[1].grid(visible=True, which="both", axis="both", linestyle='--')
axs[1].legend(loc="upper right", fontsize=8)

fig.suptitle('Walking along the road at a lateral offset', fontsize=12)

# Save the figure
path_and_file_name = path_for_saving_figures + "/" + "reference_line" + "_" + "walk_at_offset" + ".pdf"
fig.savefig(path_and_file_name)
print("Saved figure: " + path_and_file_name)



## --------
#  CLEAN UP
#  --------

registry.release_data_set(data_set_id)

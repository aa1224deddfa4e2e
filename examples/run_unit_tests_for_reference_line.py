#!/usr/bin/env python

from crgeval.refline.sample_table import SampleTable
from unit_tests.reference_line_unit_tests import plot_uv_grid_in_xy
from unit_tests.reference_line_unit_tests import round_trip_is_valid



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

# Specified as a list of dictionaries, where each
# element in the list specifies a segment of the road.
# Example segment dictionaries:
# > {"type":"straight", "length":3.0}
# > {"type":"curved", "curvature":1/50.0, "angle_in_degrees":45.0}
# > {"type":"curved", "curvature":1/50.0, "length":30.0}
road_elements_list = [
    {"type":"straight", "length":20.0},
    {"type":"curved", "curvature":1/30.0, "angle_in_degrees":120.0},
    {"type":"straight", "length":15.0},
    {"type":"curved", "curvature":-1/40.0, "angle_in_degrees":90.0},
    {"type":"straight", "length":10.0},
]

# Sample the road as a reference line, with a sample every 0.25 meters
sample_table = SampleTable.from_road_elements(road_elements_list, u_inc=0.25)



## -------------------------------
#  TEST THE (u,v) TO (x,y) MAPPING
#  -------------------------------

# Specify the path for saving the figure
uv_grid_figure_path_and_name = path_for_saving_figures + "/reference_line_test_of_uv_grid.pdf"
plot_uv_grid_in_xy(sample_table, uv_grid_figure_path_and_name, v_half_width=5.0, num_steps_u=40, num_steps_v=10)


## -------------------------------------------
#  TEST THE (u,v) TO (x,y) TO (u,v) ROUND TRIP
#  -------------------------------------------

# Specify the path for saving the figure
round_trip_figure_path_and_name = path_for_saving_figures + "/reference_line_test_of_round_trip.pdf"
round_trip_is_valid(sample_table, round_trip_figure_path_and_name, v_half_width=5.0, num_steps_u=40, num_steps_v=10)

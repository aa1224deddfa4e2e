from crgeval.refline.sample_table import SampleTable, UAxis, Channel
from crgeval.refline.options import Options, has_flag
from crgeval.refline.uv_to_xy import evaluate_uv_to_xy, wrap_u_if_closed
from crgeval.refline.heading_curvature import evaluate_uv_to_heading_curvature
from crgeval.refline.xy_to_uv import evaluate_xy_to_uv
from crgeval.refline.contact_point import ContactPoint, CrgRegistry

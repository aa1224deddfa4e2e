from crgeval.refline import (
    SampleTable,
    Options,
    ContactPoint,
    CrgRegistry,
    evaluate_uv_to_xy,
    evaluate_uv_to_heading_curvature,
    evaluate_xy_to_uv,
    wrap_u_if_closed,
)

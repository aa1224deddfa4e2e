import numpy as np
import pytest

from crgeval.refline.options import Options, XY_TO_UV_NUM_CANDIDATES
from crgeval.refline.sample_table import SampleTable
from crgeval.refline.uv_to_xy import evaluate_uv_to_xy
from crgeval.refline.xy_to_uv import evaluate_xy_to_uv, invert_segment
from unit_tests.reference_lines import ROAD_ELEMENTS_LIST, make_straight_table, make_arc_table, make_closed_circle_table


def test_straight_line_scenario():
    table = make_straight_table(num_samples=11, u_inc=1.0)
    is_ok, u, v = evaluate_xy_to_uv(table, None, 2.5, 1.0)
    assert is_ok
    assert u == pytest.approx(2.5)
    assert v == pytest.approx(1.0)


@pytest.mark.parametrize("x, y, u_expected, v_expected", [
    (-3.0, 1.0, -3.0, 1.0),
    (-0.5, -2.0, -0.5, -2.0),
    (14.0, -2.0, 14.0, -2.0),
    (10.5, 0.0, 10.5, 0.0),
])
def test_straight_line_extensions(x, y, u_expected, v_expected):
    table = make_straight_table(num_samples=11, u_inc=1.0)
    is_ok, u, v = evaluate_xy_to_uv(table, None, x, y)
    assert is_ok
    assert u == pytest.approx(u_expected)
    assert v == pytest.approx(v_expected)


def test_invert_segment_matches_the_forward_mapping():
    table = make_arc_table(radius=10.0, u_inc=0.1)
    u_inc = table.u_axis.inc
    for index in [0, 3, 77, 156]:
        for frac in [0.0, 0.3, 1.0]:
            for v in [-1.5, 0.0, 2.0]:
                _, x, y = evaluate_uv_to_xy(table, None, (index + frac) * u_inc, v)
                frac_back, v_back = invert_segment(table, index, np.array([x, y]), 20, 1.0e-12)
                assert frac_back == pytest.approx(frac, abs=1.0e-7)
                assert v_back == pytest.approx(v, abs=1.0e-7)


def test_round_trip_on_a_road_of_elements():
    table = SampleTable.from_road_elements(ROAD_ELEMENTS_LIST, u_inc=0.5)
    u_first, u_last = table.get_u_range()
    for u in np.linspace(u_first + 0.1, u_last - 0.1, 53):
        for v in np.linspace(-2.0, 2.0, 9):
            is_ok_xy, x, y = evaluate_uv_to_xy(table, None, u, v)
            is_ok_uv, u_back, v_back = evaluate_xy_to_uv(table, None, x, y)
            assert is_ok_xy and is_ok_uv
            assert u_back == pytest.approx(u, abs=1.0e-6)
            assert v_back == pytest.approx(v, abs=1.0e-6)


def test_round_trip_beyond_the_ends():
    table = SampleTable.from_road_elements(ROAD_ELEMENTS_LIST, u_inc=0.5)
    u_first, u_last = table.get_u_range()
    for u in [u_first - 4.0, u_first - 0.2, u_last + 0.2, u_last + 6.0]:
        for v in [-1.0, 0.0, 1.5]:
            _, x, y = evaluate_uv_to_xy(table, None, u, v)
            is_ok, u_back, v_back = evaluate_xy_to_uv(table, None, x, y)
            assert is_ok
            assert u_back == pytest.approx(u, abs=1.0e-6)
            assert v_back == pytest.approx(v, abs=1.0e-6)


def test_round_trip_at_the_samples_of_an_arc():
    table = make_arc_table(radius=10.0, u_inc=0.1)
    for index in [1, 40, 156]:
        u = index * table.u_axis.inc
        _, x, y = evaluate_uv_to_xy(table, None, u, -0.75)
        _, u_back, v_back = evaluate_xy_to_uv(table, None, x, y)
        assert u_back == pytest.approx(u, abs=1.0e-6)
        assert v_back == pytest.approx(-0.75, abs=1.0e-6)


def test_closed_line_round_trip_stays_within_one_lap():
    table = make_closed_circle_table(radius=10.0)
    u_first, u_last = table.get_u_range()
    for u in np.linspace(5.0, 55.0, 11):
        for v in [-2.0, 0.0, 2.0]:
            _, x, y = evaluate_uv_to_xy(table, None, u, v)
            is_ok, u_back, v_back = evaluate_xy_to_uv(table, None, x, y)
            assert is_ok
            assert u_first <= u_back <= u_last
            assert u_back == pytest.approx(u, abs=1.0e-6)
            assert v_back == pytest.approx(v, abs=1.0e-6)


def test_closed_line_has_no_extensions():
    table = make_closed_circle_table(radius=10.0)
    # Behind the start, which on a circle is the end of the lap
    is_ok, u, v = evaluate_xy_to_uv(table, None, -0.3, 0.0)
    assert is_ok
    assert u > 0.5 * table.u_axis.last
    assert v < 0.0


def test_single_candidate_is_enough_on_a_straight_line():
    table = make_straight_table(num_samples=11, u_inc=1.0)
    options = Options({XY_TO_UV_NUM_CANDIDATES: 1})
    is_ok, u, v = evaluate_xy_to_uv(table, options, 6.25, -0.5)
    assert is_ok
    assert u == pytest.approx(6.25)
    assert v == pytest.approx(-0.5)


def test_fallback_without_valid_data():
    assert evaluate_xy_to_uv(None, None, 3.0, 4.0) == (False, 3.0, 4.0)
    invalid_table = SampleTable(u_first=0.0, u_inc=0.0, x=[0.0, 1.0], y=[0.0, 0.0])
    assert evaluate_xy_to_uv(invalid_table, None, 3.0, 4.0) == (False, 3.0, 4.0)
    table = make_straight_table()
    is_ok, u, _ = evaluate_xy_to_uv(table, None, np.nan, 4.0)
    assert not(is_ok)
    assert np.isnan(u)


def test_unconverged_segment_inversion_is_not_a_hit():
    table = make_arc_table(radius=10.0, u_inc=0.1)
    u_inc = table.u_axis.inc
    _, x, y = evaluate_uv_to_xy(table, None, (40 + 0.3) * u_inc, 1.5)
    p_query = np.array([x, y])
    frac, v = invert_segment(table, 40, p_query, 1, 1.0e-12)
    assert np.isnan(frac) and np.isnan(v)
    frac, v = invert_segment(table, 40, p_query, 0, 1.0e-12)
    assert np.isnan(frac) and np.isnan(v)
    frac, v = invert_segment(table, 40, p_query, 20, 1.0e-12)
    assert frac == pytest.approx(0.3, abs=1.0e-7)
    assert v == pytest.approx(1.5, abs=1.0e-7)


def test_segment_inversion_converges_far_from_the_origin():
    theta = np.arange(101, dtype=np.float64) * 0.01
    table = SampleTable.from_points(5.0e4 + 10.0*np.sin(theta), -3.0e4 + 10.0*(1.0 - np.cos(theta)))
    u_inc = table.u_axis.inc
    _, x, y = evaluate_uv_to_xy(table, None, (50 + 0.7) * u_inc, -1.0)
    is_ok, u, v = evaluate_xy_to_uv(table, None, x, y)
    assert is_ok
    assert u == pytest.approx((50 + 0.7) * u_inc, abs=1.0e-6)
    assert v == pytest.approx(-1.0, abs=1.0e-6)


def test_repeated_sample_is_skipped_by_the_inversion():
    # Samples 1 and 2 coincide, i.e., segment 1 has zero length
    table = SampleTable(u_first=0.0, u_inc=1.0, x=[0.0, 1.0, 1.0, 2.0, 3.0], y=np.zeros(5))
    frac, v = invert_segment(table, 1, np.array([1.0, 0.5]), 20, 1.0e-12)
    assert np.isnan(frac) and np.isnan(v)
    is_ok, u, v = evaluate_xy_to_uv(table, None, 1.5, 0.5)
    assert is_ok
    assert u == pytest.approx(2.5)
    assert v == pytest.approx(0.5)


@pytest.mark.parametrize("v", [-2.0, 0.0, 1.0])
def test_closed_line_round_trip_across_the_seam(v):
    table = make_closed_circle_table(radius=10.0)
    u_first, u_last = table.get_u_range()
    for u in [u_first, u_first + 0.05, u_last - 0.05]:
        _, x, y = evaluate_uv_to_xy(table, None, u, v)
        is_ok, u_back, v_back = evaluate_xy_to_uv(table, None, x, y)
        assert is_ok
        assert u_first <= u_back < u_last
        delta_u = abs(u_back - u)
        assert min(delta_u, (u_last - u_first) - delta_u) < 1.0e-6
        assert v_back == pytest.approx(v, abs=1.0e-6)

import pytest

from agriplot.modules.plots.editor import SiblingPlot
from agriplot.modules.plots.validation import FailureReason, is_submittable
from conftest import ring_of

BOUNDARY = ring_of((0, 0), (0, 10), (10, 10), (10, 0))
PLOT = ring_of((1, 1), (1, 3), (3, 3), (3, 1))


def test_valid_plot_passes():
    result = is_submittable(PLOT, BOUNDARY, [SiblingPlot("2", ring_of((5, 5), (5, 7), (7, 7)))])
    assert result.ok
    assert result.reason is None


def test_too_few_vertices_is_checked_first():
    result = is_submittable(ring_of((20, 20), (21, 21)), BOUNDARY)
    assert not result.ok
    assert result.reason == FailureReason.TOO_FEW_VERTICES


def test_vertex_outside_boundary():
    plot = ring_of((1, 1), (1, 3), (11, 3))
    result = is_submittable(plot, BOUNDARY)
    assert result.reason == FailureReason.OUTSIDE_BOUNDARY
    assert result.vertex_index == 2
    assert "land claim area" in result.message


def test_vertices_on_boundary_edge_are_contained():
    plot = ring_of((0, 2), (0, 4), (3, 3))
    assert is_submittable(plot, BOUNDARY).ok


def test_boundary_rule_skipped_without_complete_boundary():
    assert is_submittable(PLOT, ()).ok


def test_overlapping_sibling_names_the_plot():
    sibling = SiblingPlot("5", ring_of((2, 2), (2, 6), (6, 6), (6, 2)), soil_type="Clay")
    result = is_submittable(PLOT, BOUNDARY, [sibling])
    assert result.reason == FailureReason.OVERLAPS_SIBLING
    assert result.sibling_id == "5"
    assert "Clay" in result.message


def test_edge_crossing_sibling_only_caught_in_strict_mode():
    plot = ring_of((4, 1), (4, 9), (6, 9), (6, 1))
    sibling = SiblingPlot("8", ring_of((1, 4), (1, 6), (9, 6), (9, 4)))
    assert is_submittable(plot, BOUNDARY, [sibling]).ok
    result = is_submittable(plot, BOUNDARY, [sibling], strict=True)
    assert result.reason == FailureReason.OVERLAPS_SIBLING


def test_self_intersecting_plot():
    bowtie = ring_of((1, 1), (5, 5), (1, 5), (5, 1))
    assert is_submittable(bowtie, BOUNDARY).reason == FailureReason.SELF_INTERSECTING


@pytest.mark.parametrize("plot, expected", [
    (ring_of((1, 1)), FailureReason.TOO_FEW_VERTICES),
    (ring_of((1, 1), (1, 3), (30, 3)), FailureReason.OUTSIDE_BOUNDARY),
])
def test_first_broken_rule_wins(plot, expected):
    sibling = SiblingPlot("1", ring_of((0, 0), (0, 10), (10, 10), (10, 0)))
    assert is_submittable(plot, BOUNDARY, [sibling]).reason == expected

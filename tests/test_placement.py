"""Tests for evidencemark.layout.placement."""

from __future__ import annotations

import pytest

from evidencemark.config import PlacementConfig
from evidencemark.types import NORMALIZED_EXTENT, AnchorPoint, Finding, HorizontalSide, Side, VerticalSide
from evidencemark.layout.placement import (
    clamp_label_origin,
    count_overlaps,
    directional_offset,
    layout_findings,
    place_label,
    place_labels,
    resolve_overlaps,
)
from evidencemark.utils.geometry import anchor_of, side_of


@pytest.fixture
def cfg() -> PlacementConfig:
    return PlacementConfig(label_width=320, label_height=100, padding=20)


def _inside(p, cfg: PlacementConfig) -> bool:
    return (
        cfg.padding <= p.x
        and p.x + cfg.label_width <= NORMALIZED_EXTENT - cfg.padding
        and cfg.padding <= p.y
        and p.y + cfg.label_height <= NORMALIZED_EXTENT - cfg.padding
    )


class TestDirectionalOffset:
    def test_left_top_pushes_right_down(self, cfg):
        side = Side(HorizontalSide.left, VerticalSide.top)
        assert directional_offset(side, cfg) == (cfg.offset_x, cfg.offset_y)

    def test_right_bottom_pushes_left_up(self, cfg):
        side = Side(HorizontalSide.right, VerticalSide.bottom)
        assert directional_offset(side, cfg) == (-cfg.offset_x, -cfg.offset_y)

    def test_separate_magnitudes(self):
        cfg = PlacementConfig(offset_x=30, offset_y=70)
        side = Side(HorizontalSide.right, VerticalSide.top)
        assert directional_offset(side, cfg) == (-30, 70)


class TestClampLabelOrigin:
    def test_within_range(self):
        assert clamp_label_origin(300, 320, 20, 1000) == 300

    def test_low_and_high(self):
        assert clamp_label_origin(-40, 320, 20, 1000) == 20
        assert clamp_label_origin(960, 320, 20, 1000) == 660

    def test_oversized_label_pins_at_padding(self):
        assert clamp_label_origin(500, 980, 20, 1000) == 20
        assert clamp_label_origin(-500, 2000, 20, 1000) == 20


class TestPlaceLabel:
    def test_top_left_scenario(self, cfg):
        anchor = anchor_of((100, 100, 300, 300))
        assert anchor == AnchorPoint(200, 200)
        side = side_of(anchor)
        assert (side.horizontal, side.vertical) == (HorizontalSide.left, VerticalSide.top)

        p = place_label(anchor, cfg)
        assert p.x >= 20
        assert p.x == pytest.approx(200 + cfg.offset_x)
        assert p.y == pytest.approx(200 + cfg.offset_y)
        assert (p.width, p.height) == (320, 100)

    def test_full_canvas_box(self, cfg):
        anchor = anchor_of((0, 0, 1000, 1000))
        assert anchor == AnchorPoint(500, 500)
        side = side_of(anchor)
        assert (side.horizontal, side.vertical) == (HorizontalSide.right, VerticalSide.bottom)

        p = place_label(anchor, cfg)
        assert p.x == pytest.approx(500 - cfg.offset_x)
        assert p.y == pytest.approx(500 - cfg.offset_y)
        assert _inside(p, cfg)

    def test_bottom_right_corner_clamped(self, cfg):
        p = place_label(AnchorPoint(1000, 1000), cfg)
        assert p.x == pytest.approx(1000 - 320 - 20)
        assert p.y == pytest.approx(1000 - 100 - 20)

    def test_top_left_corner_clamped(self, cfg):
        p = place_label(AnchorPoint(0, 0), cfg)
        assert _inside(p, cfg)

    def test_oversized_label(self):
        cfg = PlacementConfig(label_width=1200, label_height=100, padding=20)
        p = place_label(AnchorPoint(800, 800), cfg)
        assert p.x == 20
        assert p.width == 1200

    def test_default_config(self):
        p = place_label(AnchorPoint(200, 200))
        assert p.width == PlacementConfig().label_width

    @pytest.mark.parametrize("y_min", [0, 125, 250, 499, 500, 750, 1000])
    @pytest.mark.parametrize("x_min", [0, 125, 250, 499, 500, 750, 1000])
    def test_never_escapes_canvas(self, cfg, x_min, y_min):
        for size in (0, 50, 400):
            box = (y_min, x_min, min(y_min + size, 1000), min(x_min + size, 1000))
            p = place_label(anchor_of(box), cfg)
            assert _inside(p, cfg), (box, p)


class TestPlaceLabels:
    def test_empty(self, cfg):
        assert place_labels([], cfg) == []

    def test_order_preserved(self, cfg):
        anchors = [AnchorPoint(100, 100), AnchorPoint(900, 900)]
        placements = place_labels(anchors, cfg)
        assert placements[0] == place_label(anchors[0], cfg)
        assert placements[1] == place_label(anchors[1], cfg)

    def test_identical_boxes_identical_placements(self, cfg):
        anchors = [anchor_of((400, 400, 450, 450))] * 2
        a, b = place_labels(anchors, cfg)
        assert a == b
        assert count_overlaps([a, b]) == 1

    def test_resolve_overlaps_flag(self):
        cfg = PlacementConfig(resolve_overlaps=True)
        anchors = [AnchorPoint(200, 200)] * 3
        placements = place_labels(anchors, cfg)
        assert count_overlaps(placements) == 0
        assert placements[0].y == pytest.approx(240)
        assert placements[1].y == pytest.approx(240 + 100 + cfg.stack_gap)
        assert placements[2].y == pytest.approx(240 + 2 * (100 + cfg.stack_gap))


class TestResolveOverlaps:
    def test_no_collisions_untouched(self, cfg):
        placements = place_labels([AnchorPoint(100, 100), AnchorPoint(900, 900)], cfg)
        assert resolve_overlaps(placements, cfg) == placements

    def test_stacks_above_near_bottom_edge(self, cfg):
        anchors = [AnchorPoint(800, 900)] * 2
        first, second = resolve_overlaps(place_labels(anchors, cfg), cfg)
        assert first.y == pytest.approx(860)
        assert second.y == pytest.approx(860 - cfg.stack_gap - 100)
        assert not first.overlaps(second)

    def test_stays_inside_when_crowded(self, cfg):
        anchors = [AnchorPoint(500, 500)] * 12
        placements = resolve_overlaps(place_labels(anchors, cfg), cfg)
        for p in placements:
            assert _inside(p, cfg)

    def test_deterministic(self, cfg):
        anchors = [AnchorPoint(300 + i * 10, 300) for i in range(5)]
        first = resolve_overlaps(place_labels(anchors, cfg), cfg)
        second = resolve_overlaps(place_labels(anchors, cfg), cfg)
        assert first == second


class TestLayoutFindings:
    def test_matches_manual_pipeline(self, sample_findings, cfg):
        placements = layout_findings(sample_findings, cfg)
        assert len(placements) == len(sample_findings)
        for f, p in zip(sample_findings, placements):
            assert p == place_label(anchor_of(f.box), cfg)

    def test_malformed_box_does_not_raise(self, cfg):
        f = Finding(label="x", description="", box=(float("nan"), -5, 5000, 300))
        (p,) = layout_findings([f], cfg)
        assert _inside(p, cfg)

"""Tests for evidencemark.config."""

from __future__ import annotations

from evidencemark.config import EvidenceMarkConfig, OverlayConfig, PlacementConfig


class TestPlacementConfig:
    def test_defaults(self):
        cfg = PlacementConfig()
        assert cfg.label_width == 320
        assert cfg.label_height == 100
        assert cfg.padding == 20
        assert cfg.resolve_overlaps is False

    def test_custom(self):
        cfg = PlacementConfig(offset_x=10, resolve_overlaps=True)
        assert cfg.offset_x == 10
        assert cfg.resolve_overlaps is True


class TestOverlayConfig:
    def test_defaults(self):
        cfg = OverlayConfig()
        assert cfg.safe_color == "#06b6d4"
        assert cfg.alert_color == "#f43f5e"
        assert cfg.active_stroke_width > cfg.stroke_width
        assert cfg.active_marker_radius > cfg.marker_radius


class TestEvidenceMarkConfig:
    def test_default(self):
        cfg = EvidenceMarkConfig.default()
        assert isinstance(cfg.placement, PlacementConfig)
        assert isinstance(cfg.overlay, OverlayConfig)

    def test_from_yaml(self, tmp_path):
        yaml_path = tmp_path / "config.yaml"
        yaml_path.write_text(
            "placement:\n  label_width: 200\n  resolve_overlaps: true\n"
            "overlay:\n  alert_color: '#ff0000'\n"
        )
        cfg = EvidenceMarkConfig.from_yaml(yaml_path)
        assert cfg.placement.label_width == 200
        assert cfg.placement.resolve_overlaps is True
        assert cfg.overlay.alert_color == "#ff0000"
        # Other fields keep defaults
        assert cfg.placement.padding == 20

    def test_from_empty_yaml(self, tmp_path):
        yaml_path = tmp_path / "empty.yaml"
        yaml_path.write_text("")
        cfg = EvidenceMarkConfig.from_yaml(yaml_path)
        assert cfg.placement.label_height == 100

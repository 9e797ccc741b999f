"""Tests for evidencemark.render.list_view."""

from __future__ import annotations

from evidencemark.interaction.highlight import HighlightState, HighlightSynchronizer
from evidencemark.render.list_view import EMPTY_LIST_MESSAGE, build_list_rows
from evidencemark.render.overlay import compose_scene


class TestBuildListRows:
    def test_one_row_per_finding(self, sample_findings):
        rows = build_list_rows(sample_findings)
        assert [r.index for r in rows] == list(range(len(sample_findings)))
        assert rows[1].label == "Garbled Text"
        assert not any(r.highlighted or r.expanded for r in rows)

    def test_empty(self):
        assert build_list_rows([]) == []
        assert EMPTY_LIST_MESSAGE == "No obvious AI markers detected."

    def test_description_only_when_expanded(self, sample_findings):
        state = HighlightState(expanded_indices=frozenset({2}))
        rows = build_list_rows(sample_findings, state)
        assert rows[2].visible_description == sample_findings[2].description
        assert rows[0].visible_description is None

    def test_matches_canvas_active_index(self, sample_findings):
        sync = HighlightSynchronizer()
        sync.load(sample_findings)
        sync.pointer_enter(3)
        rows = build_list_rows(sample_findings, sync.state)
        scene = compose_scene(sample_findings, 640, 480, state=sync.state)
        assert [r.highlighted for r in rows] == [i.active for i in scene.items]
        assert [r.expanded for r in rows] == [i.expanded for i in scene.items]

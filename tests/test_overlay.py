"""Tests for annotation drawing and hitbox registration."""
import pytest

from moody.annotation import AnnotationState, AnnotationStore, HitboxList, HitKind
from moody.overlay import Overlay, draw_arrow


@pytest.fixture
def overlay():
    return Overlay(AnnotationStore(), HitboxList())


def kinds(overlay):
    return [h.kind for h in overlay.hitboxes]


class TestTextLabel:
    def test_visible_label_registers_chrome(self, overlay, surface):
        box = overlay.text_label(surface, "Viscous Sublayer", 300, 200, id="boundary-sublayer-label")
        assert box is not None
        assert kinds(overlay) == [HitKind.DRAG, HitKind.RESIZE, HitKind.TOGGLE]
        assert all(h.id == "boundary-sublayer-label" for h in overlay.hitboxes)

    def test_label_without_id_has_no_hitboxes(self, overlay, surface):
        assert overlay.text_label(surface, "Turbulent Core", 300, 200) is not None
        assert len(overlay.hitboxes) == 0

    def test_hidden_in_full_view_leaves_placeholder(self, overlay, surface):
        overlay.store.set_category("contextual", False)
        assert overlay.text_label(surface, "note", 300, 200, id="explain-turb-1") is None
        assert kinds(overlay) == [HitKind.TOGGLE]
        rect = overlay.hitboxes.items[0].rect
        assert (rect.width, rect.height) == (32, 32)

    def test_hidden_in_detail_view_draws_nothing(self, overlay, surface):
        overlay.full_view = False
        overlay.store.toggle("wall-peak-label")
        assert overlay.text_label(surface, "Peak", 300, 200, id="wall-peak-label") is None
        assert len(overlay.hitboxes) == 0

    def test_stored_width_scales_box(self, overlay, surface):
        natural = overlay.text_label(surface, "Label", 300, 200, id="wall-sublayer-label")
        overlay.store.set_state("wall-sublayer-label", AnnotationState((0.0, 0.0), (natural.width * 2, 1.0)))
        scaled = overlay.text_label(surface, "Label", 300, 200, id="wall-sublayer-label")
        assert scaled.width == pytest.approx(natural.width * 2)
        assert scaled.height == pytest.approx(natural.height * 2)

    def test_offset_moves_box(self, overlay, surface):
        before = overlay.text_label(surface, "Label", 300, 200, id="wall-sublayer-label")
        overlay.store.set_state("wall-sublayer-label", AnnotationState((25.0, -10.0)))
        after = overlay.text_label(surface, "Label", 300, 200, id="wall-sublayer-label")
        assert after.x == pytest.approx(before.x + 25)
        assert after.y == pytest.approx(before.y - 10)


class TestInfoBox:
    def test_slides_in_until_moved(self, overlay, surface):
        lines = ["Roughness <b>dominates</b> friction."]
        half = overlay.info_box(surface, "wall-infobox", "Wall", lines, ease=0.5)
        full = overlay.info_box(surface, "wall-infobox", "Wall", lines, ease=1.0)
        assert half.x == pytest.approx(full.x - 25)

        overlay.store.set_state("wall-infobox", AnnotationState((5.0, 0.0)))
        moved = overlay.info_box(surface, "wall-infobox", "Wall", lines, ease=0.0)
        assert moved.x == pytest.approx(full.x + 5)

    def test_default_position_bottom_left(self, overlay, surface):
        box = overlay.info_box(surface, "boundary-infobox", "Title", ["a", "b"])
        assert box.x == pytest.approx(15)
        assert box.bottom == pytest.approx(surface.get_height() - 15)

    def test_hidden_category(self, overlay, surface):
        overlay.store.set_category("infoBox", False)
        assert overlay.info_box(surface, "boundary-infobox", "Title", ["a"]) is None
        assert kinds(overlay) == [HitKind.TOGGLE]

    def test_bold_runs(self, overlay):
        assert overlay._runs("a <b>b</b> c") == [("a ", False), ("b", True), (" c", False)]


class TestGauges:
    def test_condition_gauge(self, overlay, surface):
        box = overlay.condition_gauge(surface, "wall-condition-gauge", 12.0, 30.0)
        assert box is not None
        assert kinds(overlay) == [HitKind.DRAG, HitKind.RESIZE, HitKind.TOGGLE]

    def test_hidden_gauge_has_no_placeholder(self, overlay, surface):
        overlay.store.set_category("gauges", False)
        assert overlay.condition_gauge(surface, "wall-condition-gauge", 12.0, 30.0) is None
        assert overlay.boundary_profile(surface, "boundary-profile-gauge", 80.0, 10.0, 5.0) is None
        assert len(overlay.hitboxes) == 0

    def test_boundary_profile_top_right(self, overlay, surface):
        box = overlay.boundary_profile(surface, "boundary-profile-gauge", 80.0, 10.0, 5.0)
        assert box.right == pytest.approx(surface.get_width() - 20)
        assert box.y == pytest.approx(20)


class TestArrow:
    def test_zero_progress_draws_nothing(self, surface):
        surface.fill((0, 0, 0))
        draw_arrow(surface, (10, 10), (200, 10), progress=0.0, color=(255, 255, 255))
        assert tuple(surface.get_at((100, 10)))[:3] == (0, 0, 0)

    def test_full_arrow(self, surface):
        surface.fill((0, 0, 0))
        draw_arrow(surface, (10, 10), (200, 10), color=(255, 255, 255), width=2)
        assert tuple(surface.get_at((100, 10)))[:3] == (255, 255, 255)

"""Tests for annotation state, hitboxes and pointer interaction."""
import pytest

import config
from moody.annotation import (
    AnnotationInteraction, AnnotationState, AnnotationStore, HitboxList, HitKind, Rect,
)


def register_box(hitboxes, id="wall-infobox", x=100, y=100, w=200, h=100):
    """Overlay 가 그릴 때와 같은 순서로 등록"""
    hitboxes.add(id, Rect(x, y, w, h), HitKind.DRAG)
    hitboxes.add(id, Rect(x + w - 14, y + h - 14, 16, 16), HitKind.RESIZE)
    hitboxes.add(id, Rect(x + w - 25, y + 5, 20, 20), HitKind.TOGGLE)


@pytest.fixture
def setup():
    store = AnnotationStore()
    hitboxes = HitboxList()
    register_box(hitboxes)
    return store, hitboxes, AnnotationInteraction(store, hitboxes)


class TestRect:
    def test_contains_inclusive(self):
        r = Rect(0, 0, 10, 10)
        assert r.contains(0, 0) and r.contains(10, 10)
        assert not r.contains(10.1, 5)


class TestHitboxList:
    def test_reverse_order(self, setup):
        _, hitboxes, _ = setup
        assert hitboxes.hit_test(290, 190).kind is HitKind.RESIZE
        assert hitboxes.hit_test(285, 110).kind is HitKind.TOGGLE
        assert hitboxes.hit_test(150, 150).kind is HitKind.DRAG
        assert hitboxes.hit_test(10, 10) is None

    def test_begin_frame_clears(self, setup):
        _, hitboxes, _ = setup
        hitboxes.begin_frame()
        assert len(hitboxes) == 0

    def test_items_read_only(self, setup):
        _, hitboxes, _ = setup
        assert isinstance(hitboxes.items, tuple)
        assert len(hitboxes.items) == 3


class TestStore:
    def test_default_state(self):
        store = AnnotationStore()
        state = store.state("nothing")
        assert state.offset == (0.0, 0.0) and state.size is None
        assert store.states == {}

    def test_visibility_is_category_and_individual(self):
        store = AnnotationStore()
        assert store.is_visible("wall-infobox")
        store.set_category("infoBox", False)
        assert not store.is_visible("wall-infobox")
        assert store.is_visible("wall-peak-label")
        store.set_category("infoBox", True)
        store.toggle("wall-infobox")
        assert not store.is_visible("wall-infobox")

    def test_show_all_clears_overrides(self):
        store = AnnotationStore()
        store.toggle("wall-infobox")
        store.hide_all()
        assert not any(store.categories.values())
        store.show_all()
        assert store.is_visible("wall-infobox")

    def test_unknown_category(self):
        with pytest.raises(KeyError):
            AnnotationStore().set_category("nope", True)


class TestInteraction:
    def test_toggle_consumes_without_session(self, setup):
        store, _, interaction = setup
        assert interaction.pointer_down(285, 110)
        assert not interaction.active
        assert not store.is_visible("wall-infobox")

    def test_miss_not_consumed(self, setup):
        _, _, interaction = setup
        assert interaction.pointer_down(5, 5) is False

    def test_drag_offsets_compose(self, setup):
        store, _, interaction = setup
        interaction.pointer_down(150, 150)
        interaction.pointer_move(160, 145)
        interaction.pointer_up()
        interaction.pointer_down(150, 150)
        interaction.pointer_move(155, 170)
        interaction.pointer_up()
        assert store.state("wall-infobox").offset == (15.0, 15.0)

    def test_resize_keeps_aspect(self, setup):
        store, _, interaction = setup
        interaction.pointer_down(292, 192)
        interaction.pointer_move(332, 197) # dx 가 더 큼
        state = store.state("wall-infobox")
        assert state.size == pytest.approx((240.0, 120.0))

    def test_resize_vertical_drag(self, setup):
        store, _, interaction = setup
        interaction.pointer_down(292, 192)
        interaction.pointer_move(293, 242)
        assert store.state("wall-infobox").size == pytest.approx((300.0, 150.0))

    def test_resize_min_width(self, setup):
        store, _, interaction = setup
        interaction.pointer_down(292, 192)
        interaction.pointer_move(-500, 190)
        width, height = store.state("wall-infobox").size
        assert width == config.MIN_ANNOTATION_WIDTH
        assert height == pytest.approx(25.0)

    def test_resize_from_previous_size(self, setup):
        store, _, interaction = setup
        store.set_state("wall-infobox", AnnotationState((0.0, 0.0), (100.0, 50.0)))
        interaction.pointer_down(292, 192)
        interaction.pointer_move(312, 192)
        assert store.state("wall-infobox").size == pytest.approx((120.0, 60.0))

    def test_resize_uses_rect_captured_at_pointer_down(self, setup):
        store, hitboxes, interaction = setup
        interaction.pointer_down(292, 192)
        hitboxes.begin_frame() # 다음 프레임에서 상자가 사라져도
        interaction.pointer_move(312, 192)
        assert store.state("wall-infobox").size == pytest.approx((220.0, 110.0))

    def test_up_ends_session_and_moves_are_ignored(self, setup):
        store, _, interaction = setup
        interaction.pointer_down(150, 150)
        interaction.pointer_up()
        interaction.pointer_move(300, 300)
        assert "wall-infobox" not in store.states

    def test_cancel(self, setup):
        _, _, interaction = setup
        interaction.pointer_down(150, 150)
        interaction.cancel()
        assert not interaction.active

    def test_single_session(self, setup):
        store, hitboxes, interaction = setup
        register_box(hitboxes, "wall-peak-label", x=400, y=100)
        interaction.pointer_down(150, 150)
        interaction.pointer_down(450, 150)
        interaction.pointer_move(460, 150)
        assert interaction.session.id == "wall-peak-label"
        assert "wall-infobox" not in store.states

    def test_cursor_hints(self, setup):
        _, _, interaction = setup
        assert interaction.cursor_for(150, 150) == "grab"
        assert interaction.cursor_for(292, 192) == "se-resize"
        assert interaction.cursor_for(285, 110) == "pointer"
        assert interaction.cursor_for(5, 5) == "default"

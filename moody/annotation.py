# moody/annotation.py
# 주석(오버레이) 상태, 프레임별 히트박스, 포인터 드래그/크기 조절 상호작용

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

import config

logger = logging.getLogger(__name__)


class HitKind(Enum):
    DRAG = "drag"
    RESIZE = "resize"
    TOGGLE = "toggle-visibility"


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def contains(self, px: float, py: float) -> bool:
        """경계 포함"""
        return self.x <= px <= self.x + self.width and self.y <= py <= self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class Hitbox:
    id: str
    rect: Rect
    kind: HitKind


class HitboxList:
    """
    한 프레임 동안 그려진 오버레이의 히트박스 목록
    그리는 쪽(Overlay)만 add 하고, 입력 쪽은 hit_test/find 로 읽기만 함
    나중에 그려진 것이 위에 있으므로 역순으로 검사
    """
    def __init__(self):
        self._items: List[Hitbox] = []

    def begin_frame(self) -> None:
        self._items = []

    def add(self, id: str, rect: Rect, kind: HitKind) -> None:
        self._items.append(Hitbox(id, rect, kind))

    @property
    def items(self) -> Tuple[Hitbox, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Hitbox]:
        return iter(tuple(self._items))

    def hit_test(self, x: float, y: float) -> Optional[Hitbox]:
        for item in reversed(self._items):
            if item.rect.contains(x, y):
                return item
        return None

    def find(self, id: str, kind: HitKind) -> Optional[Hitbox]:
        for item in self._items:
            if item.id == id and item.kind is kind:
                return item
        return None


@dataclass
class AnnotationState:
    offset: Tuple[float, float] = (0.0, 0.0)
    size: Optional[Tuple[float, float]] = None # (폭, 높이), None 이면 자연 크기


class AnnotationStore:
    """
    주석 위치/크기 및 표시 여부
        - 표시 여부 = 카테고리 플래그 AND 개별 플래그 (기본 모두 True)
        - 위치/크기는 처음 드래그/크기 조절할 때 생성
    """
    def __init__(self):
        self.states: Dict[str, AnnotationState] = {}
        self.visibility: Dict[str, bool] = {}
        self.categories: Dict[str, bool] = {key: True for key in config.LABEL_CATEGORIES}

    def state(self, id: str) -> AnnotationState:
        """없으면 기본값 (저장하지 않음)"""
        return self.states.get(id) or AnnotationState()

    def set_state(self, id: str, state: AnnotationState) -> None:
        self.states[id] = state

    def category_of(self, id: str) -> Optional[str]:
        return config.ANNOTATION_CATEGORY.get(id)

    def is_visible(self, id: str) -> bool:
        category = self.category_of(id)
        category_on = self.categories.get(category, True) if category else True
        return category_on and self.visibility.get(id, True)

    def toggle(self, id: str) -> bool:
        self.visibility[id] = not self.visibility.get(id, True)
        return self.visibility[id]

    def set_category(self, category: str, visible: bool) -> None:
        if category not in self.categories:
            raise KeyError(category)
        self.categories[category] = bool(visible)

    def toggle_category(self, category: str) -> bool:
        self.set_category(category, not self.categories[category])
        return self.categories[category]

    def set_all_categories(self, visible: bool) -> None:
        for key in self.categories:
            self.categories[key] = bool(visible)

    def show_all(self) -> None:
        """모든 카테고리 on + 개별로 숨긴 것도 복원"""
        self.set_all_categories(True)
        self.visibility.clear()

    def hide_all(self) -> None:
        self.set_all_categories(False)

    def clear_layout(self) -> None:
        self.states.clear()


@dataclass
class InteractionSession:
    """진행 중인 드래그/크기 조절 (동시에 하나만)"""
    id: str
    kind: HitKind
    start: Tuple[float, float]
    start_state: AnnotationState
    start_rect: Optional[Rect] = None


_CURSORS = {HitKind.DRAG: "grab", HitKind.RESIZE: "se-resize", HitKind.TOGGLE: "pointer"}


class AnnotationInteraction:
    """
    포인터 이벤트 -> 주석 상태 변경
        - pointer_down : 역순 히트 테스트, 토글이면 즉시 처리, 드래그/리사이즈면 세션 시작
        - pointer_move : 세션 시작 시점 상태 기준으로 위치/크기 갱신
        - pointer_up / cancel : 세션 종료
    """
    def __init__(self, store: AnnotationStore, hitboxes: HitboxList,
                 min_width: float = config.MIN_ANNOTATION_WIDTH):
        self.store = store
        self.hitboxes = hitboxes
        self.min_width = float(min_width)
        self.session: Optional[InteractionSession] = None

    @property
    def active(self) -> bool:
        return self.session is not None

    def pointer_down(self, x: float, y: float) -> bool:
        """이벤트를 소비했으면 True"""
        hit = self.hitboxes.hit_test(x, y)
        if hit is None:
            return False
        if hit.kind is HitKind.TOGGLE:
            self.session = None
            self.store.toggle(hit.id)
            return True

        start_rect = None
        if hit.kind is HitKind.RESIZE:
            box = self.hitboxes.find(hit.id, HitKind.DRAG)
            start_rect = box.rect if box is not None else None
        self.session = InteractionSession(
            id=hit.id,
            kind=hit.kind,
            start=(float(x), float(y)),
            start_state=copy.deepcopy(self.store.state(hit.id)),
            start_rect=start_rect,
        )
        return True

    def pointer_move(self, x: float, y: float) -> None:
        s = self.session
        if s is None:
            return
        dx = float(x) - s.start[0]
        dy = float(y) - s.start[1]
        state = copy.deepcopy(self.store.state(s.id))

        if s.kind is HitKind.DRAG:
            state.offset = (s.start_state.offset[0] + dx, s.start_state.offset[1] + dy)
        elif s.kind is HitKind.RESIZE:
            if s.start_rect is None:
                return
            if s.start_state.size is not None:
                start_w, start_h = s.start_state.size
            else:
                start_w, start_h = s.start_rect.width, s.start_rect.height
            aspect = start_w / start_h if start_h > 0 else 1.0
            # 가로/세로 중 더 많이 움직인 쪽 기준
            if abs(dx) > abs(dy):
                width = start_w + dx
            else:
                width = (start_h + dy) * aspect
            width = max(self.min_width, width)
            state.size = (width, width / aspect)
        self.store.set_state(s.id, state)

    def pointer_up(self) -> None:
        self.session = None

    def cancel(self) -> None:
        if self.session is not None:
            logger.debug("annotation interaction cancelled: %s", self.session.id)
        self.session = None

    def cursor_for(self, x: float, y: float) -> str:
        if self.session is not None:
            return "se-resize" if self.session.kind is HitKind.RESIZE else "grabbing"
        hit = self.hitboxes.hit_test(x, y)
        return _CURSORS[hit.kind] if hit is not None else "default"

# moody/transition.py
# 뷰 모드(전체/경계층/벽) 및 뷰 사이 크로스페이드 전환 상태 기계

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

import config

logger = logging.getLogger(__name__)


class ViewMode(Enum):
    FULL = "full"
    BOUNDARY = "boundary"
    WALL = "wall"

    def __str__(self) -> str:
        return self.value

    @property
    def is_detail(self) -> bool:
        return self is not ViewMode.FULL


def ease_out_cubic(t: float) -> float:
    t = max(0.0, min(1.0, float(t)))
    return 1.0 - (1.0 - t)**3


@dataclass
class Transition:
    source: ViewMode
    target: ViewMode
    started_at: float
    progress: float = 0.0

    @property
    def eased(self) -> float:
        return ease_out_cubic(self.progress)


class ViewStateMachine:
    """
    유휴(현재 뷰 하나) / 전환 중(원본 -> 대상) 두 상태
        - request : 같은 뷰이거나 이미 전환 중이면 무시
                    시작 시 주석 위치/크기 초기화, 라벨 카테고리 강제 on/off
        - layers  : 이번 프레임에 그릴 (뷰, 불투명도) 목록, 진행률 갱신
        - commit_if_complete : 진행률 1 이면 대상 뷰로 확정하고 입자 풀 재생성
    annotations 는 AnnotationStore, particles 는 ParticleSimulator
    """
    def __init__(self, annotations, particles, current: ViewMode = ViewMode.FULL,
                 duration: float = config.TRANSITION_DURATION):
        self.annotations = annotations
        self.particles = particles
        self.current = current
        self.duration = float(duration)
        self.transition: Optional[Transition] = None

    @property
    def active(self) -> bool:
        return self.transition is not None

    @property
    def effective(self) -> ViewMode:
        """전환 중이면 대상 뷰"""
        return self.transition.target if self.transition is not None else self.current

    def request(self, target: ViewMode, now: float) -> bool:
        if self.active or target is self.current:
            return False
        if target.is_detail:
            self.annotations.set_all_categories(False)
        else:
            self.annotations.set_all_categories(True)
            self.annotations.visibility.clear()
        self.annotations.clear_layout()
        self.transition = Transition(self.current, target, float(now))
        logger.debug("view transition %s -> %s", self.current, target)
        return True

    def layers(self, now: float) -> List[Tuple[ViewMode, float]]:
        t = self.transition
        if t is None:
            return [(self.current, 1.0)]
        if self.duration <= 0:
            t.progress = 1.0
        else:
            t.progress = min((float(now) - t.started_at) / self.duration, 1.0)
        eased = t.eased
        return [(t.source, 1.0 - eased), (t.target, eased)]

    def commit_if_complete(self) -> bool:
        t = self.transition
        if t is None or t.progress < 1.0:
            return False
        self.current = t.target
        self.transition = None
        self.particles.reset(self.current)
        logger.debug("view committed: %s", self.current)
        return True

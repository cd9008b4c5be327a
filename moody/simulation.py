# moody/simulation.py
# 시뮬레이션 상태 + 제어기 (입력 값 클램프, 뷰 전환 요청, 프레임 진행/그리기, 포인터 입력 전달)

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy
import pygame

import config
from moody import render
from moody.annotation import AnnotationInteraction, AnnotationStore, Hitbox, HitboxList
from moody.diagram import indicator_position
from moody.flow_state import FlowState, ModelFriction, clamp_reynolds, model_frictions, resolve
from moody.layers import detail_layers, full_layers
from moody.overlay import Overlay
from moody.particle import ParticleSimulator
from moody.transition import ViewMode, ViewStateMachine
from moody.velocity_profile import VelocityProfile

logger = logging.getLogger(__name__)

_DETAIL_GEOMETRY = {ViewMode.BOUNDARY: config.View.Boundary, ViewMode.WALL: config.View.Wall}


def _valid(value) -> bool:
    """유한한 0 이상 실수만 입력으로 받음"""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(value) and value >= 0


def _clamp(value: float, bounds: Tuple[float, float]) -> float:
    return max(bounds[0], min(bounds[1], float(value)))


@dataclass
class SimulationState:
    """
    사용자 제어 값 + 프레임 사이에 유지되는 값
        - target_re  : 사용자가 정한 레이놀즈 수
        - current_re : 화면에 쓰이는 값 (매 프레임 target 쪽으로 LERP_FACTOR 만큼 이동)
        - diameter / abs_roughness : [in]
    """
    target_re: float = float(config.PRESETS["laminar"])
    current_re: float = float(config.PRESETS["laminar"])
    diameter: float = config.Pipe.DEFAULT_DIAMETER
    abs_roughness: float = config.Pipe.DEFAULT_ROUGHNESS
    models: Dict[str, bool] = field(default_factory=lambda: dict(config.DEFAULT_MODELS))
    show_explanation: bool = False
    explanation_started: Optional[float] = None

    @property
    def relative_roughness(self) -> float:
        return self.abs_roughness / self.diameter if self.diameter > 0 else 0.0


class MoodyExplorer:
    """
    Moody 선도 탐색기 제어기
    frame(surface, now) 를 화면 갱신마다 한 번 호출
    그 외 메서드는 키/마우스 입력에서 호출 (프레임 사이)
    """
    def __init__(self, width: int, height: int, rng: Optional[numpy.random.Generator] = None,
                 state: Optional[SimulationState] = None):
        self.state = state if state is not None else SimulationState()
        self.width = max(1, int(width))
        self.height = max(1, int(height))

        self.annotations = AnnotationStore()
        self.hitboxes = HitboxList()
        self.interaction = AnnotationInteraction(self.annotations, self.hitboxes)
        self.overlay = Overlay(self.annotations, self.hitboxes)
        self.particles = ParticleSimulator(self.width, self.height, rng=rng)
        self.views = ViewStateMachine(self.annotations, self.particles)
        self.velocity = VelocityProfile()

        self.flow: FlowState = resolve(self.state.current_re, self.state.relative_roughness)
        self.results: List[ModelFriction] = model_frictions(self.flow, self.state.models)

    # ------------------------------------------------------------------
    # 출력
    # ------------------------------------------------------------------
    @property
    def view(self) -> ViewMode:
        return self.views.current

    def indicators(self) -> List[Tuple[ModelFriction, Tuple[float, float]]]:
        """Moody 선도 표시점 정규화 좌표 (축 범위 밖은 제외)"""
        out = []
        for res in self.results:
            pos = indicator_position(self.flow.reynolds, res.friction)
            if pos is not None:
                out.append((res, pos))
        return out

    @property
    def current_hitboxes(self) -> Tuple[Hitbox, ...]:
        return self.hitboxes.items

    # ------------------------------------------------------------------
    # 제어 입력 (잘못된 값은 무시, 범위 밖은 클램프)
    # ------------------------------------------------------------------
    def set_reynolds(self, re) -> None:
        if not _valid(re) or float(re) <= 0:
            return
        self.state.target_re = clamp_reynolds(re)

    def scale_reynolds(self, factor: float) -> None:
        self.set_reynolds(self.state.target_re * factor)

    def set_diameter(self, diameter) -> None:
        if not _valid(diameter) or float(diameter) <= 0:
            return
        self.state.diameter = _clamp(diameter, config.Pipe.DIAMETER_RANGE)

    def step_schedule(self, direction: int) -> str:
        """Schedule 40 규격 중 다음(+1)/이전(-1) 크기로, 선택된 호칭경 반환"""
        sizes = list(config.Pipe.SCHEDULE_40.items())
        current = min(range(len(sizes)), key=lambda i: abs(sizes[i][1] - self.state.diameter))
        if abs(sizes[current][1] - self.state.diameter) > 1e-9:
            # 규격 밖 값이면 가장 가까운 규격에서 시작
            index = current
        else:
            index = max(0, min(len(sizes) - 1, current + (1 if direction > 0 else -1)))
        name, diameter = sizes[index]
        self.set_diameter(diameter)
        return name

    def set_roughness(self, roughness) -> None:
        if not _valid(roughness):
            return
        self.state.abs_roughness = _clamp(roughness, config.Pipe.ROUGHNESS_RANGE)

    def adjust_roughness(self, delta: float) -> None:
        self.set_roughness(max(0.0, self.state.abs_roughness + delta))

    def set_relative_roughness(self, relative) -> None:
        """상대 조도 입력은 절대 조도로 바꿔 저장"""
        if not _valid(relative):
            return
        self.set_roughness(float(relative) * self.state.diameter)

    def toggle_model(self, key: str) -> bool:
        if key not in config.MODELS:
            raise KeyError(key)
        self.state.models[key] = not self.state.models.get(key, False)
        return self.state.models[key]

    def apply_preset(self, name: str, now: float) -> None:
        """프리셋 Re 적용, 상세 뷰였으면 전체 뷰로 복귀"""
        self.state.target_re = float(config.PRESETS[name])
        logger.info("preset: %s (Re=%g)", name, self.state.target_re)
        if self.views.current is not ViewMode.FULL:
            self._request_view(ViewMode.FULL, now)

    def set_explanation(self, on: bool, now: float) -> None:
        on = bool(on)
        if on and self.views.effective.is_detail:
            return
        self.state.show_explanation = on
        if on:
            self.annotations.clear_layout()
            self.state.explanation_started = float(now)
        else:
            self.state.explanation_started = None

    def toggle_explanation(self, now: float) -> bool:
        self.set_explanation(not self.state.show_explanation, now)
        return self.state.show_explanation

    def toggle_category(self, category: str) -> bool:
        return self.annotations.toggle_category(category)

    def show_all_labels(self) -> None:
        self.annotations.show_all()

    def hide_all_labels(self) -> None:
        self.annotations.hide_all()

    # ------------------------------------------------------------------
    # 뷰 전환
    # ------------------------------------------------------------------
    def _request_view(self, target: ViewMode, now: float) -> bool:
        if not self.views.request(target, now):
            return False
        self.interaction.cancel()
        if target.is_detail:
            self.state.show_explanation = False
            self.state.explanation_started = None
        logger.info("view: %s -> %s", self.views.current, target)
        return True

    def request_boundary(self, now: float) -> bool:
        """전체 <-> 경계층 (층류 목표값이면 부분 난류 프리셋으로 올림)"""
        if self.views.current is ViewMode.FULL:
            started = self._request_view(ViewMode.BOUNDARY, now)
            if self.state.target_re < config.Reynolds.LAMINAR + 1:
                self.state.target_re = float(config.PRESETS["partially-turbulent"])
            return started
        return self._request_view(ViewMode.FULL, now)

    def request_wall(self, now: float) -> bool:
        """경계층 <-> 벽, 전체 뷰에서는 무시"""
        if self.views.current is ViewMode.BOUNDARY:
            return self._request_view(ViewMode.WALL, now)
        if self.views.current is ViewMode.WALL:
            return self._request_view(ViewMode.BOUNDARY, now)
        return False

    def resize(self, width: int, height: int) -> None:
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        self.particles.resize(self.width, self.height)

    # ------------------------------------------------------------------
    # 포인터 (주석 상자 조작)
    # ------------------------------------------------------------------
    @property
    def annotations_interactive(self) -> bool:
        """전체 뷰는 설명 오버레이가 켜져 있을 때만, 상세 뷰는 항상"""
        if self.views.current is ViewMode.FULL:
            return self.state.show_explanation
        return True

    def pointer_down(self, x: float, y: float) -> bool:
        if not self.annotations_interactive:
            return False
        return self.interaction.pointer_down(x, y)

    def pointer_move(self, x: float, y: float) -> None:
        self.interaction.pointer_move(x, y)

    def pointer_up(self) -> None:
        self.interaction.pointer_up()

    def cursor_for(self, x: float, y: float) -> str:
        if not self.annotations_interactive and not self.interaction.active:
            return "default"
        return self.interaction.cursor_for(x, y)

    # ------------------------------------------------------------------
    # 프레임
    # ------------------------------------------------------------------
    def update_flow(self) -> FlowState:
        s = self.state
        s.current_re += (s.target_re - s.current_re) * config.LERP_FACTOR
        self.flow = resolve(s.current_re, s.relative_roughness)
        self.results = model_frictions(self.flow, s.models)
        return self.flow

    def _explain_progress(self, now: float) -> Optional[float]:
        s = self.state
        if not s.show_explanation or s.explanation_started is None:
            return None
        return min(max(0.0, (now - s.explanation_started) / config.EXPLANATION_DURATION), 1.0)

    def _draw_view(self, surface: pygame.Surface, view: ViewMode, now: float) -> None:
        flow = self.flow
        h = surface.get_height()
        self.overlay.full_view = view is ViewMode.FULL
        if view is ViewMode.FULL:
            layers = full_layers(flow.reynolds, flow.physics, h)
            self.particles.step(view, flow, layers)
            render.draw_full_view(surface, self.overlay, flow, layers, self.particles.particles, now,
                                  self._explain_progress(now))
            return
        layers = detail_layers(_DETAIL_GEOMETRY[view], flow.reynolds, self.state.abs_roughness, h)
        self.particles.step(view, flow, layers)
        if view is ViewMode.BOUNDARY:
            render.draw_boundary_detail(surface, self.overlay, flow, layers, self.particles.profile,
                                        self.particles.particles, now)
        else:
            render.draw_wall_detail(surface, self.overlay, flow, layers, self.particles.profile,
                                    self.particles.particles, now)

    def frame(self, surface: pygame.Surface, now: float) -> FlowState:
        """
        한 프레임: 유동 상태 계산 -> 입자 진행 -> 그리기 -> 전환 확정
        전환 중에는 두 뷰를 각각 반투명 레이어로 그려서 겹침 (입자 풀은 두 뷰가 함께 진행, 포인터는 대상 뷰만)
        """
        if surface.get_size() != (self.width, self.height):
            self.resize(*surface.get_size())

        self.update_flow()
        self.velocity.update(self.flow.physics, self.height)

        surface.fill(config.Color.BACKGROUND)
        for view, alpha in self.views.layers(now):
            # 히트박스는 마지막(대상) 뷰 것만 남김
            self.hitboxes.begin_frame()
            if alpha >= 1.0:
                self._draw_view(surface, view, now)
                continue
            layer = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
            self._draw_view(layer, view, now)
            layer.set_alpha(int(255 * max(0.0, alpha)))
            surface.blit(layer, (0, 0))
        self.views.commit_if_complete()
        return self.flow

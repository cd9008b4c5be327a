# moody/particle.py
# 입자 상태, 벽 조도 프로파일, 뷰별 입자 갱신 규칙

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy
import pygame

import config
from moody.flow_state import FlowState
from moody.layers import DetailLayers, FullLayers
from moody.transition import ViewMode

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]


def velocity_color(v: float, vmax: float) -> RGB:
    """속도 비율에 따라 파랑(느림) ~ 노랑(빠름)"""
    ratio = min(1.0, max(0.0, v / vmax)) if vmax > 0 else 0.0
    color = pygame.Color(0, 0, 0)
    color.hsla = (40.0 + (1.0 - ratio) * 180.0, 90.0, 65.0, 100.0)
    return color.r, color.g, color.b


@dataclass
class Particle:
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    radius: float = 1.0
    alpha: float = 1.0 # [0, 1]
    color: RGB = config.Color.PARTICLE
    flash_frames: int = 0


class RoughnessProfile:
    """
    벽 조도 프로파일: 가로 1px 당 [0,1) 난수 하나
        - raw(x)        : 경계층 뷰용, 인덱스는 양 끝으로 고정
        - normalized(x) : 벽 뷰용, [min,max] -> [0,1] 정규화, 인덱스는 폭으로 순환
    """
    def __init__(self, samples: Optional[numpy.ndarray] = None):
        self.samples = numpy.zeros(0) if samples is None else numpy.asarray(samples, dtype=float)

    @classmethod
    def generate(cls, width: int, rng: numpy.random.Generator) -> RoughnessProfile:
        return cls(rng.random(max(1, int(width))))

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def span(self) -> Tuple[float, float]:
        if len(self.samples) == 0:
            return 0.0, 1.0
        lo, hi = float(self.samples.min()), float(self.samples.max())
        return lo, (hi - lo if hi > lo else 1.0)

    def raw(self, x: float) -> float:
        n = len(self.samples)
        if n == 0:
            return 0.0
        i = max(0, min(int(math.floor(x)), n - 1))
        return float(self.samples[i])

    def normalized(self, x: float) -> float:
        n = len(self.samples)
        if n == 0:
            return 0.0
        lo, rng = self.span
        i = int(math.floor(x + n)) % n
        return (float(self.samples[i]) - lo) / rng

    def normalized_array(self) -> numpy.ndarray:
        lo, rng = self.span
        return (self.samples - lo) / rng

    def peaks(self, count: int = 5) -> List[int]:
        """가장 높은 count 개 봉우리의 x 인덱스 (높은 순)"""
        if len(self.samples) == 0:
            return []
        order = numpy.argsort(self.samples, kind="stable")[::-1]
        return [int(i) for i in order[:count]]


def turbulence(re: float) -> float:
    return max(0.0, math.log10(re / 2000.0)) * 2.0


def _jitter(rng: numpy.random.Generator) -> float:
    """U(-1/2, 1/2)"""
    return float(rng.random()) - 0.5


def _respawn(p: Particle, y_max: float, rng: numpy.random.Generator) -> None:
    p.x = -p.radius - float(rng.random()) * config.View.SPAWN_BAND
    p.y = float(rng.random()) * y_max


def _out_of_bounds(p: Particle, width: float) -> bool:
    """오른쪽으로 나감, 재투입 구간보다 더 왼쪽, 또는 위로 나감"""
    return (
        p.x > width + p.radius
        or p.x < -p.radius - config.View.SPAWN_BAND
        or p.y < -p.radius
    )


def create_particle(view: ViewMode, width: float, height: float, rng: numpy.random.Generator) -> Particle:
    x = float(rng.random()) * width
    if view is ViewMode.BOUNDARY:
        y = float(rng.random()) * height * 0.7 # 위쪽 70%
    else:
        y = float(rng.random()) * height
    if view is ViewMode.WALL:
        radius = float(rng.random()) * 2.0 + 1.0
    else:
        radius = float(rng.random()) * 1.5 + 1.0
    alpha = float(rng.random()) * 0.5 + 0.3
    return Particle(x, y, radius=radius, alpha=alpha)


def update_full(p: Particle, flow: FlowState, layers: FullLayers, width: float,
                rng: numpy.random.Generator) -> None:
    """전체 파이프 뷰: 층류는 포물선 분포, 난류는 멱법칙 + 난류 요동"""
    h = layers.height
    d = abs(p.y / h - 0.5) * 2.0 # 중심 0, 벽 1
    re = flow.reynolds
    if layers.laminar:
        p.vx = (1.0 - d**2)**2 * 8.0 + 0.1
        p.vy = 0.0
    else:
        exponent = 2.0 * math.sqrt(flow.physics.friction) / 2.2
        base = max(0.0, 1.0 - d)**exponent
        t = turbulence(re)
        p.vx = base * 6.0 + 1.0 + _jitter(rng) * t * 6.0
        p.vy = _jitter(rng) * t * 8.0

    p.x += p.vx
    p.y += p.vy

    e = config.View.Full.RESTITUTION
    if p.y - p.radius < layers.collision_top:
        p.y = layers.collision_top + p.radius
        p.vy *= -e
    if p.y + p.radius > layers.collision_bottom:
        p.y = layers.collision_bottom - p.radius
        p.vy *= -e

    if _out_of_bounds(p, width):
        _respawn(p, h, rng)
    p.color = velocity_color(p.vx, 12.0)


# 벽 충돌 충격량 (수직 킥 (배율, 최소), 수평 킥 폭, 번쩍임 프레임)
_IMPULSE = {
    ViewMode.BOUNDARY: {True: ((18.0, 15.0), 30.0, 45), False: ((2.0, 1.0), 4.0, 6)},
    ViewMode.WALL: {True: ((22.0, 18.0), 40.0, 60), False: ((3.0, 1.0), 5.0, 7)},
}

# 재투입 y 상한: 벽 기준선에서 뺄 여유 [px]
_RESPAWN_MARGIN = {ViewMode.BOUNDARY: 5.0, ViewMode.WALL: 10.0}


def _update_detail(view: ViewMode, p: Particle, flow: FlowState, layers: DetailLayers,
                   wall_y: float, width: float, rng: numpy.random.Generator) -> None:
    """
    상세 뷰 공통 규칙
        - 벽에서의 거리 비율^(1/7) 로 수평 속도
        - 벽(조도 표면) 충돌: 점성 저층 위로 드러난 봉우리면 강한 충격 + 긴 번쩍임, 잠긴 곳이면 약한 튕김
        - 벽에 닿지 않았어도 점성 저층 윗면을 넘으면 되돌림
    """
    t = turbulence(flow.reynolds)
    dist = max(0.0, layers.wall_base_y - p.y)
    depth = min(1.0, dist / layers.boundary) if layers.boundary > 0 else 1.0
    factor = depth**(1.0 / 7.0)
    p.vx = layers.max_vx * factor
    p.vy = _jitter(rng) * t * (2.0 - 1.5 * factor)

    p.x += p.vx
    p.y += p.vy

    sublayer_top = layers.sublayer_top_y
    if p.y + p.radius > wall_y:
        p.y = wall_y - p.radius
        exposed = wall_y < sublayer_top
        (kick, kick_min), side, frames = _IMPULSE[view][exposed]
        p.vy = -(float(rng.random()) * kick + kick_min)
        p.vx += _jitter(rng) * side
        p.flash_frames = frames
    elif p.y + p.radius > sublayer_top:
        p.y = sublayer_top - p.radius
        p.vy *= -config.View.SUBLAYER_RESTITUTION

    y_max = layers.wall_base_y - _RESPAWN_MARGIN[view]
    if view is ViewMode.WALL and p.x < -p.radius and p.y >= -p.radius:
        # 벽 뷰는 왼쪽으로 나가면 오른쪽 끝으로 보냄
        p.x = width + p.radius + float(rng.random()) * config.View.SPAWN_BAND
        p.y = float(rng.random()) * y_max
    elif _out_of_bounds(p, width):
        _respawn(p, y_max, rng)

    if p.flash_frames > 0:
        p.color = config.Color.WHITE
        p.flash_frames -= 1
    elif view is ViewMode.WALL:
        p.color = velocity_color(math.hypot(p.vx, p.vy), layers.speed_color_max)
    else:
        p.color = velocity_color(p.vx, layers.speed_color_max)


def update_boundary(p: Particle, flow: FlowState, layers: DetailLayers, profile: RoughnessProfile,
                    width: float, rng: numpy.random.Generator) -> None:
    wall_y = layers.wall_base_y - profile.raw(p.x) * layers.roughness_height
    _update_detail(ViewMode.BOUNDARY, p, flow, layers, wall_y, width, rng)


def update_wall(p: Particle, flow: FlowState, layers: DetailLayers, profile: RoughnessProfile,
                width: float, rng: numpy.random.Generator) -> None:
    wall_y = layers.wall_base_y - profile.normalized(p.x) * layers.roughness_height
    _update_detail(ViewMode.WALL, p, flow, layers, wall_y, width, rng)


class ParticleSimulator:
    """
    입자 풀과 조도 프로파일의 소유자
    뷰 전환 확정 / 화면 크기 변경 시 reset 으로 통째로 재생성
    """
    def __init__(self, width: int, height: int, count: int = config.PARTICLE_COUNT,
                 rng: Optional[numpy.random.Generator] = None):
        self.width = int(width)
        self.height = int(height)
        self.count = int(count)
        self.rng = rng if rng is not None else numpy.random.default_rng()
        self.view = ViewMode.FULL
        self.particles: List[Particle] = []
        self.profile = RoughnessProfile()
        self.reset(self.view)

    def resize(self, width: int, height: int) -> None:
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        self.reset(self.view)

    def reset(self, view: ViewMode) -> None:
        self.view = view
        self.particles = [create_particle(view, self.width, self.height, self.rng) for _ in range(self.count)]
        self.profile = RoughnessProfile.generate(self.width, self.rng)
        logger.debug("particle pool reset: view=%s count=%d size=%dx%d", view, self.count, self.width, self.height)

    def step(self, view: ViewMode, flow: FlowState, layers) -> None:
        """
        한 프레임 진행
        layers 는 전체 뷰면 FullLayers, 상세 뷰면 DetailLayers
        """
        if view is ViewMode.FULL:
            for p in self.particles:
                update_full(p, flow, layers, self.width, self.rng)
        elif view is ViewMode.BOUNDARY:
            for p in self.particles:
                update_boundary(p, flow, layers, self.profile, self.width, self.rng)
        elif view is ViewMode.WALL:
            for p in self.particles:
                update_wall(p, flow, layers, self.profile, self.width, self.rng)
        else:
            raise ValueError(f"unknown view: {view}")

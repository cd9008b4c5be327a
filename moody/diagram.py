# moody/diagram.py
# Moody 선도 좌표 변환 / 곡선 샘플링 / 패널 그리기

from __future__ import annotations

import math
from typing import List, Optional, Sequence, Tuple

import numpy
import pygame

import config
from moody.flow_state import ROUGHNESS_CURVES, FlowState, ModelFriction, RoughnessCurve, classify

UV = Tuple[float, float]


def map_log(value: float, from_min: float, from_max: float, to_min: float, to_max: float) -> float:
    """로그 스케일 선형 보간 (범위 밖은 끝값으로 고정)"""
    if value <= from_min:
        return to_min
    if value >= from_max:
        return to_max
    lo, hi = math.log10(from_min), math.log10(from_max)
    percent = (math.log10(value) - lo) / (hi - lo)
    return to_min + percent * (to_max - to_min)


def re_to_u(re: float) -> float:
    lo, hi = config.Diagram.RE_RANGE
    return map_log(re, lo, hi, 0.0, 1.0)


def f_to_v(f: float) -> float:
    """위쪽이 0 (f 가 클수록 위)"""
    lo, hi = config.Diagram.F_RANGE
    return map_log(f, lo, hi, 1.0, 0.0)


def in_range(f: float) -> bool:
    lo, hi = config.Diagram.F_RANGE
    return lo <= f <= hi


def indicator_position(re: float, f: float) -> Optional[UV]:
    """표시점의 정규화 좌표 [0,1]x[0,1], 축 범위 밖이면 None"""
    if math.isnan(f) or not in_range(f):
        return None
    return re_to_u(re), f_to_v(f)


def curve_points(curve: RoughnessCurve, count: int = config.Diagram.CURVE_POINTS) -> List[UV]:
    """Re=2300 ~ RE_MAX 구간을 classify 로 샘플링 (거친 곡선은 축 범위 밖 점 제외)"""
    re_values = numpy.logspace(math.log10(config.Reynolds.LAMINAR), math.log10(config.Reynolds.MAX), count)
    points = []
    for re in re_values:
        f = classify(float(re), curve.value).friction
        if curve.value > 0 and not in_range(f):
            continue
        points.append((re_to_u(float(re)), f_to_v(f)))
    return points


def laminar_line() -> Tuple[UV, UV]:
    a = config.Reynolds.MIN
    b = config.Reynolds.LAMINAR
    return (re_to_u(a), f_to_v(classify(a, 0.0).friction)), (re_to_u(b), f_to_v(classify(b, 0.0).friction))


def spread_labels(ys: Sequence[float], spacing: float = config.Diagram.LABEL_SPACING) -> List[float]:
    """정렬된 y 위치를 최소 간격 이상으로 아래로 밀어냄"""
    out = []
    last = -math.inf
    for y in sorted(ys):
        if y < last + spacing:
            y = last + spacing
        out.append(y)
        last = y
    return out


class MoodyDiagram:
    """
    Moody 선도 패널
    곡선은 한 번만 샘플링해 두고, 그릴 때 패널 크기에 맞춰 변환
    """
    def __init__(self):
        self.curves = [(c, curve_points(c)) for c in ROUGHNESS_CURVES]
        self.laminar = laminar_line()
        self.font = pygame.font.Font(None, 16)
        self.font_bold = pygame.font.Font(None, 17)
        self.font_bold.set_bold(True)

    @staticmethod
    def _to_px(uv: UV, plot: pygame.Rect) -> Tuple[int, int]:
        return int(plot.x + uv[0] * plot.width), int(plot.y + uv[1] * plot.height)

    def _grid(self, surface: pygame.Surface, plot: pygame.Rect) -> None:
        lo, hi = config.Diagram.RE_RANGE
        for k in range(int(math.log10(lo)), int(math.log10(hi)) + 1):
            x = self._to_px((re_to_u(10.0**k), 0.0), plot)[0]
            pygame.draw.line(surface, config.Color.GRID, (x, plot.top), (x, plot.bottom), 1)
            label = self.font.render(f"1e{k}", True, config.Color.TEXT)
            surface.blit(label, (x - label.get_width() // 2, plot.bottom + 4))
        for f in (0.002, 0.003, 0.004, 0.005, 0.0075, 0.01, 0.015, 0.02, 0.025):
            y = self._to_px((0.0, f_to_v(f)), plot)[1]
            pygame.draw.line(surface, config.Color.GRID, (plot.left, y), (plot.right, y), 1)
            label = self.font.render(f"{f:g}", True, config.Color.TEXT)
            surface.blit(label, (plot.left - label.get_width() - 4, y - label.get_height() // 2))

    def draw(self, surface: pygame.Surface, rect: pygame.Rect, flow: FlowState, results: Sequence[ModelFriction]) -> None:
        plot = pygame.Rect(rect.x + 56, rect.y + 28, rect.width - 110, rect.height - 56)
        pygame.draw.rect(surface, config.Color.PANEL, rect)
        title = self.font_bold.render("Moody Diagram (Fanning f vs Re)", True, config.Color.WHITE)
        surface.blit(title, (rect.x + 8, rect.y + 6))
        self._grid(surface, plot)

        for curve, points in self.curves:
            if len(points) < 2:
                continue
            active = curve.id == flow.curve.id
            color = config.Color.ACCENT if active else (160, 170, 190)
            pygame.draw.lines(surface, color, False, [self._to_px(p, plot) for p in points], 3 if active else 1)
            if curve.value > 0:
                label = self.font.render(curve.label, True, color)
                y = self._to_px(points[-1], plot)[1]
                surface.blit(label, (plot.right + 4, y - label.get_height() // 2))

        a, b = self.laminar
        pygame.draw.line(surface, config.Color.WHITE, self._to_px(a, plot), self._to_px(b, plot), 2)
        smooth_re = config.Reynolds.MAX * 0.5
        sx, sy = self._to_px((re_to_u(smooth_re), f_to_v(classify(smooth_re, 0.0).friction)), plot)
        label = self.font.render("Smooth Pipe", True, config.Color.TEXT)
        surface.blit(label, (sx - label.get_width(), sy + 6))

        labels = []
        for res in results:
            pos = indicator_position(flow.reynolds, res.friction)
            if pos is None:
                continue
            center = self._to_px(pos, plot)
            pygame.draw.circle(surface, res.color, center, 9, 2)
            pygame.draw.circle(surface, res.color, center, 5)
            labels.append((center[1], res))
        if labels:
            labels.sort(key=lambda item: item[0])
            for y, (_, res) in zip(spread_labels([y for y, _ in labels]), labels):
                text = self.font_bold.render(f"{res.friction:.4f}", True, res.color)
                surface.blit(text, (plot.left + 4, y - text.get_height() // 2))

# moody/render.py
# 뷰별 그리기: 전체 파이프 / 경계층 확대 / 벽 확대 / 속도 분포
# 모든 함수는 전달받은 surface 의 (0,0) 을 파이프 뷰 왼쪽 위로 보고 그림

from __future__ import annotations

import math
from typing import Sequence

import numpy
import pygame
import pygame.gfxdraw

import config
from moody.flow_state import Contribution, FlowState, Regime
from moody.layers import DetailLayers, FullLayers
from moody.overlay import Overlay, draw_arrow
from moody.particle import Particle, RoughnessProfile
from moody.transition import ease_out_cubic


def _vgradient(surface: pygame.Surface, top: float, bottom: float, rgb, a0: float, a1: float) -> None:
    """top ~ bottom 구간 세로 그라데이션 (불투명도 a0 -> a1)"""
    top, bottom = int(top), int(bottom)
    h = bottom - top
    w = surface.get_width()
    if h <= 0 or w <= 0:
        return
    tmp = pygame.Surface((w, h), pygame.SRCALPHA)
    for i in range(h):
        a = a0 + (a1 - a0) * (i / max(1, h - 1))
        pygame.draw.line(tmp, (*rgb, int(255 * a)), (0, i), (w - 1, i))
    surface.blit(tmp, (0, top))


def friction_driver(contribution: Contribution) -> str:
    if contribution.roughness < 5:
        return "Friction Driver: Viscosity (Re)"
    if contribution.viscosity < 5:
        return "Friction Driver: Roughness (ε)"
    return "Friction Driver: Re + Roughness"


# ----------------------------------------------------------------------
# 전체 파이프 뷰
# ----------------------------------------------------------------------
def draw_pipe(surface: pygame.Surface) -> None:
    w, h = surface.get_size()
    top, bottom = config.WALL_BUFFER, h - config.WALL_BUFFER
    pygame.draw.rect(surface, config.Color.PIPE, (0, 0, w, top))
    pygame.draw.rect(surface, config.Color.PIPE, (0, bottom, w, h - bottom))
    # 안쪽 모서리 하이라이트 / 그림자
    _vgradient(surface, top, top + 5, (255, 255, 255), 0.25, 0.0)
    _vgradient(surface, bottom - 5, bottom, (0, 0, 0), 0.0, 0.4)


def draw_boundary_layer(surface: pygame.Surface, layers: FullLayers, t: float) -> None:
    """경계층(붉은색) + 점성 저층(파란색), 난류면 경계층 윗면이 일렁임"""
    w = surface.get_width()
    top, bottom = layers.top_wall, layers.bottom_wall
    b, s = layers.boundary, layers.sublayer

    _vgradient(surface, top, top + b, config.Color.ACCENT, 0.5, 0.0)
    _vgradient(surface, bottom - b, bottom, config.Color.ACCENT, 0.0, 0.5)
    opacity = 0.75 if layers.laminar else 0.65
    _vgradient(surface, top, top + s, config.Color.SUBLAYER, opacity, 0.0)
    _vgradient(surface, bottom - s, bottom, config.Color.SUBLAYER, 0.0, opacity)

    if layers.laminar or w < 2:
        return
    xs = numpy.arange(w)
    wave = numpy.sin(xs * 0.005 + t * 0.5) * 1.5
    color = (*config.Color.ACCENT, 128)
    for base, sign in ((top + b, 1.0), (bottom - b, -1.0)):
        points = list(zip(xs.tolist(), (base + sign * wave).tolist()))
        tmp = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        pygame.draw.lines(tmp, color, False, points, 1)
        surface.blit(tmp, (0, 0))


def draw_particles(surface: pygame.Surface, particles: Sequence[Particle]) -> None:
    for p in particles:
        r = max(1, int(round(p.radius)))
        pygame.gfxdraw.filled_circle(surface, int(p.x), int(p.y), r, (*p.color, int(255 * p.alpha)))


def draw_explanation(surface: pygame.Surface, overlay: Overlay, flow: FlowState, layers: FullLayers,
                     progress: float) -> None:
    """
    설명 오버레이 (전체 뷰)
    progress 는 등장 애니메이션 진행률 [0,1], 화살표는 progress, 상자/불투명도는 ease-out
    """
    w, h = surface.get_size()
    ease = ease_out_cubic(progress)
    cx, cy = w / 2, h / 2
    layer = pygame.Surface((w, h), pygame.SRCALPHA)

    if flow.regime in (Regime.LAMINAR, Regime.TRANSITION):
        r = overlay.text_label(layer, "Smooth, parallel layers", 100, 40, "left", "explain-laminar-1")
        if r:
            draw_arrow(layer, (r.x + r.width / 2, r.bottom), (100, 85), progress)
        r = overlay.text_label(layer, "Max Velocity at Center", cx, cy - 40, "center", "explain-laminar-2")
        if r:
            draw_arrow(layer, (r.x + r.width / 2, r.bottom), (cx, cy), progress)
        r = overlay.text_label(layer, "Velocity ≈ 0 at Wall", w - 100, config.WALL_BUFFER + 25, "center", "explain-laminar-3")
        if r:
            draw_arrow(layer, (r.x + r.width / 2, r.y), (w - 100, config.WALL_BUFFER + 5), progress)
        overlay.info_box(layer, "explain-laminar-infobox", "Laminar Flow Impact", [
            "<b>Friction Driver:</b> Fluid Viscosity",
            "<b>Pressure Drop:</b> Minimal & Predictable",
            "Flow is stable and predictable, with",
            "low energy loss.",
            " ",
            "∙ Note: Darcy f_D = 4 x Fanning f",
        ], ease)
    else:
        ex, ey, er = cx + 80, cy + 30, 20
        r = overlay.text_label(layer, "Chaotic Eddies & Mixing", ex, ey - er - 25, "center", "explain-turb-1")
        if r:
            draw_arrow(layer, (r.x + r.width / 2, r.bottom), (ex, ey - er), progress)
        if er * progress >= 1:
            pygame.draw.circle(layer, config.Color.WHITE, (int(ex), int(ey)), int(er * progress), 2)

        overlay.text_label(layer, "Flatter Velocity Profile", cx, h - 40, "center", "explain-turb-2")
        pygame.draw.line(layer, config.Color.WHITE, (cx - 70, h - 25), (cx - 70 + 140 * progress, h - 25), 2)

        boundary_top = layers.collision_top
        fully = flow.physics.regime is Regime.FULLY_TURBULENT
        r = overlay.text_label(layer, "Thin Boundary Layer" if fully else "Thicker Boundary Layer",
                               100, boundary_top + 20, "left", "explain-turb-3")
        if r:
            draw_arrow(layer, (r.x + r.width / 2, r.y), (100, boundary_top - 5), progress)
        if fully:
            overlay.info_box(layer, "explain-fullyturb-infobox", "Complete Turbulence Impact", [
                "<b>Friction Driver:</b> Pipe Roughness",
                "<b>Pressure Drop:</b> Maximum",
                "The turbulent boundary layer is thin and the",
                "viscous sublayer barely covers wall roughness,",
                "causing high friction.",
                "∙ Note: Darcy f_D = 4 x Fanning f",
            ], ease)
        else:
            overlay.info_box(layer, "explain-partturb-infobox", "Partial Turbulence Impact", [
                "<b>Friction Driver:</b> Re & Roughness",
                "<b>Pressure Drop:</b> High",
                "A boundary layer shields the main flow, but",
                "its viscous sublayer is key. The interplay",
                "between sublayer thickness and wall roughness",
                "governs friction.",
                "∙ Note: Darcy f_D = 4 x Fanning f",
            ], ease)

    layer.set_alpha(int(255 * ease))
    surface.blit(layer, (0, 0))


def draw_full_view(surface: pygame.Surface, overlay: Overlay, flow: FlowState, layers: FullLayers,
                   particles: Sequence[Particle], t: float, explain_progress=None) -> None:
    """explain_progress 가 None 이면 설명 오버레이 없음"""
    draw_pipe(surface)
    draw_boundary_layer(surface, layers, t)
    draw_particles(surface, particles)
    if explain_progress is not None:
        draw_explanation(surface, overlay, flow, layers, explain_progress)


# ----------------------------------------------------------------------
# 상세 뷰 공통
# ----------------------------------------------------------------------
def _wall_surface(surface: pygame.Surface, wall_y: numpy.ndarray) -> None:
    w, h = surface.get_size()
    n = min(w, len(wall_y))
    if n == 0:
        return
    points = [(0, h)] + list(zip(range(n), wall_y[:n].tolist())) + [(w, h)]
    pygame.draw.polygon(surface, config.Color.PIPE, points)


def _ripples(surface: pygame.Surface, peaks, wall_y: numpy.ndarray, sublayer_top: float,
             intensity: float, t: float, speed: float, max_radius: float, alpha_gain: float,
             width_gain: float) -> None:
    """조도 봉우리에서 퍼지는 압력 파문 (점성 저층 위쪽만)"""
    if intensity <= 0:
        return
    old_clip = surface.get_clip()
    surface.set_clip(pygame.Rect(0, 0, surface.get_width(), max(0, int(sublayer_top))))
    rings = max(1, int(round(0.5 + width_gain * intensity)))
    for index, x in enumerate(peaks):
        phase = (t * speed + index * 0.7) % 1.0
        alpha = math.sin(phase * math.pi) * (0.05 + alpha_gain * intensity)
        radius = int(phase * max_radius)
        if alpha <= 0.01 or radius < 1:
            continue
        color = (*config.Color.RIPPLE, int(255 * min(1.0, alpha)))
        for k in range(rings):
            pygame.gfxdraw.aacircle(surface, int(x), int(wall_y[x]), radius + k, color)
    surface.set_clip(old_clip)


# ----------------------------------------------------------------------
# 경계층 확대 뷰
# ----------------------------------------------------------------------
def draw_boundary_detail(surface: pygame.Surface, overlay: Overlay, flow: FlowState, layers: DetailLayers,
                         profile: RoughnessProfile, particles: Sequence[Particle], t: float) -> None:
    w, h = surface.get_size()
    base = layers.wall_base_y
    wall_y = base - profile.samples * layers.roughness_height
    peak_height = (float(profile.samples.max()) if len(profile) else 0.0) * layers.roughness_height

    _vgradient(surface, layers.boundary_top_y, layers.sublayer_top_y, config.Color.ACCENT, 0.0, 0.4)
    _vgradient(surface, layers.sublayer_top_y, h, config.Color.SUBLAYER, 0.4, 0.65)
    _wall_surface(surface, wall_y)

    peaks = [x for x in profile.peaks(5) if x < w and profile.samples[x] > 0]
    _ripples(surface, peaks, wall_y, layers.sublayer_top_y, flow.contribution.roughness / 100.0, t,
             speed=2.0, max_radius=30.0, alpha_gain=0.30, width_gain=1.5)
    draw_particles(surface, particles)

    overlay.boundary_profile(surface, "boundary-profile-gauge", layers.boundary, layers.sublayer, peak_height)
    if layers.sublayer > peak_height:
        overlay.info_box(surface, "boundary-infobox", "Hydraulically Smooth Flow", [
            "The <b>viscous sublayer</b> is thicker than the",
            "roughness, acting as a buffer from the chaotic",
            "<b>turbulent boundary layer</b>.",
            "However, turbulent pressure waves from the",
            "largest peaks still cause minor friction.",
            "<b>Friction Driver:</b> Viscosity Dominated",
        ])
        top = base - layers.roughness_height
        r = overlay.text_label(surface, "Roughness buried in sublayer", w / 2, top - 20, "center", "boundary-text-1")
        if r:
            draw_arrow(surface, (r.x + r.width / 2, r.bottom), (r.x + r.width / 2, top))
    else:
        overlay.info_box(surface, "boundary-infobox", "Rough Flow", [
            "Roughness elements pierce the thin <b>viscous",
            "sublayer</b>, disrupting the <b>turbulent",
            "boundary layer</b> above.",
            "This creates eddies and form drag.",
            "<b>Friction Driver:</b> Pipe Roughness (ε)",
        ])
        r = overlay.text_label(surface, "Roughness pierces sublayer", w / 2 + 50, base - peak_height - 40,
                               "center", "boundary-text-1")
        if r:
            draw_arrow(surface, (r.x + r.width / 2, r.bottom), (w / 2 + 5, base - peak_height + 5))

    boundary_top, sublayer_top = layers.boundary_top_y, layers.sublayer_top_y
    r = overlay.text_label(surface, "Turbulent Layer", 120, (boundary_top + sublayer_top) / 2, "center",
                           "boundary-boundary-label")
    if r:
        draw_arrow(surface, (r.x, r.y), (r.x, boundary_top))
        draw_arrow(surface, (r.x, r.bottom), (r.x, sublayer_top))
    r = overlay.text_label(surface, "Viscous Sublayer", w - 120, sublayer_top + layers.sublayer / 2, "center",
                           "boundary-sublayer-label")
    if r:
        draw_arrow(surface, (r.x, r.y), (r.x, sublayer_top))
        draw_arrow(surface, (r.x, r.bottom), (r.x, base))


# ----------------------------------------------------------------------
# 벽 확대 뷰
# ----------------------------------------------------------------------
def draw_wall_detail(surface: pygame.Surface, overlay: Overlay, flow: FlowState, layers: DetailLayers,
                     profile: RoughnessProfile, particles: Sequence[Particle], t: float) -> None:
    w, h = surface.get_size()
    base = layers.wall_base_y
    normalized = profile.normalized_array()
    wall_y = base - normalized * layers.roughness_height
    peaks = [x for x in profile.peaks(5) if x < w and normalized[x] > 0]
    peak_x = peaks[0] if peaks else w // 2
    peak_height = (float(normalized[peak_x]) if peaks else 0.0) * layers.roughness_height
    peak_y = base - peak_height
    contribution = flow.contribution

    _vgradient(surface, layers.boundary_top_y, layers.sublayer_top_y, config.Color.ACCENT, 0.0, 0.8)
    _vgradient(surface, layers.sublayer_top_y, h, config.Color.SUBLAYER, 0.8, 0.95)
    _wall_surface(surface, wall_y)

    _ripples(surface, peaks, wall_y, layers.sublayer_top_y, contribution.roughness / 100.0, t,
             speed=2.5, max_radius=40.0, alpha_gain=0.35, width_gain=2.0)

    n = min(w, len(wall_y))
    if n >= 2:
        outline = list(zip(range(n), wall_y[:n].tolist()))
        pygame.draw.lines(surface, (120, 132, 160), False, outline, 3)
        pygame.draw.lines(surface, (170, 186, 214), False, outline, 1)
    pygame.draw.line(surface, (150, 165, 190), (0, layers.sublayer_top_y), (w, layers.sublayer_top_y), 3)
    pygame.draw.line(surface, config.Color.RIPPLE, (0, layers.sublayer_top_y), (w, layers.sublayer_top_y), 1)
    draw_particles(surface, particles)

    overlay.text_label(surface, friction_driver(contribution), w - 15, 15 + 18, "right", "wall-friction-driver")
    overlay.condition_gauge(surface, "wall-condition-gauge", layers.sublayer, peak_height)

    r = overlay.text_label(surface, "Turbulent Layer", 40, 70, "left", "wall-boundary-label")
    if r:
        draw_arrow(surface, (r.x + 20, r.bottom), (r.x + 20, layers.boundary_top_y))

    share = (f"Friction: <b>{contribution.viscosity:.0f}%</b> Viscosity, "
             f"<b>{contribution.roughness:.0f}%</b> Roughness")
    if layers.sublayer > peak_height:
        overlay.info_box(surface, "wall-infobox", "Wall View: Hydraulically Smooth", [
            "The <b>viscous sublayer</b> submerges the wall",
            "roughness (ε), acting as a cushion.",
            "However, turbulent pressure fluctuations still",
            "create energy loss (friction) off the largest",
            "peaks, as shown by the ripples.",
            " ",
            share,
        ], coords=(w * 0.25, 70))
        peak_text, sublayer_text = "Submerged Peak (ε)", "Thick viscous sublayer"
    else:
        overlay.info_box(surface, "wall-infobox", "Wall View: Rough Flow", [
            "The <b>viscous sublayer</b> is very thin, failing",
            "to cover the roughness peaks (ε).",
            "The peaks protrude, creating form drag and",
            "disrupting the entire <b>turbulent layer</b>,",
            "which causes significant energy loss.",
            " ",
            share,
        ], coords=(w * 0.25, 70))
        peak_text, sublayer_text = "Exposed Peak creates drag", "Thin viscous sublayer"

    r = overlay.text_label(surface, peak_text, w - 200, peak_y - 40, "center", "wall-peak-label")
    if r:
        draw_arrow(surface, (r.x + r.width / 2, r.bottom), (peak_x, peak_y))
    r = overlay.text_label(surface, sublayer_text, 40, 220, "left", "wall-sublayer-label")
    if r:
        draw_arrow(surface, (r.x + 20, r.y), (r.x + 20, layers.sublayer_top_y))


# ----------------------------------------------------------------------
# 속도 분포 그래프
# ----------------------------------------------------------------------
def draw_velocity_profile(surface: pygame.Surface, profile: numpy.ndarray, padding: int = 10) -> None:
    """세로 방향 단면 속도 분포 (파랑-주황-파랑 그라데이션 채움 + 흰 외곽선)"""
    w, h = surface.get_size()
    if profile is None or len(profile) == 0 or w <= padding or h <= 0:
        return
    graph_w = w - padding
    step = h / len(profile)
    points = [(padding, 0)]
    points += [(padding + float(v) * (graph_w - padding), i * step) for i, v in enumerate(profile)]
    points.append((padding, h))

    blue, orange = numpy.array(config.Color.SUBLAYER, float), numpy.array((245, 166, 35), float)
    fill = pygame.Surface((w, h), pygame.SRCALPHA)
    for y in range(h):
        k = 1.0 - abs(y / max(1, h - 1) - 0.5) * 2.0 # 가운데 1
        rgb = (blue + (orange - blue) * k).astype(int)
        pygame.draw.line(fill, (*rgb.tolist(), 153), (0, y), (w - 1, y))
    mask = pygame.Surface((w, h), pygame.SRCALPHA)
    pygame.draw.polygon(mask, (255, 255, 255, 255), points)
    fill.blit(mask, (0, 0), special_flags=pygame.BLEND_RGBA_MULT)
    surface.blit(fill, (0, 0))
    pygame.draw.lines(surface, (235, 235, 235), True, points, 2)

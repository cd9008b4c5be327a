# moody/overlay.py
# 드래그/크기 조절/숨김이 가능한 주석 상자 그리기 + 히트박스 등록

from __future__ import annotations

import math
import re
from typing import Dict, Optional, Sequence, Tuple

import pygame

import config
from moody.annotation import AnnotationStore, HitboxList, HitKind, Rect

PLACEHOLDER_SIZE = 32

_BOX_FILL = (22, 33, 62, 217)
_GAUGE_FILL = (22, 33, 62, 230)
_BOLD_SPLIT = re.compile(r"(<b>|</b>)")


def _alpha_rect(surface: pygame.Surface, rect: Rect, rgba, radius: int = 0) -> None:
    """반투명 채우기 (SRCALPHA 레이어 위에서도 섞이도록 임시 면에 그려서 blit)"""
    w, h = max(1, int(rect.width)), max(1, int(rect.height))
    tmp = pygame.Surface((w, h), pygame.SRCALPHA)
    pygame.draw.rect(tmp, rgba, tmp.get_rect(), border_radius=radius)
    surface.blit(tmp, (int(rect.x), int(rect.y)))


def _alpha_circle(surface: pygame.Surface, center, radius: float, rgba) -> None:
    r = max(1, int(radius))
    tmp = pygame.Surface((2 * r, 2 * r), pygame.SRCALPHA)
    pygame.draw.circle(tmp, rgba, (r, r), r)
    surface.blit(tmp, (int(center[0]) - r, int(center[1]) - r))


def _to_pg(rect: Rect) -> pygame.Rect:
    return pygame.Rect(int(rect.x), int(rect.y), max(1, int(rect.width)), max(1, int(rect.height)))


def draw_arrow(surface: pygame.Surface, start, end, progress: float = 1.0, head: float = 8.0,
               color=config.Color.WHITE, width: int = 2) -> None:
    """start -> end 화살표, progress < 1 이면 선만 일부 그림"""
    dx, dy = end[0] - start[0], end[1] - start[1]
    tip = (start[0] + dx * progress, start[1] + dy * progress)
    pygame.draw.line(surface, color, start, tip, width)
    if progress >= 1.0:
        angle = math.atan2(dy, dx)
        for side in (-math.pi / 6, math.pi / 6):
            wing = (tip[0] - head * math.cos(angle + side), tip[1] - head * math.sin(angle + side))
            pygame.draw.line(surface, color, tip, wing, width)


class Overlay:
    """
    주석 상자 그리기
        - 표시 여부는 AnnotationStore (카테고리 AND 개별)
        - 숨김 상태: 전체 뷰면 32x32 "+" 자리표시 (Toggle 히트박스만), 상세 뷰면 아무것도 없음
        - 표시 상태: 저장된 폭으로 균일 확대 (높이는 자연 비율), 상자 + 크기 조절 손잡이 + 닫기 버튼
          히트박스는 Drag, Resize, Toggle 순서로 등록
    full_view 는 그리는 쪽(렌더러)이 뷰마다 설정
    """
    def __init__(self, store: AnnotationStore, hitboxes: HitboxList):
        self.store = store
        self.hitboxes = hitboxes
        self.full_view = True
        self._fonts: Dict[Tuple[int, bool], pygame.font.Font] = {}

    def font(self, size: float, bold: bool = False) -> pygame.font.Font:
        key = (max(6, int(round(size))), bool(bold))
        f = self._fonts.get(key)
        if f is None:
            f = pygame.font.SysFont("arial", key[0], bold=key[1])
            self._fonts[key] = f
        return f

    # ------------------------------------------------------------------
    # 공통
    # ------------------------------------------------------------------
    def _scaled(self, id: str, natural_w: float, natural_h: float):
        state = self.store.state(id)
        aspect = natural_w / natural_h if natural_h > 0 else 1.0
        width = state.size[0] if state.size is not None else natural_w
        return state, width, width / aspect, width / natural_w

    def placeholder(self, surface: pygame.Surface, id: str, x: float, y: float) -> None:
        rect = Rect(x, y, PLACEHOLDER_SIZE, PLACEHOLDER_SIZE)
        _alpha_rect(surface, rect, (22, 33, 62, 230), 6)
        pygame.draw.rect(surface, config.Color.PARTICLE, _to_pg(rect), 2, border_radius=6)
        plus = self.font(24, True).render("+", True, config.Color.WHITE)
        surface.blit(plus, plus.get_rect(center=(int(x + PLACEHOLDER_SIZE / 2), int(y + PLACEHOLDER_SIZE / 2 + 1))))
        self.hitboxes.add(id, rect, HitKind.TOGGLE)

    def _chrome(self, surface: pygame.Surface, id: str, box: Rect, scale: float,
                close_size: float, close_pad: float) -> None:
        """크기 조절 손잡이(오른쪽 아래) + 닫기 버튼(오른쪽 위), 히트박스 등록"""
        handle = 12 * min(1.5, scale)
        hx, hy = box.right, box.bottom
        handle_rect = Rect(hx - handle, hy - handle, handle, handle)
        pygame.draw.rect(surface, config.Color.ACCENT, _to_pg(handle_rect))
        pygame.draw.rect(surface, config.Color.WHITE, _to_pg(handle_rect), 1)

        cx = box.right - close_pad - close_size / 2
        cy = box.y + close_pad + close_size / 2
        _alpha_circle(surface, (cx, cy), close_size / 2, (255, 255, 255, 38))
        k = close_size * 0.25
        lw = max(1, int(round(1.5 * scale)))
        pygame.draw.line(surface, config.Color.WHITE, (cx - k, cy - k), (cx + k, cy + k), lw)
        pygame.draw.line(surface, config.Color.WHITE, (cx + k, cy - k), (cx - k, cy + k), lw)

        self.hitboxes.add(id, box, HitKind.DRAG)
        self.hitboxes.add(id, Rect(hx - handle - 2, hy - handle - 2, handle + 4, handle + 4), HitKind.RESIZE)
        self.hitboxes.add(id, Rect(cx - close_size / 2, cy - close_size / 2, close_size, close_size), HitKind.TOGGLE)

    # ------------------------------------------------------------------
    # 글자 라벨
    # ------------------------------------------------------------------
    def text_label(self, surface: pygame.Surface, text: str, x: float, y: float,
                   align: str = "center", id: Optional[str] = None) -> Optional[Rect]:
        """
        (x, y) 는 글자 기준점 (세로 가운데), align 은 left / center / right
        보이면 상자 Rect, 숨겨졌거나 자리표시만 그렸으면 None
        """
        state = self.store.state(id) if id else None
        ox, oy = state.offset if state else (0.0, 0.0)
        h_pad, v_pad = 15.0, 12.0
        tw, th = self.font(14, True).size(text)
        natural_w = tw + h_pad * 2
        natural_h = th + v_pad * 2

        if id and not self.store.is_visible(id):
            if self.full_view:
                px = x + ox
                if align == "right":
                    px -= natural_w
                elif align == "center":
                    px -= natural_w / 2
                self.placeholder(surface, id, px, y + oy - natural_h / 2)
            return None

        if id:
            _, width, height, scale = self._scaled(id, natural_w, natural_h)
        else:
            width, height, scale = natural_w, natural_h, 1.0
        fx, fy = x + ox, y + oy
        pad = h_pad * scale
        if align == "left":
            rx = fx
        elif align == "right":
            rx = fx - width + pad * 2
        else:
            rx = fx - width / 2
        box = Rect(rx, fy - height / 2, width, height)

        _alpha_rect(surface, box, _BOX_FILL, int(6 * scale))
        pygame.draw.rect(surface, config.Color.ACCENT, _to_pg(box), 1, border_radius=int(6 * scale))
        label = self.font(14 * scale, True).render(text, True, config.Color.WHITE)
        if align == "left":
            pos = label.get_rect(midleft=(int(fx + pad), int(fy)))
        elif align == "right":
            pos = label.get_rect(midright=(int(fx - pad), int(fy)))
        else:
            pos = label.get_rect(center=(int(fx), int(fy)))
        surface.blit(label, pos)

        if id:
            self._chrome(surface, id, box, scale, 18 * scale, 4 * scale)
        return box

    # ------------------------------------------------------------------
    # 설명 상자
    # ------------------------------------------------------------------
    def _runs(self, line: str):
        """<b>...</b> 구간 분리 -> [(글자, 굵게 여부)]"""
        bold = False
        runs = []
        for part in _BOLD_SPLIT.split(line):
            if part == "<b>":
                bold = True
            elif part == "</b>":
                bold = False
            elif part:
                runs.append((part, bold))
        return runs

    def info_box(self, surface: pygame.Surface, id: str, title: str, lines: Sequence[str],
                 ease: float = 1.0, coords: Optional[Tuple[float, float]] = None) -> Optional[Rect]:
        """
        여러 줄 설명 상자 (기본 위치는 왼쪽 아래)
        ease < 1 이면 왼쪽에서 미끄러져 들어옴 (사용자가 옮기거나 크기를 바꾼 상자는 제외)
        """
        line_h, pad, title_h = 18.0, 15.0, 22.0
        natural = self.font(13, True).size(title)[0]
        for line in lines:
            natural = max(natural, sum(self.font(12, b).size(t)[0] for t, b in self._runs(line)))
        natural_w = natural + pad * 2
        natural_h = pad * 2 + title_h + len(lines) * line_h

        if coords is not None:
            bx, by = coords
        else:
            bx, by = 15.0, surface.get_height() - natural_h - 15.0

        state, width, height, scale = self._scaled(id, natural_w, natural_h)
        ox, oy = state.offset
        if not self.store.is_visible(id):
            if self.full_view:
                self.placeholder(surface, id, bx + ox, by + oy)
            return None

        moved = id in self.store.states and (state.offset != (0.0, 0.0) or state.size is not None)
        if not moved:
            bx += (1.0 - ease) * -50.0

        box = Rect(bx + ox, by + oy, width, height)
        _alpha_rect(surface, box, _BOX_FILL, int(8 * scale))
        pygame.draw.rect(surface, config.Color.ACCENT, _to_pg(box), 1, border_radius=int(8 * scale))

        surface.blit(self.font(13 * scale, True).render(title, True, config.Color.ACCENT),
                     (int(box.x + pad * scale), int(box.y + pad * scale)))
        y = box.y + (pad + title_h) * scale
        for line in lines:
            x = box.x + pad * scale
            for text, bold in self._runs(line):
                f = self.font(12 * scale, bold)
                surface.blit(f.render(text, True, config.Color.WHITE), (int(x), int(y)))
                x += f.size(text)[0]
            y += line_h * scale

        self._chrome(surface, id, box, scale, 20 * scale, 5 * scale)
        return box

    # ------------------------------------------------------------------
    # 게이지 (상세 뷰 전용, 숨김이면 자리표시도 없음)
    # ------------------------------------------------------------------
    def _gauge_box(self, surface: pygame.Surface, id: str, natural_w: float, natural_h: float,
                   base: Tuple[float, float], title: str):
        if not self.store.is_visible(id):
            return None
        state, width, height, scale = self._scaled(id, natural_w, natural_h)
        box = Rect(base[0] + state.offset[0], base[1] + state.offset[1], width, height)
        _alpha_rect(surface, box, _GAUGE_FILL, int(8 * scale))
        pygame.draw.rect(surface, config.Color.PARTICLE, _to_pg(box), 1, border_radius=int(8 * scale))
        label = self.font(13 * scale, True).render(title, True, config.Color.WHITE)
        surface.blit(label, label.get_rect(midtop=(int(box.x + width / 2), int(box.y + 10 * scale))))
        return box, scale

    def condition_gauge(self, surface: pygame.Surface, id: str, sublayer: float, roughness: float) -> Optional[Rect]:
        """점성 저층 두께 vs 최고 조도 높이 막대 비교"""
        natural_w, natural_h, margin = 200.0, 180.0, 20.0
        placed = self._gauge_box(surface, id, natural_w, natural_h,
                                 (surface.get_width() - natural_w - margin, margin + 50), "Flow Condition Gauge")
        if placed is None:
            return None
        box, s = placed

        area_y, area_h, bar_w = box.y + 40 * s, 80 * s, 40 * s
        top = max(sublayer, roughness, 1.0)
        sub_h = sublayer / top * area_h
        rough_h = roughness / top * area_h
        sub_x = box.x + box.width / 2 - bar_w - 15 * s
        rough_x = box.x + box.width / 2 + 15 * s
        _alpha_rect(surface, Rect(sub_x, area_y + area_h - sub_h, bar_w, sub_h), (74, 144, 226, 204))
        _alpha_rect(surface, Rect(rough_x, area_y + area_h - rough_h, bar_w, rough_h), (200, 200, 200, 204))

        small = self.font(11 * s)
        for cx, (a, b) in ((sub_x + bar_w / 2, ("Viscous", "Sublayer (δ')")), (rough_x + bar_w / 2, ("Roughness", "Height (ε)"))):
            for dy, text in ((8, a), (20, b)):
                t = small.render(text, True, config.Color.WHITE)
                surface.blit(t, t.get_rect(midtop=(int(cx), int(area_y + area_h + dy * s))))

        smooth = sublayer > roughness
        status = self.font(12 * s, True).render(
            "HYDRAULICALLY SMOOTH" if smooth else "ROUGH FLOW", True,
            config.Color.SUBLAYER if smooth else config.Color.ACCENT)
        surface.blit(status, status.get_rect(midtop=(int(box.x + box.width / 2), int(box.bottom - 22 * s))))

        self._chrome(surface, id, box, s, 20 * s, 5 * s)
        return box

    def boundary_profile(self, surface: pygame.Surface, id: str, boundary: float, sublayer: float,
                         roughness: float) -> Optional[Rect]:
        """난류 경계층 / 점성 저층 두께 막대 + 조도 높이 표시선"""
        natural_w, natural_h, margin = 150.0, 220.0, 20.0
        placed = self._gauge_box(surface, id, natural_w, natural_h,
                                 (surface.get_width() - natural_w - margin, margin), "Boundary Profile")
        if placed is None:
            return None
        box, s = placed

        bar_x, bar_y = box.x + 40 * s, box.y + 40 * s
        bar_h, bar_w = box.height - 60 * s, 25 * s
        top = max(boundary, roughness, 1.0)
        bottom = bar_y + bar_h
        boundary_h = boundary / top * bar_h
        sub_h = sublayer / top * bar_h
        _alpha_rect(surface, Rect(bar_x, bottom - boundary_h, bar_w, boundary_h), (233, 69, 96, 102))
        _alpha_rect(surface, Rect(bar_x, bottom - sub_h, bar_w, sub_h), (74, 144, 226, 204))

        small = self.font(11 * s)
        label_x = bar_x + bar_w + 10 * s
        guide = (160, 160, 170)

        def label(text, y, to_x):
            t = small.render(text, True, config.Color.WHITE)
            surface.blit(t, t.get_rect(midleft=(int(label_x), int(y))))
            pygame.draw.line(surface, guide, (label_x - 5 * s, y), (to_x, y), 1)

        label("Turbulent (δ)", bottom - boundary_h, bar_x + bar_w / 2)
        label("Viscous (δ')", bottom - sub_h, bar_x + bar_w / 2)

        marker_y = bottom - roughness / top * bar_h
        if roughness > 0 and bar_y < marker_y < bottom:
            pygame.draw.line(surface, config.Color.WHITE, (bar_x, marker_y), (bar_x + bar_w, marker_y), max(1, int(2 * s)))
            label("Roughness (ε)", marker_y, bar_x)

        self._chrome(surface, id, box, s, 20 * s, 5 * s)
        return box

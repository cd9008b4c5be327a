# moody/layers.py
# 뷰별 경계층/점성 저층/조도 기하 계산 (입자 충돌과 그리기가 같은 값을 쓰도록 한 곳에서 계산)

from __future__ import annotations

from dataclasses import dataclass

import config
from moody.diagram import map_log
from moody.flow_state import FrictionResult

# 경계층 두께 보간은 Re 가 층류 경계를 막 넘은 지점부터 시작
_RE_LO = config.Reynolds.LAMINAR + 1
_RE_HI = config.Reynolds.MAX


def _thickness(re: float, span) -> float:
    return map_log(re, _RE_LO, _RE_HI, span[0], span[1])


@dataclass(frozen=True)
class FullLayers:
    """전체 파이프 뷰 (위/아래 대칭, 두께는 벽에서부터)"""
    height: float
    boundary: float
    sublayer: float
    laminar: bool

    @property
    def top_wall(self) -> float:
        return float(config.WALL_BUFFER)

    @property
    def bottom_wall(self) -> float:
        return self.height - config.WALL_BUFFER

    @property
    def collision_top(self) -> float:
        """난류면 경계층 윗면, 층류면 벽에서 충돌"""
        return self.top_wall + (0.0 if self.laminar else self.boundary)

    @property
    def collision_bottom(self) -> float:
        return self.bottom_wall - (0.0 if self.laminar else self.boundary)


def full_layers(re: float, result: FrictionResult, height: float) -> FullLayers:
    geometry = config.View.Full
    if result.is_laminar:
        return FullLayers(height, geometry.LAMINAR_BOUNDARY, geometry.LAMINAR_SUBLAYER, True)
    return FullLayers(height, _thickness(re, geometry.BOUNDARY), _thickness(re, geometry.SUBLAYER), False)


@dataclass(frozen=True)
class DetailLayers:
    """
    상세 뷰 (아래쪽 벽 하나만 확대)
        - wall_base_y      : 조도 0 기준 벽면 y
        - roughness_height : 조도 최대 높이 [px] (절대 조도 x 확대 배율)
        - boundary / sublayer : 벽 기준선에서 잰 두께 [px]
        - max_vx           : 경계층 바깥 유속
    """
    wall_base_y: float
    roughness_height: float
    boundary: float
    sublayer: float
    max_vx: float
    speed_color_max: float

    @property
    def boundary_top_y(self) -> float:
        return self.wall_base_y - self.boundary

    @property
    def sublayer_top_y(self) -> float:
        return self.wall_base_y - self.sublayer


def detail_layers(geometry, re: float, abs_roughness: float, height: float) -> DetailLayers:
    """geometry 는 config.View.Boundary 또는 config.View.Wall"""
    return DetailLayers(
        wall_base_y=height * geometry.WALL_BASE,
        roughness_height=abs_roughness * geometry.ZOOM,
        boundary=_thickness(re, geometry.BOUNDARY),
        sublayer=_thickness(re, geometry.SUBLAYER),
        max_vx=_thickness(re, geometry.MAX_VX),
        speed_color_max=geometry.SPEED_COLOR_MAX,
    )

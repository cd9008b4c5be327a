# moody/flow_state.py
# 유동 영역 판정 및 마찰 계수 결정 (모든 영역 판단은 classify 하나를 거침)

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, NamedTuple, Optional

import config
from moody.correlation import aga_friction, laminar, swamee_jain


class Regime(Enum):
    LAMINAR = "laminar"
    TRANSITION = "transition"
    PARTIALLY_TURBULENT = "partially-turbulent"
    FULLY_TURBULENT = "fully-turbulent"

    def __str__(self) -> str:
        return self.value

    @property
    def title(self) -> str:
        return DESCRIPTIONS[self][0]

    @property
    def text(self) -> str:
        return DESCRIPTIONS[self][1]


DESCRIPTIONS = {
    Regime.LAMINAR: (
        "Laminar Flow",
        "In laminar flow (Re < 2300), gas molecules move in smooth, parallel layers. "
        "Friction is governed by viscosity and is independent of pipe roughness.",
    ),
    Regime.TRANSITION: (
        "Transition Flow",
        "In the transition zone (2300 < Re < 4000), flow begins to lose its stability. "
        "It is an unpredictable mixture of laminar and turbulent characteristics.",
    ),
    Regime.PARTIALLY_TURBULENT: (
        "Partially Turbulent Flow",
        "The friction factor depends on both Reynolds number and pipe roughness. "
        "This corresponds to the sloped portion of the curves, as described by the full "
        "Colebrook-White equation.",
    ),
    Regime.FULLY_TURBULENT: (
        "Complete Turbulence",
        "At very high Reynolds numbers, friction becomes independent of Re and is only a "
        "function of the pipe's roughness. This corresponds to the flat, horizontal portion "
        "of the curves.",
    ),
}


@dataclass(frozen=True)
class FrictionResult:
    """Fanning 마찰 계수와 유동 영역"""
    friction: float
    regime: Regime

    @property
    def darcy(self) -> float:
        return 4.0 * self.friction

    @property
    def is_laminar(self) -> bool:
        return self.regime is Regime.LAMINAR


class RoughnessCurve(NamedTuple):
    id: str
    value: float
    label: str


ROUGHNESS_CURVES = tuple(RoughnessCurve(*level) for level in config.ROUGHNESS_LEVELS)


class Contribution(NamedTuple):
    viscosity: float # [%]
    roughness: float # [%]


def _blend(re: float) -> float:
    """천이 구간(2300 < Re < 4000) 내 선형 보간 비율"""
    lo, hi = config.Reynolds.LAMINAR, config.Reynolds.TURBULENT
    return (re - lo) / (hi - lo)


def classify(re: float, roughness: float, threshold: Optional[float] = None) -> FrictionResult:
    """
    레이놀즈 수와 상대 조도로 마찰 계수와 유동 영역을 결정
        - Re <= 2300        : 층류, f = 16/Re
        - 2300 < Re < 4000  : 천이, 층류값과 Re=4000 의 Swamee-Jain 값을 선형 보간
        - Re >= 4000        : Swamee-Jain, 점성항이 조도항의 threshold 배 미만이면 완전 난류(AGA 값)
    threshold 를 주지 않으면 config.FULLY_ROUGH_THRESHOLD 사용
    """
    re = float(re)
    roughness = float(roughness)
    if re <= 0:
        raise ValueError("re must be > 0")
    if roughness < 0:
        raise ValueError("roughness must be >= 0")
    if threshold is None:
        threshold = config.FULLY_ROUGH_THRESHOLD

    if re <= config.Reynolds.LAMINAR:
        return FrictionResult(laminar(re), Regime.LAMINAR)

    if re < config.Reynolds.TURBULENT:
        blend = _blend(re)
        f_turb = swamee_jain(config.Reynolds.TURBULENT, roughness)
        return FrictionResult(laminar(re) * (1.0 - blend) + f_turb * blend, Regime.TRANSITION)

    f_approx = swamee_jain(re, roughness)
    if roughness > 0:
        viscous_term = 2.51 / (re * math.sqrt(f_approx))
        roughness_term = roughness / 3.7
        if viscous_term < threshold * roughness_term:
            # 선도의 수평 점근선과 정확히 일치하도록 AGA 값으로 교체
            return FrictionResult(aga_friction(roughness), Regime.FULLY_TURBULENT)
    return FrictionResult(f_approx, Regime.PARTIALLY_TURBULENT)


def igt_friction(re: float) -> float:
    """IGT 모델: 완전히 매끈한 관의 난류 한계 (classify 의 ε=0 결과)"""
    return classify(re, 0.0).friction


def friction_contribution(re: float, roughness: float) -> Contribution:
    """
    마찰에 대한 점성/조도 기여율 [%] (설명용, classify 에는 영향 없음)
    Swamee-Jain 식의 두 항 크기 비로 계산, 천이 구간에서는 조도 기여를 0 에서부터 보간
    """
    if re <= config.Reynolds.LAMINAR or roughness <= 0:
        return Contribution(100.0, 0.0)

    roughness_term = roughness / 3.7
    viscous_term = 5.74 / re**0.9
    total = roughness_term + viscous_term
    if total == 0:
        return Contribution(100.0, 0.0)

    roughness_percent = roughness_term / total * 100.0
    if re < config.Reynolds.TURBULENT:
        roughness_percent *= _blend(re)
    return Contribution(100.0 - roughness_percent, roughness_percent)


def snap_roughness(roughness: float) -> RoughnessCurve:
    """가장 가까운 선도 곡선 (동점이면 목록상 앞의 것)"""
    return min(ROUGHNESS_CURVES, key=lambda c: abs(c.value - roughness))


def clamp_reynolds(re: float) -> float:
    return max(float(config.Reynolds.MIN), min(float(config.Reynolds.MAX), float(re)))


@dataclass(frozen=True)
class FlowState:
    """
    한 프레임의 유동 상태
        - physics : 실제 상대 조도로 계산 (입자 속도, 기여율 막대)
        - diagram : 가장 가까운 곡선 값으로 계산 (Moody 선도 표시점이 곡선 위에 놓이도록)
    """
    reynolds: float
    relative_roughness: float
    physics: FrictionResult
    diagram: FrictionResult
    curve: RoughnessCurve
    contribution: Contribution

    @property
    def regime(self) -> Regime:
        return self.physics.regime


def resolve(re: float, relative_roughness: float) -> FlowState:
    """실제 조도/스냅 조도 두 번 classify"""
    curve = snap_roughness(relative_roughness)
    return FlowState(
        reynolds=float(re),
        relative_roughness=float(relative_roughness),
        physics=classify(re, relative_roughness),
        diagram=classify(re, curve.value),
        curve=curve,
        contribution=friction_contribution(re, relative_roughness),
    )


class ModelFriction(NamedTuple):
    key: str
    name: str
    friction: float
    color: tuple

    @property
    def darcy(self) -> float:
        return 4.0 * self.friction


def model_frictions(flow: FlowState, active: Dict[str, bool]) -> List[ModelFriction]:
    """
    활성 모델별 마찰 계수 (대시보드/선도 표시점용)
    Colebrook 은 스냅 값, IGT/AGA 는 난류(Re > 4000)에서만 표시, NaN 은 제외
    """
    results = []
    turbulent = flow.reynolds > config.Reynolds.TURBULENT
    for key, (name, color) in config.MODELS.items():
        if not active.get(key, False):
            continue
        if key == "colebrook":
            f = flow.diagram.friction
        elif key == "igt":
            if not turbulent:
                continue
            f = igt_friction(flow.reynolds)
        elif key == "aga":
            if not turbulent:
                continue
            f = aga_friction(flow.curve.value)
        else:
            raise KeyError(key)
        if math.isnan(f):
            continue
        results.append(ModelFriction(key, name, f, color))
    return results

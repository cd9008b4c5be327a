# moody/velocity_profile.py
# 파이프 단면 속도 분포 (멱법칙 근사) 와 프레임별 보간

from __future__ import annotations

import math
from typing import Optional

import numpy

import config
from moody.flow_state import FrictionResult

LAMINAR_EXPONENT = 0.5


def profile_exponent(result: FrictionResult) -> float:
    """층류는 0.5 고정, 난류는 2 sqrt(f) / 2.2"""
    if result.is_laminar:
        return LAMINAR_EXPONENT
    return 2.0 * math.sqrt(result.friction) / 2.2


def target_profile(result: FrictionResult, points: int) -> numpy.ndarray:
    """
    높이 방향 points+1 개 점의 정규화 속도 (1 - |r|)^e
    r 은 중심 0, 벽 +-1
    """
    points = max(1, int(points))
    r = (numpy.arange(points + 1) / points - 0.5) * 2.0
    return numpy.power(1.0 - numpy.abs(r), profile_exponent(result))


class VelocityProfile:
    """현재 분포를 목표 분포 쪽으로 매 프레임 LERP_FACTOR 만큼 이동"""
    def __init__(self, lerp: float = config.LERP_FACTOR):
        self.lerp = float(lerp)
        self.current: Optional[numpy.ndarray] = None

    def update(self, result: FrictionResult, points: int) -> numpy.ndarray:
        target = target_profile(result, points)
        if self.current is None or self.current.shape != target.shape:
            self.current = target
        else:
            self.current = self.current + (target - self.current) * self.lerp
        return self.current

# moody/correlation.py
# 관 마찰 계수 경험식 모음 (모두 Fanning 기준, Darcy = 4 x Fanning)

import math


def laminar(re: float) -> float:
    """
    층류(Hagen-Poiseuille) 마찰 계수 f = 16 / Re
    re : 레이놀즈 수
    """
    if re <= 0:
        raise ValueError("re must be > 0")
    return 16.0 / re


def swamee_jain(re: float, roughness: float) -> float:
    """
    Colebrook 식의 양해 근사(Swamee-Jain) 마찰 계수
    re        : 레이놀즈 수 (Re >= 약 2300 에서 유효)
    roughness : 상대 조도 ε/D
    """
    if re <= 0:
        raise ValueError("re must be > 0")
    if roughness < 0:
        raise ValueError("roughness must be >= 0")
    log_term = math.log10(roughness / 3.7 + 5.74 / re**0.9)
    return 0.0625 / log_term**2


def aga_friction(roughness: float) -> float:
    """
    완전 거친 관(von Karman) 한계 마찰 계수 f = 1 / (4 log10(3.7 / ε))^2
    매끈한 관(ε <= 0)은 완전 거친 한계가 없으므로 NaN 반환 (호출 측에서 건너뛸 것)
    """
    if roughness <= 0:
        return math.nan
    return 1.0 / (4.0 * math.log10(3.7 / roughness))**2


def darcy(fanning: float) -> float:
    """표시용 Darcy 마찰 계수"""
    return 4.0 * fanning

# faerber/delta_e.py
from __future__ import annotations

"""
Perceptual colour differences over CIE Lab triples (alpha is never involved).

Exports:
  delta_e1976(lab1, lab2)
  delta_e1994(lab1, lab2, textiles=False)
  delta_e2000_pair(lab1, lab2)
  delta_e(lab1, lab2, metric)
  delta_e_matrix(src_lab, pal_lab, metric)   # (N,3) x (P,3) -> (N,P)

Notes:
  - 1994 is asymmetric: chroma weights come from the first (reference) colour.
  - 2000 treats hue as 0 at zero chroma and drops the hue difference when
    either chroma is zero, so achromatic pairs never produce NaN.
  - Every result is finite and >= 0; smaller is closer.
"""

import math
from typing import Callable, Dict, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from .methods import DistanceMetric

# CIE94 weights: (kL, K1, K2)
DE1994_GRAPHIC_ARTS: Tuple[float, float, float] = (1.0, 0.045, 0.015)
DE1994_TEXTILES: Tuple[float, float, float] = (2.0, 0.048, 0.014)

_POW25_7 = 25.0**7

LabLike = Sequence[float]


# Scalar forms


def delta_e1976(lab1: LabLike, lab2: LabLike) -> float:
    """Euclidean distance in L*a*b*."""
    dl = float(lab1[0]) - float(lab2[0])
    da = float(lab1[1]) - float(lab2[1])
    db = float(lab1[2]) - float(lab2[2])
    return math.sqrt(dl * dl + da * da + db * db)


def delta_e1994(lab1: LabLike, lab2: LabLike, textiles: bool = False) -> float:
    """CIE94 with graphic-arts (default) or textile weighting."""
    kl, k1, k2 = DE1994_TEXTILES if textiles else DE1994_GRAPHIC_ARTS
    L1, a1, b1 = float(lab1[0]), float(lab1[1]), float(lab1[2])
    L2, a2, b2 = float(lab2[0]), float(lab2[1]), float(lab2[2])

    dl = L1 - L2
    c1 = math.hypot(a1, b1)
    c2 = math.hypot(a2, b2)
    dc = c1 - c2
    dh2 = max(0.0, (a1 - a2) ** 2 + (b1 - b2) ** 2 - dc * dc)

    s_c = 1.0 + k1 * c1
    s_h = 1.0 + k2 * c1
    return math.sqrt((dl / kl) ** 2 + (dc / s_c) ** 2 + dh2 / (s_h * s_h))


def delta_e2000_pair(lab1: LabLike, lab2: LabLike) -> float:
    """
    CIEDE2000 distance between two Lab colours.
    Scalar reference implementation.
    """
    L1, a1, b1 = float(lab1[0]), float(lab1[1]), float(lab1[2])
    L2, a2, b2 = float(lab2[0]), float(lab2[1]), float(lab2[2])

    C1 = math.hypot(a1, b1)
    C2 = math.hypot(a2, b2)
    C_bar = 0.5 * (C1 + C2)
    G = 0.5 * (1.0 - math.sqrt((C_bar**7) / (C_bar**7 + _POW25_7)))

    a1p = (1.0 + G) * a1
    a2p = (1.0 + G) * a2
    C1p = math.hypot(a1p, b1)
    C2p = math.hypot(a2p, b2)

    def _hue(a_val: float, b_val: float) -> float:
        if a_val == 0.0 and b_val == 0.0:
            return 0.0
        ang = math.degrees(math.atan2(b_val, a_val))
        return ang + 360.0 if ang < 0.0 else ang

    h1p = _hue(a1p, b1)
    h2p = _hue(a2p, b2)

    dLp = L2 - L1
    dCp = C2p - C1p

    dhp = h2p - h1p
    if C1p * C2p == 0.0:
        dhp = 0.0
    elif dhp > 180.0:
        dhp -= 360.0
    elif dhp < -180.0:
        dhp += 360.0

    dHp = 2.0 * math.sqrt(C1p * C2p) * math.sin(math.radians(dhp / 2.0))

    L_bar = 0.5 * (L1 + L2)
    C_bar_p = 0.5 * (C1p + C2p)

    if C1p * C2p == 0.0:
        h_bar_p = h1p + h2p
    else:
        h_sum = h1p + h2p
        h_diff = abs(h1p - h2p)
        if h_diff <= 180.0:
            h_bar_p = 0.5 * h_sum
        elif h_sum < 360.0:
            h_bar_p = 0.5 * (h_sum + 360.0)
        else:
            h_bar_p = 0.5 * (h_sum - 360.0)

    T = (
        1.0
        - 0.17 * math.cos(math.radians(h_bar_p - 30.0))
        + 0.24 * math.cos(math.radians(2.0 * h_bar_p))
        + 0.32 * math.cos(math.radians(3.0 * h_bar_p + 6.0))
        - 0.20 * math.cos(math.radians(4.0 * h_bar_p - 63.0))
    )

    d_theta = 30.0 * math.exp(-(((h_bar_p - 275.0) / 25.0) ** 2.0))
    R_c = 2.0 * math.sqrt((C_bar_p**7) / (C_bar_p**7 + _POW25_7))

    S_l = 1.0 + (0.015 * ((L_bar - 50.0) ** 2.0)) / math.sqrt(
        20.0 + ((L_bar - 50.0) ** 2.0)
    )
    S_c = 1.0 + 0.045 * C_bar_p
    S_h = 1.0 + 0.015 * C_bar_p * T
    R_t = -math.sin(math.radians(2.0 * d_theta)) * R_c

    kL = kC = kH = 1.0
    total = (
        (dLp / (kL * S_l)) ** 2
        + (dCp / (kC * S_c)) ** 2
        + (dHp / (kH * S_h)) ** 2
        + R_t * (dCp / (kC * S_c)) * (dHp / (kH * S_h))
    )
    return math.sqrt(max(0.0, total))


_SCALAR: Dict[DistanceMetric, Callable[[LabLike, LabLike], float]] = {
    DistanceMetric.DE1976: delta_e1976,
    DistanceMetric.DE1994G: lambda x, y: delta_e1994(x, y, textiles=False),
    DistanceMetric.DE1994T: lambda x, y: delta_e1994(x, y, textiles=True),
    DistanceMetric.DE2000: delta_e2000_pair,
}


def delta_e(lab1: LabLike, lab2: LabLike, metric: DistanceMetric) -> float:
    """Distance between a reference colour and a sample under one metric."""
    return _SCALAR[metric](lab1, lab2)


# Vectorised forms: src (N,3) against palette (P,3) -> (N,P) float64


def _split(src_lab: np.ndarray, pal_lab: np.ndarray):
    s = np.asarray(src_lab, dtype=np.float64).reshape(-1, 1, 3)
    p = np.asarray(pal_lab, dtype=np.float64).reshape(1, -1, 3)
    return s[..., 0], s[..., 1], s[..., 2], p[..., 0], p[..., 1], p[..., 2]


def _matrix_1976(src_lab: np.ndarray, pal_lab: np.ndarray) -> NDArray[np.float64]:
    L1, a1, b1, L2, a2, b2 = _split(src_lab, pal_lab)
    return np.sqrt((L1 - L2) ** 2 + (a1 - a2) ** 2 + (b1 - b2) ** 2)


def _matrix_1994(
    src_lab: np.ndarray, pal_lab: np.ndarray, textiles: bool
) -> NDArray[np.float64]:
    kl, k1, k2 = DE1994_TEXTILES if textiles else DE1994_GRAPHIC_ARTS
    L1, a1, b1, L2, a2, b2 = _split(src_lab, pal_lab)
    c1 = np.hypot(a1, b1)
    c2 = np.hypot(a2, b2)
    dc = c1 - c2
    dh2 = np.maximum(0.0, (a1 - a2) ** 2 + (b1 - b2) ** 2 - dc * dc)
    s_c = 1.0 + k1 * c1
    s_h = 1.0 + k2 * c1
    return np.sqrt(((L1 - L2) / kl) ** 2 + (dc / s_c) ** 2 + dh2 / (s_h * s_h))


def _hue_deg(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    ang = np.degrees(np.arctan2(b, a))
    ang = np.where(ang < 0.0, ang + 360.0, ang)
    return np.where((a == 0.0) & (b == 0.0), 0.0, ang)


def _matrix_2000(src_lab: np.ndarray, pal_lab: np.ndarray) -> NDArray[np.float64]:
    L1, a1, b1, L2, a2, b2 = _split(src_lab, pal_lab)

    C1 = np.hypot(a1, b1)
    C2 = np.hypot(a2, b2)
    C_bar7 = (0.5 * (C1 + C2)) ** 7
    G = 0.5 * (1.0 - np.sqrt(C_bar7 / (C_bar7 + _POW25_7)))

    a1p = (1.0 + G) * a1
    a2p = (1.0 + G) * a2
    C1p = np.hypot(a1p, b1)
    C2p = np.hypot(a2p, b2)
    h1p = _hue_deg(a1p, b1)
    h2p = _hue_deg(a2p, b2)

    achromatic = (C1p * C2p) == 0.0

    dLp = L2 - L1
    dCp = C2p - C1p
    dhp = h2p - h1p
    dhp = np.where(dhp > 180.0, dhp - 360.0, np.where(dhp < -180.0, dhp + 360.0, dhp))
    dhp = np.where(achromatic, 0.0, dhp)
    dHp = 2.0 * np.sqrt(C1p * C2p) * np.sin(np.radians(dhp / 2.0))

    L_bar = 0.5 * (L1 + L2)
    C_bar_p = 0.5 * (C1p + C2p)

    h_sum = h1p + h2p
    h_diff = np.abs(h1p - h2p)
    h_bar_p = np.where(
        h_diff <= 180.0,
        0.5 * h_sum,
        np.where(h_sum < 360.0, 0.5 * (h_sum + 360.0), 0.5 * (h_sum - 360.0)),
    )
    h_bar_p = np.where(achromatic, h_sum, h_bar_p)

    T = (
        1.0
        - 0.17 * np.cos(np.radians(h_bar_p - 30.0))
        + 0.24 * np.cos(np.radians(2.0 * h_bar_p))
        + 0.32 * np.cos(np.radians(3.0 * h_bar_p + 6.0))
        - 0.20 * np.cos(np.radians(4.0 * h_bar_p - 63.0))
    )
    d_theta = 30.0 * np.exp(-(((h_bar_p - 275.0) / 25.0) ** 2.0))
    C_bar_p7 = C_bar_p**7
    R_c = 2.0 * np.sqrt(C_bar_p7 / (C_bar_p7 + _POW25_7))

    lsq = (L_bar - 50.0) ** 2.0
    S_l = 1.0 + (0.015 * lsq) / np.sqrt(20.0 + lsq)
    S_c = 1.0 + 0.045 * C_bar_p
    S_h = 1.0 + 0.015 * C_bar_p * T
    R_t = -np.sin(np.radians(2.0 * d_theta)) * R_c

    tL = dLp / S_l
    tC = dCp / S_c
    tH = dHp / S_h
    return np.sqrt(np.maximum(0.0, tL * tL + tC * tC + tH * tH + R_t * tC * tH))


def delta_e_matrix(
    src_lab: np.ndarray, pal_lab: np.ndarray, metric: DistanceMetric
) -> NDArray[np.float64]:
    """
    Pairwise distances between N source colours and P palette colours.

    Args:
      src_lab: Lab [N,3] (or [3])
      pal_lab: Lab [P,3]
      metric : DistanceMetric
    Returns:
      float64 array [N,P]
    """
    if metric is DistanceMetric.DE1976:
        return _matrix_1976(src_lab, pal_lab)
    if metric is DistanceMetric.DE1994G:
        return _matrix_1994(src_lab, pal_lab, textiles=False)
    if metric is DistanceMetric.DE1994T:
        return _matrix_1994(src_lab, pal_lab, textiles=True)
    return _matrix_2000(src_lab, pal_lab)


__all__ = [
    "DE1994_GRAPHIC_ARTS",
    "DE1994_TEXTILES",
    "delta_e1976",
    "delta_e1994",
    "delta_e2000_pair",
    "delta_e",
    "delta_e_matrix",
]

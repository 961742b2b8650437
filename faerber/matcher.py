# faerber/matcher.py
from __future__ import annotations

"""
Nearest-colour search over a palette in CIE Lab.

Exports:
  nearest_indices(src_lab, pal_lab, metric) -> int array [N]
  match_color(palette, metric, lab)         -> (r, g, b, a)
  match_lab_rows(src_lab, alpha, palette, metric) -> uint8 [N,4]

Notes:
  - Linear scan over the palette, one entry at a time, vectorised over the
    pixels. Extra memory is O(N) whatever the palette size. The smallest
    distance wins; a later entry replaces the best only when strictly
    closer, so ties go to the earliest palette entry.
  - Output RGB is the palette entry's own 24-bit value; alpha is always the
    source pixel's.
"""

import numpy as np

from .colour_convert import Lab
from .core_types import RGBATuple
from .core_types import Lab as LabArray
from .delta_e import delta_e_matrix
from .errors import EmptyPaletteError
from .methods import DistanceMetric
from .palette_data import PaletteView


def nearest_indices(
    src_lab: LabArray, pal_lab: LabArray, metric: DistanceMetric
) -> np.ndarray:
    """For each source Lab row, the index of the nearest palette row."""
    if pal_lab.shape[0] == 0:
        raise EmptyPaletteError()
    src = np.asarray(src_lab).reshape(-1, 3)
    pal = np.asarray(pal_lab).reshape(-1, 3)

    best = delta_e_matrix(src, pal[0:1], metric)[:, 0]
    idx = np.zeros(src.shape[0], dtype=np.int32)
    for p in range(1, pal.shape[0]):
        dist = delta_e_matrix(src, pal[p : p + 1], metric)[:, 0]
        closer = dist < best
        best[closer] = dist[closer]
        idx[closer] = p
    return idx


def match_color(palette: PaletteView, metric: DistanceMetric, lab: Lab) -> RGBATuple:
    """Closest palette colour to one Lab pixel, carrying the pixel's alpha."""
    idx = int(nearest_indices(np.array(lab.triple()), palette.lab, metric)[0])
    r, g, b = (int(c) for c in palette.rgb[idx])
    return (r, g, b, lab.alpha_u8())


def match_lab_rows(
    src_lab: LabArray, alpha: np.ndarray, palette: PaletteView, metric: DistanceMetric
) -> np.ndarray:
    """
    Batched match for a block of pixels.

    Args:
      src_lab: Lab [N,3]
      alpha  : uint8 [N]
    Returns:
      uint8 [N,4] RGBA rows
    """
    idx = nearest_indices(src_lab, palette.lab, metric)
    out = np.empty((idx.shape[0], 4), dtype=np.uint8)
    out[:, :3] = palette.rgb[idx]
    out[:, 3] = alpha.reshape(-1)
    return out


__all__ = ["nearest_indices", "match_color", "match_lab_rows"]

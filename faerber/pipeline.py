# faerber/pipeline.py
from __future__ import annotations

"""
Conversion dispatcher for RGBA8 rasters.

Exports:
  convert(rgba, method, palette, workers=1)          -> uint8 [H,W,4]
  convert_naive(rgba, metric, palette, workers=1)    -> uint8 [H,W,4]
  convert_dither(rgba, method, colours)              -> uint8 [H,W,4]
  dither_bit_depth(rgba, kernel, bits, colour=False) -> uint8 [H,W,4]
  dither_single_colour(rgba, kernel, bits, tint)     -> uint8 [H,W,4]

Notes:
  - Match-only keeps every pixel's alpha. Dithered output is opaque.
  - Pixels are matched in blocks of at most CHUNK_PIXELS, so the working set
    stays bounded for any image size. DE2000 is the expensive metric, so only
    it fans the blocks out over a thread pool; the cheaper metrics walk the
    same blocks inline. Both paths give identical results.
  - Dithering is a single ordered pass and always runs on the calling thread.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence, Tuple, Union

import numpy as np

from .colour_convert import rgb_to_lab
from .core_types import RGB, Img, U8RGBA, as_rgba_u8, clamp_f64_to_u8
from .dither import Kernel, dither, kernel_for
from .errors import EmptyPaletteError, InvalidConversionMethodError
from .matcher import match_lab_rows
from .methods import ConversionMethod, DistanceMetric, DitherMethod
from .palette_data import PaletteView
from .quantize import quantize_n_bits, quantize_n_bits_rgb, quantize_palette
from .utils import debug_log, format_seconds_compact, split_rows_into_parts

# Pixels matched per block; bounds the matcher's per-block working set.
CHUNK_PIXELS = 1 << 15

# ITU-R BT.709 luma weights for greyscale bit-depth dithering.
LUMA_WEIGHTS = np.array([0.2126, 0.7152, 0.0722], dtype=np.float64)


def _match_block(
    flat: np.ndarray, palette: PaletteView, metric: DistanceMetric
) -> np.ndarray:
    lab = rgb_to_lab(flat[:, :3])
    return match_lab_rows(lab, flat[:, 3], palette, metric)


def _pixel_spans(count: int, parts: int = 1) -> List[Tuple[int, int]]:
    blocks = -(-count // CHUNK_PIXELS)
    return split_rows_into_parts(count, max(parts, blocks))


def convert_naive(
    rgba: np.ndarray,
    metric: DistanceMetric,
    palette: PaletteView,
    workers: int = 1,
    *,
    debug: bool = False,
) -> U8RGBA:
    """
    Replace every pixel with its nearest palette colour under `metric`.

    Args:
      rgba   : uint8 [H,W,4] (or [H,W,3], treated as opaque)
      metric : DistanceMetric
      palette: PaletteView of enabled entries
      workers: thread count for DE2000
    Returns:
      new uint8 [H,W,4]; alpha copied from the source
    """
    if not isinstance(metric, DistanceMetric):
        raise InvalidConversionMethodError(metric, expected="distance metric")
    if len(palette) == 0:
        raise EmptyPaletteError()

    src = as_rgba_u8(rgba)
    height, width = int(src.shape[0]), int(src.shape[1])
    out = np.empty(src.shape, dtype=np.uint8)
    if src.size == 0:
        return out
    flat_src = src.reshape(-1, 4)
    flat_out = out.reshape(-1, 4)
    count = flat_src.shape[0]

    t0 = time.perf_counter()
    if metric is DistanceMetric.DE2000 and workers > 1 and count > 1:
        spans = _pixel_spans(count, workers * 4)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                (s, e, pool.submit(_match_block, flat_src[s:e], palette, metric))
                for s, e in spans
            ]
            for s, e, fut in futures:
                flat_out[s:e] = fut.result()
        mode = f"threads={workers} blocks={len(spans)}"
    else:
        spans = _pixel_spans(count)
        for s, e in spans:
            flat_out[s:e] = _match_block(flat_src[s:e], palette, metric)
        mode = f"sequential blocks={len(spans)}"

    if debug:
        debug_log(
            f"match {metric} {width}x{height} palette={len(palette)} "
            f"{mode} in {format_seconds_compact(time.perf_counter() - t0)}"
        )
    return out


def _opaque(rgb_u8: np.ndarray) -> U8RGBA:
    h, w, _ = rgb_u8.shape
    out = np.empty((h, w, 4), dtype=np.uint8)
    out[..., :3] = rgb_u8
    out[..., 3] = 255
    return out


def convert_dither(
    rgba: np.ndarray,
    method: Union[DitherMethod, Kernel],
    colours: Sequence[RGB[int]],
) -> U8RGBA:
    """
    Error-diffuse the RGB channels onto `colours` (Manhattan nearest in RGB).

    Returns an opaque uint8 [H,W,4] array.
    """
    kernel = method if isinstance(method, Kernel) else kernel_for(method)
    quantize = quantize_palette(colours)

    src = as_rgba_u8(rgba)
    h, w, _ = src.shape
    if h == 0 or w == 0:
        return np.empty((h, w, 4), dtype=np.uint8)

    img = Img(src[..., :3].reshape(-1, 3).astype(np.float64), w)
    out = dither(img, kernel, quantize)
    return _opaque(clamp_f64_to_u8(out.buffer).reshape(h, w, 3))


def dither_bit_depth(
    rgba: np.ndarray, kernel: Kernel, bits: int, colour: bool = False
) -> U8RGBA:
    """
    Reduce to `bits` levels per channel with error diffusion.

    Greyscale (default) dithers the BT.709 luminance and writes it to all
    three channels; colour mode quantizes R, G and B independently.
    Returns an opaque uint8 [H,W,4] array.
    """
    quantize = quantize_n_bits_rgb(bits) if colour else quantize_n_bits(bits)

    src = as_rgba_u8(rgba)
    h, w, _ = src.shape
    if h == 0 or w == 0:
        return np.empty((h, w, 4), dtype=np.uint8)

    rgb = src[..., :3].reshape(-1, 3).astype(np.float64)
    if colour:
        out = dither(Img(rgb, w), kernel, quantize)
        rgb_u8 = clamp_f64_to_u8(out.buffer).reshape(h, w, 3)
    else:
        luma = rgb @ LUMA_WEIGHTS
        out = dither(Img(luma, w), kernel, quantize)
        grey = clamp_f64_to_u8(out.buffer).reshape(h, w)
        rgb_u8 = np.repeat(grey[..., None], 3, axis=2)
    return _opaque(rgb_u8)


def dither_single_colour(
    rgba: np.ndarray, kernel: Kernel, bits: int, tint: RGB[int]
) -> U8RGBA:
    """
    Greyscale bit-depth dithering drawn in one colour: each dithered grey
    level g becomes tint * g / 255, so 1-bit output is black or `tint`.
    """
    grey = dither_bit_depth(rgba, kernel, bits)
    level = grey[..., :1].astype(np.float64) / 255.0
    out = grey.copy()
    out[..., :3] = clamp_f64_to_u8(level * np.array(tint.as_tuple(), dtype=np.float64))
    return out


def convert(
    rgba: np.ndarray,
    method: ConversionMethod,
    palette: PaletteView,
    workers: int = 1,
    *,
    debug: bool = False,
) -> U8RGBA:
    """
    Remap `rgba` onto `palette` with either a distance metric (match-only)
    or a dither kernel. The method and palette are checked before any pixel
    is touched.
    """
    if len(palette) == 0:
        raise EmptyPaletteError()
    if isinstance(method, DistanceMetric):
        return convert_naive(rgba, method, palette, workers, debug=debug)
    if isinstance(method, DitherMethod):
        t0 = time.perf_counter()
        out = convert_dither(rgba, method, palette.colours())
        if debug:
            debug_log(
                f"dither {method} palette={len(palette)} "
                f"in {format_seconds_compact(time.perf_counter() - t0)}"
            )
        return out
    raise InvalidConversionMethodError(method)


__all__ = [
    "CHUNK_PIXELS",
    "convert",
    "convert_naive",
    "convert_dither",
    "dither_bit_depth",
    "dither_single_colour",
]

"""
Base filter and synthesis (upscale) passes for PyFastFill.

The coarsest analysis level is smoothed in place with the 3x3 kernel G x G to
seed the reconstruction. Every finer synthesis level is then the sum of

1. the 3x3 G x G smoothing of the analysis level at the same resolution, and
2. the 5x5 H1 x H1 interpolation of the coarser synthesis level, sampled at
   ``(p + d) / 2 + PAD`` (division truncating toward zero) and scaled by H2.

This push-pull combination diffuses the weighted samples across all scales
without any iterative relaxation.

Author: B.G.
"""

import taichi as ti

from .. import constants as cte
from .sampling import as_rgba_field, fetch, finish, half_toward_zero, new_rgba_field


@ti.func
def smooth3(source_field: ti.template(), i: ti.i32, j: ti.i32) -> ti.math.vec4:
    """3x3 G x G convolution of source_field centred on (i, j)."""
    accum = ti.math.vec4(0.0)
    for dy in ti.static(range(-1, 2)):
        for dx in ti.static(range(-1, 2)):
            accum += cte.G[dx + 1] * cte.G[dy + 1] * fetch(source_field, i + dx, j + dy)
    return accum


@ti.kernel
def base_filter_kernel(source_field: ti.template(), target_field: ti.template()):
    """
    Smooth the coarsest analysis level into the coarsest synthesis level.

    Args:
        source_field: Coarsest padded analysis level
        target_field: Field of the same shape, written in full
    """
    for j, i in target_field:
        target_field[j, i] = smooth3(source_field, i, j)


@ti.kernel
def upscale_kernel(
    analysis_field: ti.template(),
    coarse_field: ti.template(),
    target_field: ti.template(),
    pad: ti.i32,
):
    """
    Combine an analysis level with the upsampled coarser synthesis level.

    Args:
        analysis_field: Padded analysis level i
        coarse_field: Padded synthesis level i + 1
        target_field: Synthesis level i (same shape as analysis_field)
        pad: Border size of the coarse level
    """
    for j, i in target_field:
        accum = smooth3(analysis_field, i, j)
        for dy in ti.static(range(-2, 3)):
            for dx in ti.static(range(-2, 3)):
                ci = half_toward_zero(i + dx) + pad
                cj = half_toward_zero(j + dy) + pad
                accum += (
                    cte.H2 * cte.H1[dx + 2] * cte.H1[dy + 2] * fetch(coarse_field, ci, cj)
                )
        target_field[j, i] = accum


def base_filter(image, return_field: bool = False):
    """
    Apply the coarsest-level G x G low-pass to an RGBA image.

    Args:
        image: (h, w, 4) numpy array or Taichi vector field
        return_field: If True, return Taichi field; if False, return numpy array

    Returns:
        numpy.ndarray or taichi.Field: Filtered image, same shape as input
    """
    src, tmp = as_rgba_field(image)
    target = new_rgba_field(src.shape)
    base_filter_kernel(src, target.field)
    return finish(target, [tmp], return_field)


def upscale_level(analysis, coarse, return_field: bool = False, pad: int = cte.PAD):
    """
    Reconstruct a synthesis level from its analysis level and the coarser synthesis level.

    Args:
        analysis: Padded analysis level (h, w, 4), numpy array or Taichi field
        coarse: Padded coarser synthesis level, numpy array or Taichi field
        return_field: If True, return Taichi field; if False, return numpy array
        pad: Border size of the pyramid levels

    Returns:
        numpy.ndarray or taichi.Field: Synthesis level with the shape of `analysis`
    """
    src, tmp_a = as_rgba_field(analysis)
    try:
        coarse_src, tmp_c = as_rgba_field(coarse)
    except (TypeError, ValueError):
        if tmp_a is not None:
            tmp_a.release()
        raise

    target = new_rgba_field(src.shape)
    upscale_kernel(src, coarse_src, target.field, pad)
    return finish(target, [tmp_a, tmp_c], return_field)

"""
Normalize pass for PyFastFill.

Turns the premultiplied accumulation of the finest synthesis level into straight
colour: ``rgb / a`` with alpha set to 1. Pixels whose accumulated weight is
``<= min_weight`` are never divided; they receive ``fill_value`` and are counted
so the caller can decide whether that is an error.

Author: B.G.
"""

import taichi as ti

from .. import constants as cte
from ..errors import DivisionByZeroWeight
from .sampling import as_rgba_field, finish, new_rgba_field


@ti.kernel
def normalize_kernel(
    source_field: ti.template(),
    target_field: ti.template(),
    min_weight: cte.FLOAT_TYPE_TI,
    fill_r: cte.FLOAT_TYPE_TI,
    fill_g: cte.FLOAT_TYPE_TI,
    fill_b: cte.FLOAT_TYPE_TI,
    fill_a: cte.FLOAT_TYPE_TI,
) -> ti.i32:
    """
    Divide colour by weight for every pixel of target_field.

    Args:
        source_field: Premultiplied RGBA field (same shape as target)
        target_field: Straight RGB with alpha 1, written in full
        min_weight: Weights at or below this are treated as empty
        fill_r, fill_g, fill_b, fill_a: RGBA written to empty pixels

    Returns:
        int: Number of empty pixels
    """
    n_empty = 0
    for j, i in target_field:
        px = source_field[j, i]
        if px[3] > min_weight:
            target_field[j, i] = ti.math.vec4(px[0] / px[3], px[1] / px[3], px[2] / px[3], 1.0)
        else:
            target_field[j, i] = ti.math.vec4(fill_r, fill_g, fill_b, fill_a)
            n_empty += 1
    return n_empty


@ti.kernel
def count_empty_kernel(source_field: ti.template(), min_weight: cte.FLOAT_TYPE_TI) -> ti.i32:
    """Number of pixels whose weight is at or below min_weight."""
    n_empty = 0
    for j, i in source_field:
        if source_field[j, i][3] <= min_weight:
            n_empty += 1
    return n_empty


def check_zero_weight_policy(on_zero_weight):
    if on_zero_weight not in cte.ZERO_WEIGHT_POLICIES:
        raise ValueError(
            f"on_zero_weight must be one of {list(cte.ZERO_WEIGHT_POLICIES)}, got '{on_zero_weight}'"
        )


def check_fill_value(fill_value):
    fill_value = tuple(float(v) for v in fill_value)
    if len(fill_value) != cte.NCHANNELS:
        raise ValueError(f"fill_value must have {cte.NCHANNELS} components, got {len(fill_value)}")
    return fill_value


def normalize_image(
    image,
    return_field: bool = False,
    on_zero_weight: str = cte.ZERO_WEIGHT_RAISE,
    min_weight: float = 0.0,
    fill_value=(0.0, 0.0, 0.0, 0.0),
):
    """
    Convert a premultiplied RGBA image to straight colour with unit alpha.

    Args:
        image: (h, w, 4) numpy array or Taichi vector field
        return_field: If True, return Taichi field; if False, return numpy array
        on_zero_weight: 'raise' to fail on empty pixels, 'fill' to use fill_value
        min_weight: Weights at or below this value count as empty (default: 0.0)
        fill_value: RGBA written to empty pixels under the 'fill' policy

    Returns:
        numpy.ndarray or taichi.Field: Normalized image

    Raises:
        DivisionByZeroWeight: If empty pixels exist and on_zero_weight='raise'

    Example:
        out = normalize_image(np.array([[[2, 4, 6, 2]]], dtype=np.float32))
        # out[0, 0] == [1, 2, 3, 1]
    """
    check_zero_weight_policy(on_zero_weight)
    fill_value = check_fill_value(fill_value)
    src, tmp = as_rgba_field(image)
    target = new_rgba_field(src.shape)
    n_empty = normalize_kernel(src, target.field, min_weight, *fill_value)

    if n_empty > 0 and on_zero_weight == cte.ZERO_WEIGHT_RAISE:
        target.release()
        if tmp is not None:
            tmp.release()
        raise DivisionByZeroWeight(n_empty, min_weight)
    return finish(target, [tmp], return_field)

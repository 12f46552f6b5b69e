"""
Shared sampling helpers for the pyramid passes.

Every pass reads its input(s) through ``fetch``, which implements the
zero-boundary condition: a read outside ``[0, width) x [0, height)`` returns the
zero vector (zero color, zero weight). Nothing is clamped, wrapped or
reflected.

Also holds the host-side conversion between NumPy RGBA arrays and pooled
Taichi vector fields used by the convenience wrappers.

Author: B.G.
"""

import numpy as np
import taichi as ti

from .. import constants as cte
from .. import pool


@ti.func
def fetch(src: ti.template(), i: ti.i32, j: ti.i32) -> ti.math.vec4:
    """
    Read pixel (i, j) = (column, row) of a 4-vector field, zero outside it.
    """
    val = ti.math.vec4(0.0)
    if 0 <= i < src.shape[1] and 0 <= j < src.shape[0]:
        val = src[j, i]
    return val


@ti.func
def half_toward_zero(a: ti.i32) -> ti.i32:
    """Integer division by two truncating toward zero (C semantics)."""
    res = a // 2
    if a < 0:
        res = -((-a) // 2)
    return res


def check_rgba_array(image):
    """Validate a (h, w, 4) NumPy image and return it as float32."""
    if image.ndim != 3 or image.shape[2] != cte.NCHANNELS:
        raise ValueError(
            f"Input numpy array must have shape (h, w, {cte.NCHANNELS}), got {image.shape}"
        )
    return np.ascontiguousarray(image, dtype=cte.FLOAT_TYPE_NP)


def is_rgba_field(obj):
    """True for a 2D Taichi vector field with 4 components."""
    return (
        hasattr(obj, "to_numpy")
        and len(obj.shape) == 2
        and getattr(obj, "n", None) == cte.NCHANNELS
    )


def as_rgba_field(image):
    """
    Get a Taichi RGBA field for a NumPy array or a Taichi field.

    Returns:
        tuple: (field, tpfield) where tpfield is the pooled temp field to release
               once done, or None when the input already was a Taichi field.

    Raises:
        ValueError: If the array/field does not hold (h, w) RGBA pixels
        TypeError: If the input is neither a numpy array nor a Taichi field
    """
    if isinstance(image, np.ndarray):
        data = check_rgba_array(image)
        tmp = pool.get_temp_field(cte.FLOAT_TYPE_TI, data.shape[:2], n=cte.NCHANNELS)
        tmp.field.from_numpy(data)
        return tmp.field, tmp
    elif hasattr(image, "to_numpy"):
        if not is_rgba_field(image):
            raise ValueError(
                f"Input Taichi field must be a 2D vector field with {cte.NCHANNELS} components"
            )
        return image, None
    raise TypeError("image must be a numpy array or Taichi field")


def new_rgba_field(shape):
    """Get a pooled RGBA field of the given (rows, cols) shape."""
    return pool.get_temp_field(cte.FLOAT_TYPE_TI, shape, n=cte.NCHANNELS)


def finish(target, sources, return_field):
    """
    Release temporary inputs and hand out the target as field or array.
    """
    for tmp in sources:
        if tmp is not None:
            tmp.release()
    if return_field:
        return target.field
    result = target.field.to_numpy()
    target.release()
    return result

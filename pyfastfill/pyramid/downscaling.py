"""
Analysis (downscale) pass for PyFastFill.

Builds pyramid level i from level i-1 in a single blur-and-decimate pass. Every
target pixel p (in the target's padded coordinates) is centred on source pixel
``2 * p - 2 * PAD`` and accumulates the 5x5 neighbourhood around it with the
separable weights ``H1[dx + 2] * H1[dy + 2]``. Neighbours outside the source
contribute nothing.

Because the coarse level is addressed back from the fine one as
``fine // 2 + PAD`` during synthesis, the decimation offset is twice the
border size.

Author: B.G.
"""

import taichi as ti

from .. import constants as cte
from .sampling import as_rgba_field, fetch, finish, new_rgba_field


@ti.kernel
def downscale_kernel(source_field: ti.template(), target_field: ti.template(), offset: ti.i32):
    """
    Decimating 5x5 H1 x H1 convolution of source_field into target_field.

    Args:
        source_field: Finer padded RGBA level
        target_field: Coarser padded RGBA level, written in full
        offset: Decimation offset in source pixels (2 * PAD in the pipeline)
    """
    for j, i in target_field:
        ci = 2 * i - offset
        cj = 2 * j - offset
        accum = ti.math.vec4(0.0)
        for dy in ti.static(range(-2, 3)):
            for dx in ti.static(range(-2, 3)):
                accum += cte.H1[dx + 2] * cte.H1[dy + 2] * fetch(
                    source_field, ci + dx, cj + dy
                )
        target_field[j, i] = accum


def downscale_level(image, target_shape=None, return_field: bool = False, pad: int = cte.PAD):
    """
    Compute the next coarser analysis level of a padded RGBA image.

    Args:
        image: Padded (h, w, 4) numpy array or Taichi vector field
        target_shape: (rows, cols) of the coarser padded level. Defaults to
                      (h // 2 + 2 * pad, w // 2 + 2 * pad), the pyramid sizing.
        return_field: If True, return Taichi field; if False, return numpy array
        pad: Border size of the pyramid levels

    Returns:
        numpy.ndarray or taichi.Field: The coarser level

    Example:
        level1 = downscale_level(pad_image(rgba, 5))
    """
    src, tmp = as_rgba_field(image)
    ny, nx = src.shape
    if target_shape is None:
        target_shape = (ny // 2 + 2 * pad, nx // 2 + 2 * pad)

    target = new_rgba_field(tuple(target_shape))
    downscale_kernel(src, target.field, 2 * pad)
    return finish(target, [tmp], return_field)

"""
Pad / unpad pass for PyFastFill.

Shifts an image by ``padding`` pixels on both axes into a target buffer:
output pixel (x, y) is input pixel (x - padding, y - padding), zero when that
falls outside the input. A positive padding with a target grown by
``2 * padding`` adds a zero border; a negative padding with a target shrunk by
``2 * padding`` crops it back.

Author: B.G.
"""

import taichi as ti

from .sampling import as_rgba_field, fetch, finish, new_rgba_field


@ti.kernel
def pad_kernel(source_field: ti.template(), target_field: ti.template(), padding: ti.i32):
    """
    Shift source_field by `padding` pixels into target_field.

    Args:
        source_field: RGBA field to read (any size)
        target_field: RGBA field written in full
        padding: Positive to pad, negative to crop
    """
    for j, i in target_field:
        target_field[j, i] = fetch(source_field, i - padding, j - padding)


def pad_image(image, padding: int, return_field: bool = False):
    """
    Pad (padding > 0) or crop (padding < 0) an RGBA image on every side.

    Args:
        image: (h, w, 4) numpy array or Taichi vector field
        padding: Number of border pixels to add (or remove when negative)
        return_field: If True, return Taichi field; if False, return numpy array

    Returns:
        numpy.ndarray or taichi.Field: Image of shape (h + 2p, w + 2p, 4)

    Raises:
        ValueError: If cropping would leave an empty image

    Example:
        padded = pad_image(rgba, 5)
        assert np.array_equal(pad_image(padded, -5), rgba)
    """
    src, tmp = as_rgba_field(image)
    ny, nx = src.shape
    target_shape = (ny + 2 * padding, nx + 2 * padding)
    if target_shape[0] <= 0 or target_shape[1] <= 0:
        if tmp is not None:
            tmp.release()
        raise ValueError(f"Cropping {-padding} pixels from a ({ny}, {nx}) image leaves nothing")

    target = new_rgba_field(target_shape)
    pad_kernel(src, target.field, padding)
    return finish(target, [tmp], return_field)

"""
Image Utilities for PyFastFill

Helpers for preparing pyramid inputs and writing results: premultiplying a
colour image by a weight map, building weights from a mask, and reading and
writing images with Pillow.

Dependencies:
- numpy: For array operations
- pillow: For image file I/O

Author: B.G.
"""

import numpy as np
from PIL import Image

from .. import constants as cte


def premultiply(rgb, weight):
    """
    Build a premultiplied RGBA array from straight colour and a weight map.

    Args:
        rgb: (h, w, 3) or (h, w, 4) array of straight colour. A fourth channel
             is ignored.
        weight: (h, w) array of non-negative weights, or a scalar

    Returns:
        numpy.ndarray: float32 array (h, w, 4) with rgb * weight and weight

    Raises:
        ValueError: If shapes do not match or weights are negative
    """
    rgb = np.asarray(rgb, dtype=cte.FLOAT_TYPE_NP)
    if rgb.ndim != 3 or rgb.shape[2] not in (3, 4):
        raise ValueError(f"rgb must have shape (h, w, 3) or (h, w, 4), got {rgb.shape}")
    weight = np.broadcast_to(np.asarray(weight, dtype=cte.FLOAT_TYPE_NP), rgb.shape[:2])
    if np.any(weight < 0):
        raise ValueError("weight must be non-negative")

    out = np.empty(rgb.shape[:2] + (cte.NCHANNELS,), dtype=cte.FLOAT_TYPE_NP)
    out[..., :3] = rgb[..., :3] * weight[..., None]
    out[..., 3] = weight
    return out


def rgba_from_mask(image, mask):
    """
    Premultiplied RGBA input where non-zero mask pixels are known.

    Args:
        image: (h, w, 3) or (h, w, 4) straight colour
        mask: (h, w) array, non-zero marks a known pixel

    Returns:
        numpy.ndarray: float32 (h, w, 4), weight 1 on known pixels, 0 elsewhere
    """
    mask = np.asarray(mask)
    if mask.ndim == 3:
        mask = mask[..., 0]
    if mask.shape != np.shape(image)[:2]:
        raise ValueError(f"mask shape {mask.shape} does not match image {np.shape(image)[:2]}")
    return premultiply(image, (mask != 0).astype(cte.FLOAT_TYPE_NP))


def load_rgba(image_path, mask_path=None):
    """
    Load an image file as a premultiplied RGBA float array in [0, 1].

    Without a mask the image's own alpha channel is the weight (fully opaque
    images therefore have nothing to fill). With a mask, non-zero mask pixels
    are known and every other pixel is filled.

    Args:
        image_path (str): Path to the image (any format Pillow reads)
        mask_path (str, optional): Path to a mask image of the same size

    Returns:
        numpy.ndarray: float32 array of shape (h, w, 4)

    Raises:
        FileNotFoundError: If a file does not exist
        ValueError: If the mask size differs from the image size
    """
    with Image.open(image_path) as img:
        rgba = np.asarray(img.convert("RGBA"), dtype=cte.FLOAT_TYPE_NP) / 255.0

    if mask_path is None:
        return premultiply(rgba[..., :3], rgba[..., 3])

    with Image.open(mask_path) as msk:
        mask = np.asarray(msk.convert("L"))
    return rgba_from_mask(rgba[..., :3], mask)


def to_uint8(image):
    """Clip a float image in [0, 1] and convert it to uint8."""
    return (np.clip(np.asarray(image), 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)


def save_rgb(image_path, image):
    """
    Save the colour channels of a float image in [0, 1] as an 8-bit RGB file.

    Args:
        image_path (str): Output path; the format follows the extension
        image: (h, w, 3) or (h, w, 4) float array
    """
    Image.fromarray(to_uint8(np.asarray(image)[..., :3])).save(image_path)

"""
Miscellaneous Utilities for PyFastFill

Helpers that sit around the pyramid rather than in it: building premultiplied
inputs from images and masks, and reading/writing image files.

Available Functions:
- premultiply: Straight colour + weight map -> premultiplied RGBA
- rgba_from_mask: Colour image + known-pixel mask -> premultiplied RGBA
- load_rgba: Read an image (and optional mask) file as premultiplied RGBA
- save_rgb: Write the colour channels of a float image
- to_uint8: Clip and quantize a float image

Author: B.G.
"""

from .image_utils import load_rgba, premultiply, rgba_from_mask, save_rgb, to_uint8

# Export public API
__all__ = ["premultiply", "rgba_from_mask", "load_rgba", "save_rgb", "to_uint8"]

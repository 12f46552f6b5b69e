"""
Pyramid level planning for PyFastFill.

Computes, once per resolution, the depth of the pyramid and the interior and
padded size of every level. The passes never derive sizes on their own; they
read them from the ``LevelDescriptor`` records produced here.

Sizing rule: level 0 has the source size as interior. The interior of level
i+1 is the padded size of level i integer-divided by two, so that every coarse
level spans the whole padded extent of the finer one (the synthesis pass
addresses the coarse level as ``fine // 2 + PAD``).

Author: B.G.
"""

import operator
from dataclasses import dataclass

from .. import constants as cte
from ..errors import InvalidDimensions


@dataclass(frozen=True)
class LevelDescriptor:
    """Sizes of one pyramid level (analysis and synthesis share them)."""

    index: int
    interior_width: int
    interior_height: int
    padded_width: int
    padded_height: int

    @property
    def shape(self):
        """Padded field shape as (rows, cols)."""
        return (self.padded_height, self.padded_width)

    @property
    def interior_shape(self):
        return (self.interior_height, self.interior_width)


def check_dimensions(width, height):
    """Raise InvalidDimensions unless width and height are positive integers."""
    try:
        w, h = operator.index(width), operator.index(height)
    except TypeError:
        raise InvalidDimensions(width, height) from None
    if w <= 0 or h <= 0 or isinstance(width, bool) or isinstance(height, bool):
        raise InvalidDimensions(width, height)
    return w, h


def compute_depth(width, height):
    """
    Number of pyramid levels for a source of the given size.

    ``ceil(log2(min(width, height)))`` evaluated exactly on integers, and never
    less than one so that single-pixel sources still get a level.

    Example:
        compute_depth(64, 64)   # 6
        compute_depth(100, 50)  # 6
    """
    width, height = check_dimensions(width, height)
    n = min(width, height)
    return max(1, (n - 1).bit_length())


def plan_levels(width, height, pad: int = cte.PAD):
    """
    Describe every level of the pyramid for a source of the given size.

    Args:
        width: Source width in pixels
        height: Source height in pixels
        pad: Border size carried by every level (default: constants.PAD)

    Returns:
        tuple[LevelDescriptor]: Levels from finest (0) to coarsest

    Raises:
        InvalidDimensions: If width or height is not a positive integer
    """
    width, height = check_dimensions(width, height)
    depth = compute_depth(width, height)

    levels = []
    iw, ih = width, height
    for i in range(depth):
        level = LevelDescriptor(i, iw, ih, iw + 2 * pad, ih + 2 * pad)
        levels.append(level)
        iw = level.padded_width // 2
        ih = level.padded_height // 2
    return tuple(levels)

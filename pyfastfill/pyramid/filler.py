"""
High-level PoissonFiller class for GPU-accelerated pyramid diffusion.

Approximates the solution of a Poisson (membrane) equation over an image with a
single push-pull pass through a resolution pyramid. The input is an RGBA image
whose colour is premultiplied by a per-pixel weight (alpha encodes confidence,
not transparency). Pixels with zero weight are unknown; after the fill every
pixel carries a colour diffused smoothly from the known ones.

Pipeline executed by ``run`` (each pass fully writes its output before the
next one reads it):

1. Pad: source -> analysis level 0, with a PAD-pixel zero border
2. Analysis: level i-1 -> level i, 5x5 blur and decimation
3. Base filter: coarsest analysis level -> coarsest synthesis level, 3x3 blur
4. Synthesis: analysis level i + synthesis level i+1 -> synthesis level i
5. Unpad: synthesis level 0 -> source-sized buffer
6. Normalize: premultiplied colour / weight -> straight colour, alpha 1

All buffers are pool-allocated once by ``configure`` and reused by every
``run`` at that resolution.

Author: B.G.
"""

import logging
import time

import taichi as ti

from .. import constants as cte
from .. import pool
from ..errors import DivisionByZeroWeight, NotConfigured
from ..misc.image_utils import premultiply
from .downscaling import downscale_kernel
from .levels import check_dimensions, plan_levels
from .normalizing import (
    check_fill_value,
    check_zero_weight_policy,
    count_empty_kernel,
    normalize_kernel,
)
from .padding import pad_kernel
from .sampling import as_rgba_field
from .upscaling import base_filter_kernel, upscale_kernel

logger = logging.getLogger(__name__)

ANALYSIS = "analysis"
SYNTHESIS = "synthesis"


class PoissonFiller:
    """
    Multiresolution diffusion filler for premultiplied RGBA images.

    Owns every pyramid buffer between two ``configure`` calls and sequences
    the pad, analysis, base filter, synthesis, unpad and normalize passes.

    Args:
        width (int, optional): Source width; configures immediately with height
        height (int, optional): Source height; configures immediately with width
        on_zero_weight (str): 'raise' (default) to fail when a pixel ends up
            without weight, 'fill' to write fill_value there instead
        min_weight (float): Accumulated weights at or below this are empty
        fill_value (tuple): RGBA written to empty pixels under 'fill'
        verbose (bool): Log configuration and timings at INFO instead of DEBUG

    Attributes:
        levels (tuple[LevelDescriptor]): Sizes of every pyramid level
        depth (int): Number of pyramid levels

    Example:
        ti.init(ti.gpu)
        filler = PoissonFiller(512, 512)
        filled = filler.run(rgba)          # numpy (512, 512, 4)
        filled = filler.run(other_rgba)    # buffers are reused

    Author: B.G.
    """

    def __init__(
        self,
        width=None,
        height=None,
        on_zero_weight=cte.ZERO_WEIGHT_RAISE,
        min_weight=0.0,
        fill_value=(0.0, 0.0, 0.0, 0.0),
        verbose=False,
    ):
        check_zero_weight_policy(on_zero_weight)
        self.on_zero_weight = on_zero_weight
        self.min_weight = float(min_weight)
        self.fill_value = check_fill_value(fill_value)
        self.verbose = verbose

        self._width = None
        self._height = None
        self.levels = ()
        self._ins = []
        self._outs = []
        self._shift = None
        self._output = None

        if width is not None or height is not None:
            self.configure(width, height)

    @property
    def width(self):
        return self._width

    @property
    def height(self):
        return self._height

    @property
    def depth(self):
        return len(self.levels)

    @property
    def is_configured(self):
        return self._output is not None

    def _log(self, msg, *args):
        logger.log(logging.INFO if self.verbose else logging.DEBUG, msg, *args)

    def configure(self, width, height):
        """
        Allocate the pyramid for a source resolution.

        Computes the depth and level sizes, then takes one analysis and one
        synthesis buffer per level plus the unpad and result buffers from the
        pool. Buffers of a previous configuration are returned to the pool.
        Configuring again with the current size keeps the existing buffers.

        Args:
            width (int): Source width in pixels
            height (int): Source height in pixels

        Raises:
            InvalidDimensions: If width or height is not a positive integer.
                The previous configuration, if any, is left untouched.
        """
        width, height = check_dimensions(width, height)
        if self.is_configured and (width, height) == (self._width, self._height):
            return

        levels = plan_levels(width, height)

        acquired = []
        try:
            ins = []
            outs = []
            for level in levels:
                ins.append(self._acquire(level.shape, acquired))
                outs.append(self._acquire(level.shape, acquired))
            shift = self._acquire((height, width), acquired)
            output = self._acquire((height, width), acquired)
        except BaseException:
            for tpf in acquired:
                tpf.release()
            raise

        self.release()
        self._width, self._height = width, height
        self.levels = levels
        self._ins, self._outs = ins, outs
        self._shift, self._output = shift, output
        self._output.field.fill(0.0)

        self._log(
            "Configured %dx%d pyramid: depth %d, coarsest level %dx%d (padded)",
            width,
            height,
            self.depth,
            levels[-1].padded_width,
            levels[-1].padded_height,
        )

    @staticmethod
    def _acquire(shape, acquired):
        tpf = pool.taipool.get_tpfield(dtype=cte.FLOAT_TYPE_TI, shape=shape, n=cte.NCHANNELS)
        acquired.append(tpf)
        return tpf

    def release(self):
        """
        Return every buffer to the pool and drop the configuration.

        Note:
            Called automatically when a new resolution is configured and when
            the filler is garbage collected.
        """
        for tpf in self._ins + self._outs + [self._shift, self._output]:
            if tpf is not None:
                tpf.release()
        self._ins, self._outs = [], []
        self._shift = None
        self._output = None
        self.levels = ()
        self._width = None
        self._height = None

    def __del__(self):
        if getattr(self, "_output", None) is not None:
            self.release()

    def run(self, source, return_field=False):
        """
        Fill a premultiplied RGBA source through the whole pyramid.

        Args:
            source: (h, w, 4) numpy array or 2D Taichi vector field with 4
                components. Colour must be premultiplied by the weight in
                channel 3. Any resolution is accepted: the source is read with
                the zero-boundary rule into the configured frame.
            return_field (bool): If True, return the result Taichi field;
                if False (default) return a numpy copy

        Returns:
            numpy.ndarray or taichi.Field: Straight colour with alpha 1, shape
            (height, width, 4). A returned field is owned by the filler and is
            overwritten by the next run.

        Raises:
            NotConfigured: If configure() was never called
            DivisionByZeroWeight: If some pixel has no accumulated weight and
                on_zero_weight is 'raise'
            TypeError, ValueError: If source is not an RGBA image
        """
        if not self.is_configured:
            raise NotConfigured()

        st = time.perf_counter()

        src, tmp = as_rgba_field(source)
        try:
            pad_kernel(src, self._ins[0].field, cte.PAD)
        finally:
            if tmp is not None:
                tmp.release()

        for i in range(1, self.depth):
            downscale_kernel(self._ins[i - 1].field, self._ins[i].field, 2 * cte.PAD)

        base_filter_kernel(self._ins[-1].field, self._outs[-1].field)

        for i in range(self.depth - 2, -1, -1):
            upscale_kernel(
                self._ins[i].field, self._outs[i + 1].field, self._outs[i].field, cte.PAD
            )

        pad_kernel(self._outs[0].field, self._shift.field, -cte.PAD)

        # The result of the previous run survives a failed one
        if self.on_zero_weight == cte.ZERO_WEIGHT_RAISE:
            n_empty = count_empty_kernel(self._shift.field, self.min_weight)
            if n_empty > 0:
                raise DivisionByZeroWeight(n_empty, self.min_weight)

        n_empty = normalize_kernel(
            self._shift.field, self._output.field, self.min_weight, *self.fill_value
        )
        if n_empty > 0:
            self._log("%d pixel(s) without weight set to %s", n_empty, self.fill_value)

        ti.sync()
        self._log(
            "Filled %dx%d image in %.4f s", self._width, self._height, time.perf_counter() - st
        )
        return self.get_result(return_field=return_field)

    def get_result(self, return_field=False):
        """
        Result of the last run (zeros before the first run).

        Raises:
            NotConfigured: If configure() was never called
        """
        if not self.is_configured:
            raise NotConfigured("PoissonFiller has no result buffer before configure(width, height)")
        if return_field:
            return self._output.field
        return self._output.field.to_numpy()

    def get_level(self, index, stage=ANALYSIS):
        """
        Copy of one padded pyramid buffer, for inspection and debugging.

        Args:
            index (int): Level index, 0 is the finest (negative indices allowed)
            stage (str): 'analysis' or 'synthesis'

        Returns:
            numpy.ndarray: Array of shape levels[index].shape + (4,)
        """
        if not self.is_configured:
            raise NotConfigured()
        if stage == ANALYSIS:
            buffers = self._ins
        elif stage == SYNTHESIS:
            buffers = self._outs
        else:
            raise ValueError(f"stage must be '{ANALYSIS}' or '{SYNTHESIS}', got '{stage}'")
        return buffers[index].field.to_numpy()

    def __repr__(self):
        if not self.is_configured:
            return "PoissonFiller(unconfigured)"
        return f"PoissonFiller({self._width}x{self._height}, depth={self.depth})"


def poisson_fill(image, weight=None, return_field=False, **kwargs):
    """
    Fill an image in one call.

    Args:
        image: Premultiplied (h, w, 4) numpy array or Taichi field, or, when
            `weight` is given, a straight-colour (h, w, 3) numpy array
        weight: Optional (h, w) weight/confidence map; zero marks unknown pixels
        return_field (bool): If True, return the pooled field handle holding
            the result. The caller owns it and gives it back with ``release()``.
        **kwargs: Forwarded to PoissonFiller (on_zero_weight, min_weight, ...)

    Returns:
        numpy.ndarray or pool.TPField: Filled straight-colour image, alpha 1

    Example:
        known = mask > 0
        filled = poisson_fill(photo, weight=known.astype(np.float32))

        out = poisson_fill(rgba, return_field=True)
        render(out.field)
        out.release()
    """
    if weight is not None:
        image = premultiply(image, weight)

    ny, nx = image.shape[:2]
    filler = PoissonFiller(nx, ny, **kwargs)
    try:
        if not return_field:
            return filler.run(image)

        result = filler.run(image, return_field=True)
        out = pool.get_temp_field(cte.FLOAT_TYPE_TI, (ny, nx), n=cte.NCHANNELS)
        # A zero shift is a plain device-side copy
        pad_kernel(result, out.field, 0)
        return out
    finally:
        filler.release()

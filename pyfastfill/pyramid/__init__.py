"""
Pyramid diffusion submodule for PyFastFill.

Implements the push-pull pyramid that approximates a Poisson fill of weighted
(premultiplied) RGBA images. Every pass is a Taichi kernel that writes one
output pixel per parallel lane and reads its input(s) with a zero boundary.

Core Modules:
- sampling: Zero-boundary fetch and NumPy/Taichi conversion helpers
- levels: Pyramid depth and per-level size planning
- padding: Pad / unpad pass
- downscaling: Analysis pass (5x5 blur + decimation)
- upscaling: Base filter and synthesis passes
- normalizing: Premultiplied -> straight colour
- filler: PoissonFiller orchestrator and the poisson_fill shortcut

Usage:
    import numpy as np
    import taichi as ti
    import pyfastfill as pf

    ti.init(ti.gpu)

    # rgb: (ny, nx, 3) image, known: (ny, nx) boolean mask of valid pixels
    filled = pf.pyramid.poisson_fill(rgb, weight=known.astype(np.float32))

    # Repeated fills at one resolution reuse the pyramid buffers
    filler = pf.pyramid.PoissonFiller(nx, ny)
    for frame in frames:
        out = filler.run(frame)

Author: B.G.
"""

from .downscaling import downscale_kernel, downscale_level
from .filler import ANALYSIS, SYNTHESIS, PoissonFiller, poisson_fill
from .levels import LevelDescriptor, compute_depth, plan_levels
from .normalizing import count_empty_kernel, normalize_image, normalize_kernel
from .padding import pad_image, pad_kernel
from .upscaling import base_filter, base_filter_kernel, upscale_kernel, upscale_level

__all__ = [
    "PoissonFiller",
    "poisson_fill",
    "ANALYSIS",
    "SYNTHESIS",
    "LevelDescriptor",
    "compute_depth",
    "plan_levels",
    "pad_image",
    "pad_kernel",
    "downscale_level",
    "downscale_kernel",
    "base_filter",
    "base_filter_kernel",
    "upscale_level",
    "upscale_kernel",
    "normalize_image",
    "normalize_kernel",
    "count_empty_kernel",
]

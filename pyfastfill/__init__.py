"""
PyFastFill: GPU pyramid diffusion for seamless image hole filling.

Approximates a Poisson fill of premultiplied (colour x weight) RGBA images in a
single push-pull pass through a multiresolution pyramid, with every pass
written as a Taichi kernel.

Submodules:
- pyramid: The pyramid passes and the PoissonFiller orchestrator
- pool: Recycling allocator for Taichi fields
- misc: Image preparation and file I/O helpers
- constants: Filter coefficients, border size and precision
- errors: Exception types
- cli: Command line tools (imported lazily)

Author: B.G.
"""

__version__ = "0.0.1"

from . import constants
from . import errors
from . import pool
from . import misc
from . import pyramid
from .errors import DivisionByZeroWeight, InvalidDimensions, NotConfigured, PoissonFillError
from .pyramid import PoissonFiller, poisson_fill

__all__ = [
    "constants",
    "errors",
    "pool",
    "misc",
    "pyramid",
    "PoissonFiller",
    "poisson_fill",
    "PoissonFillError",
    "InvalidDimensions",
    "NotConfigured",
    "DivisionByZeroWeight",
]

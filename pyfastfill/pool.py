"""
Taichi field pool for PyFastFill.

Allocating Taichi fields is expensive (each allocation creates a new SNode tree
and every distinct field instantiates its own copy of a templated kernel), so
every buffer of the library is requested from this pool. A released field is
kept and handed out again to the next request with the same dtype, component
count and shape, which means a pipeline reconfigured back to a resolution it
already used reuses both the memory and the compiled kernels.

Usage:
    import pyfastfill as pf

    buf = pf.pool.taipool.get_tpfield(dtype=ti.f32, shape=(64, 64), n=4)
    buf.field.fill(0.0)
    ...
    buf.release()

    # Shorthand for short-lived fields
    tmp = pf.pool.get_temp_field(ti.f32, (ny, nx))

Note:
    Fields belong to the Taichi runtime that created them. After ``ti.reset()``
    or a second ``ti.init()`` call ``taipool.clear()`` must be called before
    requesting new fields.

Author: B.G.
"""

import logging
from collections import defaultdict

import taichi as ti

from .errors import InvalidDimensions

logger = logging.getLogger(__name__)


def _normalize_shape(shape):
    if isinstance(shape, int):
        shape = (shape,)
    shape = tuple(int(s) for s in shape)
    if any(s <= 0 for s in shape):
        if len(shape) == 2:
            raise InvalidDimensions(shape[1], shape[0])
        raise InvalidDimensions(
            None, None, f"Field shape must hold positive sizes, got {shape}"
        )
    return shape


class TPField:
    """
    Pool-owned Taichi field handle.

    Attributes:
        field: The underlying Taichi field
        key (tuple): (dtype name, components, shape) pool key
        in_use (bool): False once released back to the pool
    """

    def __init__(self, pool, key, field):
        self._pool = pool
        self._generation = pool.generation
        self.key = key
        self.field = field
        self.in_use = True

    @property
    def shape(self):
        return self.key[2]

    def release(self):
        """Return the field to its pool. Releasing twice is a no-op."""
        if self.in_use:
            self.in_use = False
            self._pool._recycle(self)


class TaiPool:
    """
    Recycling allocator for Taichi scalar and vector fields.

    Author: B.G.
    """

    def __init__(self):
        self._free = defaultdict(list)
        self.generation = 0
        self.n_allocated = 0
        self.n_reused = 0

    def get_tpfield(self, dtype=ti.f32, shape=(), n=None):
        """
        Get a field from the pool, allocating it if no free one matches.

        Args:
            dtype: Taichi data type (default: ti.f32)
            shape: Field shape, int or tuple of positive ints
            n: Number of vector components, None for a scalar field

        Returns:
            TPField: Handle owning the field until ``release()``

        Raises:
            InvalidDimensions: If any dimension is not positive
        """
        shape = _normalize_shape(shape) if shape != () else ()
        key = (str(dtype), n, shape)
        free = self._free[key]
        if free:
            tpf = free.pop()
            tpf.in_use = True
            self.n_reused += 1
            return tpf

        if n is None:
            field = ti.field(dtype=dtype, shape=shape)
        else:
            field = ti.Vector.field(n, dtype=dtype, shape=shape)
        self.n_allocated += 1
        logger.debug("Allocated pool field %s", key)
        return TPField(self, key, field)

    def _recycle(self, tpf):
        # Fields from before the last clear() may belong to a dead runtime
        if tpf._generation != self.generation:
            logger.debug("Dropped stale pool field %s", tpf.key)
            return
        self._free[tpf.key].append(tpf)

    def n_free(self):
        """Number of released fields waiting for reuse."""
        return sum(len(v) for v in self._free.values())

    def stats(self):
        """Allocation counters, e.g. for logging after a run."""
        return {
            "allocated": self.n_allocated,
            "reused": self.n_reused,
            "free": self.n_free(),
        }

    def clear(self):
        """
        Forget every released field (required after a Taichi runtime reset).

        Fields still held when the pool is cleared are dropped, not recycled,
        when they are released later.
        """
        self._free.clear()
        self.generation += 1


taipool = TaiPool()


def get_temp_field(dtype, shape, n=None):
    """Shorthand for ``taipool.get_tpfield(dtype, shape, n)``."""
    return taipool.get_tpfield(dtype=dtype, shape=shape, n=n)


__all__ = ["TPField", "TaiPool", "taipool", "get_temp_field"]

"""
Exceptions raised by PyFastFill.

All errors are reported to the caller immediately. They subclass the built-in
exception a caller would naturally catch (ValueError for bad sizes,
RuntimeError for misuse, ZeroDivisionError for empty weights) so existing
``except`` clauses keep working.

Author: B.G.
"""


class PoissonFillError(Exception):
    """Base class of every PyFastFill error."""


class InvalidDimensions(PoissonFillError, ValueError):
    """A buffer or pipeline was requested with a non-positive width or height."""

    def __init__(self, width, height, message=None):
        self.width = width
        self.height = height
        if message is None:
            message = f"Dimensions must be positive integers, got width={width}, height={height}"
        super().__init__(message)


class NotConfigured(PoissonFillError, RuntimeError):
    """The pipeline was run before ``configure`` was called."""

    def __init__(self, message="PoissonFiller.run called before configure(width, height)"):
        super().__init__(message)


class DivisionByZeroWeight(PoissonFillError, ZeroDivisionError):
    """The normalize pass met pixels without accumulated weight."""

    def __init__(self, count, min_weight=0.0):
        self.count = count
        self.min_weight = min_weight
        super().__init__(
            f"{count} pixel(s) have accumulated weight <= {min_weight}; "
            "the source weight channel is empty there. "
            "Use on_zero_weight='fill' to substitute a fill value."
        )

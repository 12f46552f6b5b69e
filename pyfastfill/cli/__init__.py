"""
Command Line Interface for PyFastFill

Command line utilities for filling images from the terminal without writing
Python scripts.

Available Commands:
- fill: Diffuse the known pixels of an image into its unknown (masked or
  transparent) pixels

Author: B.G.
"""

_CLI_SUBMODULES = {
    "fill": (".fill_commands", "fill"),
}

__all__ = list(_CLI_SUBMODULES.keys())


def __getattr__(name):
    info = _CLI_SUBMODULES.get(name)
    if info is None:
        raise AttributeError(name)
    pkg, attr = info
    import importlib
    mod = importlib.import_module(pkg, __package__)
    obj = getattr(mod, attr)
    globals()[name] = obj
    return obj

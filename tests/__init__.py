"""
Test suite for PyFastFill package.

This test suite covers:
- Import tests for all modules and submodules
- Unit tests for every pyramid pass, the level planner, the pool and helpers
- Integration tests for complete fill workflows
- A pure NumPy reference of the pyramid used to cross-check the Taichi kernels

Run with: pytest
"""

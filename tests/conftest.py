"""
Pytest configuration and fixtures for PyFastFill test suite.

This file contains shared fixtures, test configuration, and utilities
used across the test suite.
"""
import os
import sys
import pytest
import numpy as np


def pytest_configure(config):
    """Configure pytest with custom settings."""
    # Add the package root to Python path for testing
    package_root = os.path.dirname(os.path.dirname(__file__))
    if package_root not in sys.path:
        sys.path.insert(0, package_root)

    for marker in ("unit", "integration", "gpu", "slow", "importtest"):
        config.addinivalue_line("markers", f"{marker}: {marker} tests")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers and ordering."""
    for item in items:
        # Mark GPU tests
        if "gpu" in item.keywords:
            item.add_marker("slow")

        # Mark import tests for easy selection
        if "import" in item.name.lower() or "test_imports.py" in str(item.fspath):
            item.add_marker("importtest")


@pytest.fixture(scope="session", autouse=True)
def taichi_cpu():
    """Initialize Taichi once, on the CPU, for the whole session."""
    ti = pytest.importorskip("taichi")
    ti.init(arch=ti.cpu, offline_cache=False)
    import pyfastfill as pf
    pf.pool.taipool.clear()
    return ti


@pytest.fixture(scope="session")
def sample_rgba():
    """Random premultiplied RGBA image (13 x 9, weights in [0, 1])."""
    rng = np.random.default_rng(42)
    ny, nx = 9, 13
    rgb = rng.random((ny, nx, 3)).astype(np.float32)
    weight = rng.random((ny, nx)).astype(np.float32)
    weight[weight < 0.5] = 0.0
    rgba = np.empty((ny, nx, 4), dtype=np.float32)
    rgba[..., :3] = rgb * weight[..., None]
    rgba[..., 3] = weight
    return rgba


class TestDataManager:
    """Helper class for creating test images."""

    @staticmethod
    def single_sample(nx=8, ny=8, x=3, y=3, color=(1.0, 0.0, 0.0)):
        """One known pixel of `color` with weight 1, everything else unknown."""
        rgba = np.zeros((ny, nx, 4), dtype=np.float32)
        rgba[y, x, :3] = color
        rgba[y, x, 3] = 1.0
        return rgba

    @staticmethod
    def flat(nx=16, ny=16, color=(0.2, 0.5, 0.8)):
        """Uniform colour, weight 1 everywhere (nothing to fill)."""
        rgba = np.ones((ny, nx, 4), dtype=np.float32)
        rgba[..., :3] = color
        return rgba

    @staticmethod
    def gradient_with_hole(nx=32, ny=24, hole=(8, 16, 6, 18)):
        """Horizontal gradient with a rectangular unknown region (y0, y1, x0, x1)."""
        x = np.linspace(0.0, 1.0, nx, dtype=np.float32)
        rgb = np.empty((ny, nx, 3), dtype=np.float32)
        rgb[..., 0] = x[None, :]
        rgb[..., 1] = 1.0 - x[None, :]
        rgb[..., 2] = 0.5
        weight = np.ones((ny, nx), dtype=np.float32)
        y0, y1, x0, x1 = hole
        weight[y0:y1, x0:x1] = 0.0
        rgba = np.empty((ny, nx, 4), dtype=np.float32)
        rgba[..., :3] = rgb * weight[..., None]
        rgba[..., 3] = weight
        return rgba, rgb, weight


@pytest.fixture
def test_data_manager():
    """Provide access to test data creation utilities."""
    return TestDataManager()

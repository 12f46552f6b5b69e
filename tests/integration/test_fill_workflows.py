"""
Integration tests for complete fill workflows.

These chain the individual pyramid passes, the orchestrator and the image
I/O helpers the way an application would use them.
"""
import numpy as np
import pytest
from PIL import Image

import pyfastfill as pf
from pyfastfill.pyramid import (
    PoissonFiller,
    base_filter,
    compute_depth,
    downscale_level,
    normalize_image,
    pad_image,
    poisson_fill,
    upscale_level,
)


class TestPassChain:
    """The public passes composed by hand reproduce the orchestrator."""

    @pytest.mark.integration
    def test_manual_pyramid_matches_filler(self, test_data_manager):
        rgba, _, _ = test_data_manager.gradient_with_hole(nx=20, ny=14, hole=(4, 10, 5, 12))
        ny, nx = rgba.shape[:2]

        ins = [pad_image(rgba, pf.constants.PAD)]
        for _ in range(1, compute_depth(nx, ny)):
            ins.append(downscale_level(ins[-1]))

        out = base_filter(ins[-1])
        for analysis in reversed(ins[:-1]):
            out = upscale_level(analysis, out)

        manual = normalize_image(pad_image(out, -pf.constants.PAD))

        filler = PoissonFiller(nx, ny)
        np.testing.assert_allclose(manual, filler.run(rgba), rtol=1e-6, atol=1e-7)
        for i, level in enumerate(ins):
            assert level.shape == filler.levels[i].shape + (4,)


class TestFillQuality:
    """Properties of the filled images."""

    @pytest.mark.integration
    def test_hole_stays_within_known_range(self, test_data_manager):
        rgba, rgb, weight = test_data_manager.gradient_with_hole()
        result = poisson_fill(rgba)

        known = weight > 0
        for c in range(3):
            lo, hi = rgb[..., c][known].min(), rgb[..., c][known].max()
            assert result[..., c].min() >= lo - 1e-5
            assert result[..., c].max() <= hi + 1e-5
        np.testing.assert_array_equal(result[..., 3], 1.0)

    @pytest.mark.integration
    def test_hole_follows_gradient(self, test_data_manager):
        y0, y1, x0, x1 = 8, 16, 6, 18
        rgba, _, _ = test_data_manager.gradient_with_hole(hole=(y0, y1, x0, x1))
        result = poisson_fill(rgba)

        red = result[y0:y1, x0:x1, 0].mean(axis=0)
        assert red[0] < red[-1]
        np.testing.assert_allclose(result[y0:y1, x0:x1, 2], 0.5, rtol=1e-5)

    @pytest.mark.integration
    def test_sparse_samples_fill_everything(self):
        rng = np.random.default_rng(0)
        ny, nx = 48, 64
        rgb = rng.random((ny, nx, 3)).astype(np.float32)
        weight = (rng.random((ny, nx)) < 0.02).astype(np.float32)
        weight[0, 0] = 1.0
        result = poisson_fill(rgb, weight=weight)
        assert np.all(np.isfinite(result))
        assert result[..., :3].min() >= 0.0
        assert result[..., :3].max() <= 1.0 + 1e-5


class TestReconfiguration:
    """One filler reused across resolutions."""

    @pytest.mark.integration
    def test_reconfigure_round_trip(self, test_data_manager, sample_rgba):
        rgba, _, _ = test_data_manager.gradient_with_hole()
        ny, nx = rgba.shape[:2]
        filler = PoissonFiller(nx, ny)
        first = filler.run(rgba)

        filler.configure(sample_rgba.shape[1], sample_rgba.shape[0])
        small = filler.run(sample_rgba)
        assert small.shape == sample_rgba.shape

        filler.configure(nx, ny)
        np.testing.assert_array_equal(filler.run(rgba), first)
        filler.release()

    @pytest.mark.integration
    def test_pool_does_not_grow_across_runs(self, sample_rgba):
        ny, nx = sample_rgba.shape[:2]
        filler = PoissonFiller(nx, ny)
        filler.run(sample_rgba)
        n_alloc = pf.pool.taipool.n_allocated
        for _ in range(3):
            filler.run(sample_rgba)
        assert pf.pool.taipool.n_allocated == n_alloc
        filler.release()


class TestFileWorkflow:
    """Image file in, filled image file out."""

    @pytest.mark.integration
    def test_png_with_transparent_holes(self, tmp_path):
        data = np.zeros((16, 24, 4), dtype=np.uint8)
        data[..., 0] = 255
        data[..., 3] = 255
        data[5:11, 8:16, 3] = 0
        src = tmp_path / "holes.png"
        Image.fromarray(data).save(src)

        rgba = pf.misc.load_rgba(str(src))
        assert rgba[6, 9, 3] == 0.0
        result = poisson_fill(rgba)

        dst = tmp_path / "filled.png"
        pf.misc.save_rgb(str(dst), result)
        with Image.open(dst) as img:
            filled = np.asarray(img)
        assert filled.shape == (16, 24, 3)
        np.testing.assert_array_equal(filled[..., 0], 255)
        np.testing.assert_array_equal(filled[..., 1:], 0)

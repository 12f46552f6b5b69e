"""
Image Fill CLI Commands for PyFastFill

Command line interface for diffusing the known pixels of an image into its
unknown pixels with the pyramid Poisson filler.

Author: B.G.
"""

import logging
import sys

import click
import taichi as ti

import pyfastfill as pf


@click.command()
@click.argument("input_image", type=click.Path(exists=True))
@click.option(
    "-m",
    "--mask",
    type=click.Path(exists=True),
    default=None,
    help="Mask image: non-zero pixels are known, zero pixels are filled "
    "(default: use the alpha channel of INPUT_IMAGE as weight)",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(),
    default=None,
    help="Output filename (default: input name with _filled.png suffix)",
)
@click.option(
    "--arch",
    type=click.Choice(["cpu", "gpu"]),
    default="cpu",
    show_default=True,
    help="Taichi backend",
)
@click.option(
    "--on-zero-weight",
    type=click.Choice(list(pf.constants.ZERO_WEIGHT_POLICIES)),
    default=pf.constants.ZERO_WEIGHT_RAISE,
    show_default=True,
    help="What to do with pixels that receive no weight at all",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def fill(input_image, mask, output, arch, on_zero_weight, verbose):
    """
    Fill the unknown pixels of an image by pyramid diffusion.

    Known pixels are the non-zero pixels of MASK, or, without a mask, the
    pixels of INPUT_IMAGE weighted by their alpha channel. Every other pixel
    receives a colour diffused smoothly from the known ones.

    INPUT_IMAGE: Path to the input image (.png, .jpg, ...)

    Examples:

        # Fill the transparent holes of a PNG
        pff-fill holes.png

        # Fill the zero pixels of a mask, on the GPU
        pff-fill photo.jpg -m mask.png -o filled.png --arch gpu
    """
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    try:
        ti.init(arch=ti.gpu if arch == "gpu" else ti.cpu)
        pf.pool.taipool.clear()

        if verbose:
            click.echo(f"Loading '{input_image}'...")
        rgba = pf.misc.load_rgba(input_image, mask)

        if output is None:
            output = input_image.rsplit(".", 1)[0] + "_filled.png"

        ny, nx = rgba.shape[:2]
        known = int((rgba[..., 3] > 0).sum())
        if verbose:
            click.echo(f"Filling {nx}x{ny} image ({known} known pixels)...")

        result = pf.pyramid.poisson_fill(
            rgba, on_zero_weight=on_zero_weight, verbose=verbose
        )
        pf.misc.save_rgb(output, result)
        click.echo(f"Filled '{input_image}' -> '{output}'")

    except pf.errors.DivisionByZeroWeight as e:
        click.echo(f"Error: {e}", err=True)
        click.echo("Does the image (or mask) contain any known pixel?", err=True)
        sys.exit(1)

    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


__all__ = ["fill"]


if __name__ == "__main__":
    fill()

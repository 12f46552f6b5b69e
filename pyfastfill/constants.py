"""
Global constants for PyFastFill.

Holds the floating point types used by the Taichi kernels and the fixed filter
coefficients of the pyramid diffusion. The coefficients are not configurable:
every level of every pyramid uses exactly these values.

Author: B.G.
"""

import numpy as np
import taichi as ti

# Precision of every pyramid buffer
FLOAT_TYPE_TI = ti.f32
FLOAT_TYPE_NP = np.float32

# Number of channels per pixel (premultiplied R, G, B and weight A)
NCHANNELS = 4

# Border padding carried by every analysis/synthesis buffer, on every side
PAD = 5

# 5-tap analysis/interpolation kernel (radius 2)
H1 = (0.1507146, 0.6835785, 1.0334191, 0.6836, 0.1507)

# 3-tap smoothing kernel (radius 1)
G = (0.0311849, 0.7752854, 0.0311849)

# Scale of the upsampled coarse estimate in the synthesis combination
H2 = 0.0269546

# Zero-weight policies of the normalize pass
ZERO_WEIGHT_RAISE = "raise"
ZERO_WEIGHT_FILL = "fill"
ZERO_WEIGHT_POLICIES = (ZERO_WEIGHT_RAISE, ZERO_WEIGHT_FILL)

import taichi as ti
import numpy as np
import matplotlib.pyplot as plt
import pyfastfill as pff
import time

ti.init(ti.gpu)

nx, ny = 512, 384

# Smooth synthetic picture
x = np.linspace(0, 1, nx)
y = np.linspace(0, 1, ny)
X, Y = np.meshgrid(x, y)
rgb = np.stack([
	0.5 + 0.5 * np.sin(6 * X),
	0.5 + 0.5 * np.cos(4 * Y),
	X * Y,
], axis=-1).astype(np.float32)

# Keep ~2% of the pixels as known samples, plus a fully known band
rng = np.random.default_rng(42)
known = (rng.random((ny, nx)) < 0.02).astype(np.float32)
known[:, :20] = 1.0

rgba = pff.misc.premultiply(rgb, known)

filler = pff.PoissonFiller(nx, ny, verbose=True)

# First run compiles the kernels
filled = filler.run(rgba)

st = time.time()
for _ in range(10):
	filled = filler.run(rgba)
ti.sync()
print(f'{(time.time() - st) / 10 * 1000:.2f} ms per fill, depth {filler.depth}')
print(pff.pool.taipool.stats())

fig, ax = plt.subplots(1, 4, figsize=(16, 4))
ax[0].imshow(rgb)
ax[0].set_title('original')
ax[1].imshow(known, cmap='gray')
ax[1].set_title('weight')
ax[2].imshow(rgb * known[..., None])
ax[2].set_title('known samples')
ax[3].imshow(np.clip(filled[..., :3], 0, 1))
ax[3].set_title('pyramid fill')
for a in ax:
	a.axis('off')
plt.tight_layout()
plt.show()

# Inspect the pyramid itself
fig, ax = plt.subplots(2, filler.depth, figsize=(3 * filler.depth, 6))
for i in range(filler.depth):
	ana = filler.get_level(i, 'analysis')
	syn = filler.get_level(i, 'synthesis')
	ax[0, i].imshow(ana[..., 3], cmap='magma')
	ax[0, i].set_title(f'analysis {i} (weight)')
	ax[1, i].imshow(syn[..., 3], cmap='magma')
	ax[1, i].set_title(f'synthesis {i} (weight)')
plt.tight_layout()
plt.show()

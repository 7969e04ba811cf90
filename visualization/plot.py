import os
import logging
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection

RAY_COLOR = 'orange'
LENS_COLOR = 'white'
PREVIEW_COLOR = 'gray'
BACKGROUND = 'black'


def ray_segments(rays):
    """Convert ray paths into the (N_i, 2) arrays a LineCollection expects."""
    return [np.asarray(path, dtype=np.float64).reshape(-1, 2) for path in rays]


def setup_ndc_axes(ax):
    """Make *ax* show exactly the [-1, 1]² NDC square with nothing else drawn."""
    ax.set_xlim(-1.0, 1.0)
    ax.set_ylim(-1.0, 1.0)
    ax.set_facecolor(BACKGROUND)
    ax.set_axis_off()
    ax.set_aspect('auto')


def make_ray_collection(rays):
    return LineCollection(ray_segments(rays), colors=RAY_COLOR, linewidths=1.0)


def make_lens_circle(center=(0.0, 0.0), radius=0.1, color=LENS_COLOR, linestyle='-'):
    return plt.Circle(center, radius, fill=False, color=color, linestyle=linestyle, lw=1.5)


def plot_rays(rays, lens=None, out_path='images/rays.png', size=(800, 600), dpi=100):
    """
    Save a static picture of the rays, as the interactive viewer would draw
    them:
    - each ray as a connected line strip
    - the lens outline at its Schwarzschild radius when it is active
    """
    fig = plt.figure(figsize=(size[0] / dpi, size[1] / dpi), dpi=dpi)
    fig.patch.set_facecolor(BACKGROUND)
    ax = fig.add_axes([0, 0, 1, 1])
    setup_ndc_axes(ax)
    ax.add_collection(make_ray_collection(rays))
    if lens is not None and lens.active:
        ax.add_patch(make_lens_circle(lens.position, lens.rs))
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    fig.savefig(out_path, facecolor=fig.get_facecolor())
    plt.close(fig)
    logging.info(f"Saved ray image to {out_path}")

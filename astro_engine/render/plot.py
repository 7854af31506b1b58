"""Static 2D plots of a particle store, optionally with its quadtree cells."""

from typing import Optional

import numpy as np
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle

from astro_engine.physics.particle import ParticleStore
from astro_engine.physics.quadtree import QuadTree


def _marker_sizes(masses: np.ndarray) -> np.ndarray:
    # Area ~ log mass so a 5000-mass sun doesn't swamp 10-mass planets
    return 10.0 + 20.0 * np.log1p(masses / masses.min()) if masses.size else masses


def plot_particles(
    particles: ParticleStore,
    ax: Optional[Axes] = None,
    tree: Optional[QuadTree] = None,
    show_velocity: bool = False,
) -> Axes:
    """Draw particles (and optionally quadtree cells / velocity vectors) on `ax`.

    Returns the axes drawn on; a new figure is created when `ax` is None.
    """
    if ax is None:
        ax = Figure(figsize=(8, 8)).add_subplot(111)

    ax.set_aspect('equal')
    ax.set_xlabel('X')
    ax.set_ylabel('Y')
    # Scenario coordinates are screen space, y down
    ax.invert_yaxis()

    if tree is not None:
        for boundary in tree.boundaries():
            cx, cy = boundary.center
            h = boundary.half_size
            ax.add_patch(Rectangle(
                (cx - h, cy - h), 2 * h, 2 * h,
                fill=False, edgecolor=(0.4, 0.4, 0.4, 0.3), linewidth=0.5,
            ))

    if len(particles):
        pos = particles.positions
        colors = np.asarray(particles.colors, dtype=np.float64) / 255.0
        ax.scatter(
            pos[:, 0], pos[:, 1],
            s=_marker_sizes(particles.masses), c=colors, edgecolors='black', linewidths=0.3,
        )
        if show_velocity:
            vel = particles.velocities
            ax.quiver(pos[:, 0], pos[:, 1], vel[:, 0], vel[:, 1], angles='xy', color='gray', width=0.002)

        if tree is None:
            lo = pos.min(axis=0)
            hi = pos.max(axis=0)
            pad = max(float(np.max(hi - lo)) * 0.1, 1.0)
            ax.set_xlim(lo[0] - pad, hi[0] + pad)
            ax.set_ylim(hi[1] + pad, lo[1] - pad)
        else:
            cx, cy = tree.boundary.center
            h = tree.boundary.half_size
            ax.set_xlim(cx - h, cx + h)
            ax.set_ylim(cy + h, cy - h)
    return ax


def save_snapshot(
    particles: ParticleStore,
    output_path: str,
    tree: Optional[QuadTree] = None,
    show_velocity: bool = False,
    title: Optional[str] = None,
    dpi: int = 100,
):
    """Render a snapshot straight to an image file (no GUI needed)."""
    fig = Figure(figsize=(8, 8), dpi=dpi)
    ax = fig.add_subplot(111)
    plot_particles(particles, ax=ax, tree=tree, show_velocity=show_velocity)
    if title:
        ax.set_title(title)
    fig.savefig(output_path)

"""Barnes-Hut 2D force evaluation, O(N log N).

A fresh quadtree is built from every snapshot handed in; nothing is cached
between calls. Once built the tree is read-only, so per-particle traversals
can be spread over a thread pool, each task writing only its own output rows.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Any

import numpy as np

from astro_engine.physics.quadtree import Boundary, QuadTree


# Root half-size as a fraction of the bounding box's larger side. Anything
# above 0.5 keeps the extreme particles strictly inside the root.
ROOT_MARGIN = 0.6
DEFAULT_THETA = 0.5


def root_boundary(positions: np.ndarray) -> Boundary:
    """Square root boundary covering every position with margin."""
    lo = positions.min(axis=0)
    hi = positions.max(axis=0)
    center = (lo + hi) * 0.5
    half_size = float(np.max(hi - lo)) * ROOT_MARGIN
    if not half_size > 0:
        # Single particle, or all coincident
        half_size = 1.0
    return Boundary((center[0], center[1]), half_size)


def build_tree(positions: np.ndarray, masses: np.ndarray) -> QuadTree:
    """Build and mass-aggregate a quadtree sized to the snapshot."""
    tree = QuadTree(root_boundary(positions))
    tree.build(positions, masses)
    return tree


def compute_forces_barnes_hut(
    positions: Any,
    masses: Any,
    G: float = 1.0,
    softening: float = 1.0,
    theta: float = DEFAULT_THETA,
    workers: int = 1,
) -> np.ndarray:
    """Compute forces (n, 2) using 2D Barnes-Hut. positions (n, 2), masses (n,).

    Row i of the result is the net force on particle i.
    """
    positions = np.asarray(positions, dtype=np.float64)
    masses = np.asarray(masses, dtype=np.float64).reshape(-1)
    n = masses.shape[0]
    if n == 0:
        return np.zeros((0, 2))
    if theta <= 0:
        raise ValueError(f"theta must be positive, got {theta}")

    tree = build_tree(positions[:, :2], masses)
    forces = np.zeros((n, 2))

    def _fill(indices: range):
        for i in indices:
            forces[i] = tree.compute_force(i, theta, G, softening)

    if workers <= 1 or n < 2 * workers:
        _fill(range(n))
    else:
        chunk = -(-n // workers)
        chunks = [range(start, min(start + chunk, n)) for start in range(0, n, chunk)]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # list() re-raises any worker exception here
            list(pool.map(_fill, chunks))
    return forces


class BarnesHutForceCalculator:
    """Barnes-Hut force evaluator with a fixed opening angle.

    Args:
        theta: Opening angle; smaller is more accurate and more expensive
        workers: Threads used for the per-particle traversal (1 = inline)
    """

    def __init__(self, theta: float = DEFAULT_THETA, workers: int = 1):
        if theta <= 0:
            raise ValueError(f"theta must be positive, got {theta}")
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.theta = theta
        self.workers = workers

    def set_theta(self, theta: float):
        if theta <= 0:
            raise ValueError(f"theta must be positive, got {theta}")
        self.theta = theta

    def compute_forces(self, particles, G: float, softening: float) -> np.ndarray:
        """Forces on every particle of a snapshot (anything with positions/masses)."""
        return compute_forces_barnes_hut(
            particles.positions,
            particles.masses,
            G=G,
            softening=softening,
            theta=self.theta,
            workers=self.workers,
        )

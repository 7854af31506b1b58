"""Exact pairwise forces and the calculator that picks an evaluation method.

The direct path is a vectorized O(N^2) sum; it serves small systems and is the
reference the Barnes-Hut approximation converges to as theta -> 0.
"""

from typing import Literal

import numpy as np

from astro_engine.physics.barnes_hut import (
    DEFAULT_THETA,
    compute_forces_barnes_hut,
)


# Above this many particles "auto" switches to Barnes-Hut
BARNES_HUT_N_THRESHOLD = 256

METHODS = ("auto", "direct", "barnes_hut")


def compute_forces_direct(
    positions,
    masses,
    G: float = 1.0,
    softening: float = 1.0,
) -> np.ndarray:
    """Exact softened pairwise forces, (n, 2). positions (n, 2), masses (n,)."""
    positions = np.asarray(positions, dtype=np.float64)
    masses = np.asarray(masses, dtype=np.float64).reshape(-1)
    n = masses.shape[0]
    if n == 0:
        return np.zeros((0, 2))

    # r_diff[i, j] = r_j - r_i
    r_diff = positions[None, :, :2] - positions[:, None, :2]
    r_sq = np.sum(r_diff ** 2, axis=2) + softening ** 2
    r_soft_cubed = r_sq * np.sqrt(r_sq)
    m_ij = G * masses[:, None] * masses[None, :]
    with np.errstate(divide="ignore", invalid="ignore"):
        force_magnitude = np.where(r_soft_cubed > 0, m_ij / r_soft_cubed, 0.0)
    # No self-force
    np.fill_diagonal(force_magnitude, 0.0)
    return np.sum(force_magnitude[:, :, None] * r_diff, axis=1)


class ForceCalculator:
    """Unified force calculation interface.

    Args:
        method: "direct", "barnes_hut", or "auto" (Barnes-Hut above the threshold)
        theta: Barnes-Hut opening angle
        workers: Threads for the Barnes-Hut traversal
        barnes_hut_threshold: Particle count above which "auto" uses Barnes-Hut
    """

    def __init__(
        self,
        method: Literal["auto", "direct", "barnes_hut"] = "auto",
        theta: float = DEFAULT_THETA,
        workers: int = 1,
        barnes_hut_threshold: int = BARNES_HUT_N_THRESHOLD,
    ):
        if method not in METHODS:
            raise ValueError(f"Unknown force method: {method}. Available: {list(METHODS)}")
        if theta <= 0:
            raise ValueError(f"theta must be positive, got {theta}")
        self.method = method
        self.theta = theta
        self.workers = workers
        self.barnes_hut_threshold = barnes_hut_threshold

    def resolve_method(self, n: int) -> str:
        if self.method == "auto":
            return "barnes_hut" if n > self.barnes_hut_threshold else "direct"
        return self.method

    def compute_forces(self, particles, G: float, softening: float) -> np.ndarray:
        """Forces on every particle, index-aligned with the input snapshot."""
        method = self.resolve_method(len(particles.masses))
        if method == "barnes_hut":
            return compute_forces_barnes_hut(
                particles.positions,
                particles.masses,
                G=G,
                softening=softening,
                theta=self.theta,
                workers=self.workers,
            )
        return compute_forces_direct(particles.positions, particles.masses, G, softening)

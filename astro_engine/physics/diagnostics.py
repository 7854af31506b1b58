"""Conservation diagnostics for N-body simulations."""

from typing import Dict, Tuple

import numpy as np

from astro_engine.physics.particle import ParticleStore


def kinetic_energy(particles: ParticleStore) -> float:
    """K = 0.5 * Σ m_i * v_i^2"""
    v_sq = np.sum(particles.velocities ** 2, axis=1)
    return float(0.5 * np.sum(particles.masses * v_sq))


def potential_energy(particles: ParticleStore, G: float, softening: float) -> float:
    """U = -G * Σ_{i<j} m_i * m_j / sqrt(r_ij^2 + eps^2)

    Uses the same Plummer softening as the force law, so K + U is the
    quantity the integrators approximately conserve.
    """
    n = len(particles)
    if n < 2:
        return 0.0
    positions = particles.positions
    masses = particles.masses
    i, j = np.triu_indices(n, k=1)
    r_sq = np.sum((positions[j] - positions[i]) ** 2, axis=1) + softening ** 2
    with np.errstate(divide="ignore"):
        inv_r = np.where(r_sq > 0, 1.0 / np.sqrt(r_sq), 0.0)
    return float(-G * np.sum(masses[i] * masses[j] * inv_r))


def total_momentum(particles: ParticleStore) -> np.ndarray:
    """P = Σ m_i * v_i, shape (2,)"""
    return np.sum(particles.masses[:, None] * particles.velocities, axis=0)


def center_of_mass(particles: ParticleStore) -> np.ndarray:
    total = particles.total_mass
    if total <= 0:
        return np.zeros(2)
    return np.sum(particles.masses[:, None] * particles.positions, axis=0) / total


def angular_momentum(particles: ParticleStore, origin=(0.0, 0.0)) -> float:
    """L_z = Σ m_i * (x_i * vy_i - y_i * vx_i) about `origin`."""
    r = particles.positions - np.asarray(origin, dtype=np.float64)
    v = particles.velocities
    return float(np.sum(particles.masses * (r[:, 0] * v[:, 1] - r[:, 1] * v[:, 0])))


class Diagnostics:
    """Compute energy diagnostics consistent with the force law."""

    def __init__(self, G: float = 1.0, softening: float = 1.0):
        """Initialize diagnostics.

        Args:
            G: Gravitational constant
            softening: Softening length (must match force calculation)
        """
        self.G = G
        self.softening = softening

    def compute_energies(self, particles: ParticleStore) -> Tuple[float, float, float]:
        """Compute kinetic, potential, and total energy.

        Returns:
            Tuple of (kinetic_energy, potential_energy, total_energy)
        """
        K = kinetic_energy(particles)
        U = potential_energy(particles, self.G, self.softening)
        return K, U, K + U

    def summary(self, particles: ParticleStore) -> Dict[str, float]:
        K, U, E = self.compute_energies(particles)
        px, py = total_momentum(particles)
        cx, cy = center_of_mass(particles)
        return {
            "n_particles": len(particles),
            "kinetic": K,
            "potential": U,
            "total": E,
            "momentum_x": float(px),
            "momentum_y": float(py),
            "angular_momentum": angular_momentum(particles),
            "com_x": float(cx),
            "com_y": float(cy),
        }

"""Abstract base class for numerical integrators."""

from abc import ABC, abstractmethod
from typing import Callable

import numpy as np

from astro_engine.physics.particle import ParticleStore


# Maps a particle snapshot to one force vector per particle, shape (n, 2)
ForceFunction = Callable[[ParticleStore], np.ndarray]


class Integrator(ABC):
    """Abstract interface for numerical integrators.

    An integrator only sees forces through `force_fn`; it never knows how
    they are computed. Fixed particles are fed to every force evaluation but
    never moved.
    """

    @abstractmethod
    def integrate(self, particles: ParticleStore, force_fn: ForceFunction, dt: float):
        """Advance the particle store in place by one time step.

        Args:
            particles: Live particle store (positions, velocities and
                accelerations are updated in place)
            force_fn: Force evaluation for a snapshot
            dt: Time step
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this integrator."""
        pass

    @property
    @abstractmethod
    def order(self) -> int:
        """Return the order of accuracy (e.g., 1 for Euler, 2 for leapfrog, 4 for RK4)."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    @staticmethod
    def _check_step(particles: ParticleStore, dt: float):
        if not dt > 0:
            raise ValueError(f"Time step must be positive, got {dt}")
        particles.validate()

    @staticmethod
    def _accelerations(snapshot: ParticleStore, force_fn: ForceFunction) -> np.ndarray:
        """a = F / m for every particle in the snapshot."""
        forces = np.asarray(force_fn(snapshot), dtype=np.float64)
        if forces.shape != snapshot.positions.shape:
            raise ValueError(
                f"Force function returned shape {forces.shape}, "
                f"expected {snapshot.positions.shape}"
            )
        return forces / snapshot.masses[:, None]

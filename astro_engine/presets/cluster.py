"""Random cluster preset."""

import numpy as np

from astro_engine.physics.particle import ParticleStore
from astro_engine.presets.base import Preset


class RandomCluster(Preset):
    """Uniform disk of particles with random masses and small random velocities."""

    def __init__(
        self,
        n_particles: int = 200,
        radius: float = 100.0,
        seed: int = None,
        mass_range=(1.0, 10.0),
        velocity_scale: float = 1.0,
    ):
        """Initialize random cluster preset.

        Args:
            n_particles: Number of particles
            radius: Radius of the disk they are scattered over
            seed: Random seed for reproducibility
            mass_range: (low, high) for uniformly drawn masses, low > 0
            velocity_scale: Standard deviation of each velocity component
        """
        if mass_range[0] <= 0:
            raise ValueError(f"Masses must be positive, got range {mass_range}")
        self.n_particles = n_particles
        self.radius = radius
        self.seed = seed
        self.mass_range = mass_range
        self.velocity_scale = velocity_scale

    @property
    def name(self) -> str:
        return "cluster"

    def generate(self) -> ParticleStore:
        rng = np.random.default_rng(self.seed)
        n = self.n_particles

        # sqrt for uniform areal density
        r = self.radius * np.sqrt(rng.uniform(0.0, 1.0, n))
        phi = rng.uniform(0.0, 2.0 * np.pi, n)
        positions = np.column_stack([r * np.cos(phi), r * np.sin(phi)])
        velocities = rng.normal(0.0, self.velocity_scale, (n, 2))
        masses = rng.uniform(self.mass_range[0], self.mass_range[1], n)

        return ParticleStore.from_arrays(positions, velocities, masses)

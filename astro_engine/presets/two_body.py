"""Two-body circular orbit preset."""

import numpy as np

from astro_engine.physics.particle import Particle, ParticleStore
from astro_engine.presets.base import Preset


class TwoBodyOrbit(Preset):
    """Light body on a circular orbit around a fixed heavy one at the origin.

    Circular speed is v = sqrt(G*M/d); with a fixed center the orbiter's period
    is T = 2*pi*d / v. Softening is not accounted for, so use a softening much
    smaller than the distance when checking closure.
    """

    def __init__(
        self,
        distance: float = 100.0,
        G: float = 6.67430e-2,
        central_mass: float = 5000.0,
        orbiter_mass: float = 10.0,
    ):
        if distance <= 0:
            raise ValueError(f"distance must be positive, got {distance}")
        self.distance = distance
        self.G = G
        self.central_mass = central_mass
        self.orbiter_mass = orbiter_mass

    @property
    def name(self) -> str:
        return "two_body"

    @property
    def speed(self) -> float:
        return float(np.sqrt(self.G * self.central_mass / self.distance))

    @property
    def period(self) -> float:
        return 2.0 * np.pi * self.distance / self.speed

    def generate(self) -> ParticleStore:
        return ParticleStore.from_particles([
            Particle((0.0, 0.0), (0.0, 0.0), self.central_mass, fixed=True, name="Center"),
            Particle((self.distance, 0.0), (0.0, self.speed), self.orbiter_mass, name="Orbiter"),
        ])

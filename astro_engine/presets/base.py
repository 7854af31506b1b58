"""Base class for preset scenarios."""

from abc import ABC, abstractmethod

from astro_engine.physics.particle import ParticleStore


class Preset(ABC):
    """Abstract base class for preset scenarios."""

    @abstractmethod
    def generate(self) -> ParticleStore:
        """Generate initial conditions as a fresh particle store."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this preset."""
        pass

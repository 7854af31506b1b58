"""Default scenario: a heavy sun with three planets, all free to move."""

from astro_engine.physics.particle import Particle, ParticleStore
from astro_engine.presets.base import Preset


class SolarSystem(Preset):
    """Central sun of mass 5000 with three light planets, in screen coordinates.

    Nothing is pinned; the bundled solar_system.json scenario is the variant
    with a fixed sun.
    """

    @property
    def name(self) -> str:
        return "solar_system"

    def generate(self) -> ParticleStore:
        return ParticleStore.from_particles([
            Particle((400.0, 300.0), (0.0, 0.0), 5000.0, name="Sun", color=(255, 255, 0)),
            Particle((400.0, 200.0), (50.0, 0.0), 10.0, name="Planet 1", color=(0, 255, 255)),
            Particle((550.0, 300.0), (0.0, 35.0), 20.0, name="Planet 2", color=(255, 0, 0)),
            Particle((400.0, 450.0), (-30.0, 0.0), 15.0, name="Planet 3", color=(0, 255, 0)),
        ])

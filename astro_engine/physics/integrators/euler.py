"""Semi-implicit Euler integrator (baseline, O(h) accuracy)."""

from astro_engine.physics.integrators.base import ForceFunction, Integrator
from astro_engine.physics.particle import ParticleStore


class SemiImplicitEulerIntegrator(Integrator):
    """Semi-implicit (symplectic) Euler - simple first-order integrator.

    Fast but less accurate. Good for baseline comparisons.
    """

    @property
    def name(self) -> str:
        return "euler"

    @property
    def order(self) -> int:
        return 1

    def integrate(self, particles: ParticleStore, force_fn: ForceFunction, dt: float):
        """Euler step: v_new = v + a*dt, r_new = r + v_new*dt."""
        self._check_step(particles, dt)
        if len(particles) == 0:
            return

        movable = particles.movable
        acc = self._accelerations(particles.snapshot(), force_fn)

        particles.velocities[movable] += acc[movable] * dt
        particles.positions[movable] += particles.velocities[movable] * dt
        particles.accelerations[movable] = acc[movable]

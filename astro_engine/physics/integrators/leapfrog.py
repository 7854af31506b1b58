"""Leapfrog integrator (kick-drift-kick, O(h²) accuracy)."""

from astro_engine.physics.integrators.base import ForceFunction, Integrator
from astro_engine.physics.particle import ParticleStore


class LeapfrogIntegrator(Integrator):
    """Kick-drift-kick leapfrog - second-order, symplectic.

    1. v_half = v + 0.5*a(r)*dt
    2. r_new = r + v_half*dt
    3. v_new = v_half + 0.5*a(r_new)*dt

    Forces are evaluated twice per step; nothing is carried over from the
    previous step. Better long-term energy behaviour than Euler.
    """

    @property
    def name(self) -> str:
        return "leapfrog"

    @property
    def order(self) -> int:
        return 2

    def integrate(self, particles: ParticleStore, force_fn: ForceFunction, dt: float):
        self._check_step(particles, dt)
        if len(particles) == 0:
            return

        movable = particles.movable
        mask = movable[:, None]

        acc_old = self._accelerations(particles.snapshot(), force_fn) * mask
        v_half = particles.velocities + 0.5 * dt * acc_old
        r_new = particles.positions + dt * v_half * mask

        acc_new = self._accelerations(particles.snapshot(positions=r_new), force_fn) * mask
        v_new = v_half + 0.5 * dt * acc_new

        particles.positions[movable] = r_new[movable]
        particles.velocities[movable] = v_new[movable]
        particles.accelerations[movable] = acc_new[movable]

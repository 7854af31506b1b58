"""Runge-Kutta 4th order integrator (high accuracy, O(h⁴))."""

import numpy as np

from astro_engine.physics.integrators.base import ForceFunction, Integrator
from astro_engine.physics.particle import ParticleStore


class RK4Integrator(Integrator):
    """Runge-Kutta 4th order method - high accuracy integrator.

    Four force evaluations per step, each against a displaced snapshot of the
    state rather than the live store.
    """

    @property
    def name(self) -> str:
        return "rk4"

    @property
    def order(self) -> int:
        return 4

    def integrate(self, particles: ParticleStore, force_fn: ForceFunction, dt: float):
        """RK4 step using standard 4-stage method.

        For a system dr/dt = v, dv/dt = a(r):
        k1 = f(r, v)
        k2 = f(r + k1_r*dt/2, v + k1_v*dt/2)
        k3 = f(r + k2_r*dt/2, v + k2_v*dt/2)
        k4 = f(r + k3_r*dt,   v + k3_v*dt)

        r_new = r + (k1_r + 2*k2_r + 2*k3_r + k4_r)*dt/6
        v_new = v + (k1_v + 2*k2_v + 2*k3_v + k4_v)*dt/6

        Fixed particles get a zero derivative in every stage, so trial states
        keep them in place while they still pull on everything else.
        """
        self._check_step(particles, dt)
        if len(particles) == 0:
            return

        movable = particles.movable
        mask = movable[:, None]
        r0 = particles.positions.copy()
        v0 = particles.velocities.copy()

        def evaluate(dr, dv, h):
            trial = particles.snapshot(positions=r0 + dr * h, velocities=v0 + dv * h)
            acc = self._accelerations(trial, force_fn)
            return trial.velocities * mask, acc * mask

        zero = np.zeros_like(r0)
        k1_r, k1_v = evaluate(zero, zero, 0.0)
        k2_r, k2_v = evaluate(k1_r, k1_v, dt * 0.5)
        k3_r, k3_v = evaluate(k2_r, k2_v, dt * 0.5)
        k4_r, k4_v = evaluate(k3_r, k3_v, dt)

        drdt = (k1_r + 2.0 * k2_r + 2.0 * k3_r + k4_r) / 6.0
        dvdt = (k1_v + 2.0 * k2_v + 2.0 * k3_v + k4_v) / 6.0

        particles.positions[movable] = r0[movable] + drdt[movable] * dt
        particles.velocities[movable] = v0[movable] + dvdt[movable] * dt
        particles.accelerations[movable] = dvdt[movable]

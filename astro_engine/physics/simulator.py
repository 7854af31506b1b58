"""Main simulator controller."""

import logging
import time
from typing import Callable, Optional

import numpy as np

from astro_engine.physics.diagnostics import Diagnostics
from astro_engine.physics.force_calculator import ForceCalculator
from astro_engine.physics.integrators.base import Integrator
from astro_engine.physics.integrators.rk4 import RK4Integrator
from astro_engine.physics.particle import ParticleStore
from astro_engine.utils.config import SimulationConstants


logger = logging.getLogger(__name__)


class Simulator:
    """Main simulation controller.

    Owns the particle store and steps it forward with an integrator whose
    forces come from a force calculator. Everything runs synchronously on the
    caller's thread: a step finishes (all force evaluations included) before
    step() returns.
    """

    def __init__(
        self,
        particles: Optional[ParticleStore] = None,
        constants: Optional[SimulationConstants] = None,
        integrator: Optional[Integrator] = None,
        force_calculator: Optional[ForceCalculator] = None,
    ):
        """Initialize simulator.

        Args:
            particles: Particle store to evolve (validated here)
            constants: Physical constants (default: SimulationConstants())
            integrator: Integrator to use (default: RK4)
            force_calculator: Force evaluation (default: auto with constants.theta)
        """
        self.constants = constants or SimulationConstants()
        self.integrator = integrator or RK4Integrator()
        self.force_calculator = force_calculator or ForceCalculator(theta=self.constants.theta)
        self.particles = particles if particles is not None else ParticleStore()
        self.particles.validate()

        self.time = 0.0
        self.paused = False
        self.step_count = 0

        # Profiling: last step timing (ms)
        self._last_step_ms: Optional[float] = None
        self._force_calls = 0
        self._profile: bool = False

        # Callbacks
        self.on_step_callback: Optional[Callable[["Simulator"], None]] = None

    @property
    def dt(self) -> float:
        return self.constants.dt

    def set_profiling(self, enabled: bool = True):
        """Enable or disable step timing."""
        self._profile = enabled

    def get_timing(self) -> dict:
        """Return last step wall time in ms and force evaluations it needed."""
        return {
            "step_ms": self._last_step_ms,
            "force_calls": self._force_calls,
        }

    def force_fn(self, snapshot: ParticleStore) -> np.ndarray:
        """Forces for a snapshot under the current constants."""
        self._force_calls += 1
        return self.force_calculator.compute_forces(
            snapshot, self.constants.G, self.constants.softening
        )

    def compute_forces(self) -> np.ndarray:
        """Forces on the live particles (read only)."""
        return self.force_fn(self.particles.snapshot())

    def step(self):
        """Advance the simulation by one time step."""
        if self.paused:
            return

        self._force_calls = 0
        t0 = time.perf_counter() if self._profile else None
        self.integrator.integrate(self.particles, self.force_fn, self.constants.dt)
        if t0 is not None:
            self._last_step_ms = (time.perf_counter() - t0) * 1000.0
            logger.debug(
                "step %d: %.3f ms, %d force evaluations",
                self.step_count, self._last_step_ms, self._force_calls,
            )

        self.time += self.constants.dt
        self.step_count += 1

        if self.on_step_callback:
            self.on_step_callback(self)

    def run(self, n_steps: int):
        """Run n_steps steps (fewer if paused from a callback)."""
        for _ in range(n_steps):
            if self.paused:
                break
            self.step()

    def pause(self):
        self.paused = True

    def resume(self):
        self.paused = False

    def toggle_pause(self):
        self.paused = not self.paused

    def reset(self, particles: ParticleStore):
        """Swap in a new particle store and restart the clock."""
        particles.validate()
        self.particles = particles
        self.time = 0.0
        self.step_count = 0

    def diagnostics(self) -> Diagnostics:
        return Diagnostics(G=self.constants.G, softening=self.constants.softening)

    def get_energy(self) -> float:
        """Get current total energy."""
        return self.diagnostics().compute_energies(self.particles)[2]

"""
AstroDynamics Engine - 2D N-body gravity simulation.

Features:
- Barnes-Hut quadtree force approximation (O(N log N)) and exact pairwise forces
- Interchangeable integrators (RK4, semi-implicit Euler, leapfrog)
- Energy / momentum diagnostics
- JSON scenarios, presets, and a headless CLI
"""

__version__ = "0.1.0"

from astro_engine.physics.particle import Particle, ParticleStore
from astro_engine.physics.barnes_hut import BarnesHutForceCalculator, compute_forces_barnes_hut
from astro_engine.physics.force_calculator import ForceCalculator, compute_forces_direct
from astro_engine.physics.integrators import RK4Integrator, get_integrator
from astro_engine.physics.simulator import Simulator
from astro_engine.utils.config import SimulationConstants

__all__ = [
    "Particle",
    "ParticleStore",
    "BarnesHutForceCalculator",
    "compute_forces_barnes_hut",
    "ForceCalculator",
    "compute_forces_direct",
    "RK4Integrator",
    "get_integrator",
    "Simulator",
    "SimulationConstants",
]

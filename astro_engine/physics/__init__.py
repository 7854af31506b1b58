"""Physics engine for N-body simulations."""

from astro_engine.physics.particle import Particle, ParticleStore
from astro_engine.physics.quadtree import Boundary, QuadTree
from astro_engine.physics.barnes_hut import BarnesHutForceCalculator, compute_forces_barnes_hut
from astro_engine.physics.force_calculator import ForceCalculator, compute_forces_direct
from astro_engine.physics.simulator import Simulator

__all__ = [
    "Particle",
    "ParticleStore",
    "Boundary",
    "QuadTree",
    "BarnesHutForceCalculator",
    "compute_forces_barnes_hut",
    "ForceCalculator",
    "compute_forces_direct",
    "Simulator",
]

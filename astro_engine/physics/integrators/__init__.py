"""Numerical integrators for N-body simulations."""

from astro_engine.physics.integrators.base import ForceFunction, Integrator
from astro_engine.physics.integrators.euler import SemiImplicitEulerIntegrator
from astro_engine.physics.integrators.leapfrog import LeapfrogIntegrator
from astro_engine.physics.integrators.rk4 import RK4Integrator

INTEGRATORS = {
    "rk4": RK4Integrator,
    "euler": SemiImplicitEulerIntegrator,
    "leapfrog": LeapfrogIntegrator,
}


def get_integrator(name: str) -> Integrator:
    """Get an integrator instance by name."""
    integrator_class = INTEGRATORS.get(name.lower())
    if integrator_class is None:
        raise ValueError(f"Unknown integrator: {name}. Available: {list(INTEGRATORS)}")
    return integrator_class()


__all__ = [
    "ForceFunction",
    "Integrator",
    "SemiImplicitEulerIntegrator",
    "LeapfrogIntegrator",
    "RK4Integrator",
    "INTEGRATORS",
    "get_integrator",
]

"""Scenario files: initial particles plus optional physical settings.

Format (JSON):

    {
      "name": "Solar System",
      "particles": [
        {"position": [400, 300], "velocity": [0, 0], "mass": 5000,
         "color": [255, 255, 0], "name": "Sun", "fixed": true},
        ...
      ],
      "settings": {"gravitational_constant": 0.0667, "time_step": 0.01,
                   "softening": 1.0, "theta": 0.5}
    }

Invalid particle data is rejected here, before it can reach the physics.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from astro_engine.physics.particle import WHITE, Particle, ParticleStore
from astro_engine.utils.config import SimulationConstants


logger = logging.getLogger(__name__)

# settings key -> SimulationConstants field
SETTINGS_KEYS = {
    "gravitational_constant": "G",
    "time_step": "dt",
    "softening": "softening",
    "theta": "theta",
}


class ScenarioError(ValueError):
    """Raised when a scenario file cannot be turned into a valid particle store."""


@dataclass
class Scenario:
    name: str
    particles: ParticleStore
    constants: SimulationConstants = field(default_factory=SimulationConstants)


def _parse_particle(index: int, entry: Dict[str, Any]) -> Particle:
    try:
        position = entry["position"]
        velocity = entry.get("velocity", (0.0, 0.0))
        mass = entry["mass"]
        if len(position) != 2 or len(velocity) != 2:
            raise ValueError("position and velocity need exactly two components")
        color = tuple(int(c) for c in entry.get("color", WHITE)[:3])
        return Particle(
            position=(position[0], position[1]),
            velocity=(velocity[0], velocity[1]),
            mass=mass,
            fixed=bool(entry.get("fixed", False)),
            name=str(entry.get("name", "")),
            color=color,
        )
    except KeyError as e:
        raise ScenarioError(f"Particle {index} is missing required key {e}") from e
    except (AttributeError, TypeError, ValueError) as e:
        raise ScenarioError(f"Particle {index} is invalid: {e}") from e


def parse_scenario(data: Dict[str, Any], defaults: Optional[SimulationConstants] = None) -> Scenario:
    """Build a Scenario from already-decoded JSON data."""
    if not isinstance(data, dict) or not isinstance(data.get("particles"), list):
        raise ScenarioError("Scenario must be an object with a 'particles' list")

    particles = ParticleStore.from_particles(
        _parse_particle(i, entry) for i, entry in enumerate(data["particles"])
    )

    constants = defaults or SimulationConstants()
    settings = data.get("settings") or {}
    if not isinstance(settings, dict):
        raise ScenarioError("Scenario 'settings' must be an object")
    ignored = sorted(set(settings) - set(SETTINGS_KEYS))
    if ignored:
        logger.warning("Ignoring unknown scenario settings: %s", ignored)
    try:
        changes = {SETTINGS_KEYS[k]: float(v) for k, v in settings.items() if k in SETTINGS_KEYS}
        constants = constants.replace(**changes)
    except (TypeError, ValueError) as e:
        raise ScenarioError(f"Invalid settings: {e}") from e

    return Scenario(name=str(data.get("name", "Unknown")), particles=particles, constants=constants)


def load_scenario(path: str, defaults: Optional[SimulationConstants] = None) -> Scenario:
    """Load a scenario file.

    Args:
        path: JSON scenario file
        defaults: Constants used for any setting the file leaves out

    Raises:
        ScenarioError: If the file is unreadable or holds invalid data
    """
    path = Path(path)
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except OSError as e:
        raise ScenarioError(f"Could not open scenario file: {path}") from e
    except json.JSONDecodeError as e:
        raise ScenarioError(f"Scenario file {path} is not valid JSON: {e}") from e

    scenario = parse_scenario(data, defaults)
    logger.info("Loaded scenario: %s (%d particles)", scenario.name, len(scenario.particles))
    return scenario


def scenario_to_dict(scenario: Scenario) -> Dict[str, Any]:
    """Inverse of parse_scenario."""
    particles = scenario.particles
    constants = scenario.constants
    return {
        "name": scenario.name,
        "particles": [
            {
                "position": particles.positions[i].tolist(),
                "velocity": particles.velocities[i].tolist(),
                "mass": float(particles.masses[i]),
                "color": list(particles.colors[i]),
                "name": particles.names[i],
                "fixed": bool(particles.fixed[i]),
            }
            for i in range(len(particles))
        ],
        "settings": {key: getattr(constants, attr) for key, attr in SETTINGS_KEYS.items()},
    }


def dump_scenario(scenario: Scenario, path: str):
    """Write a scenario in the format load_scenario reads."""
    path = Path(path)
    with open(path, 'w') as f:
        json.dump(scenario_to_dict(scenario), f, indent=2)
    logger.info("Saved scenario: %s to %s", scenario.name, path)

"""Configuration management."""

import dataclasses
import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

import yaml


@dataclass(frozen=True)
class SimulationConstants:
    """Physical constants threaded through force evaluation and integration.

    Immutable; use replace() to derive a modified copy.
    """
    G: float = 6.67430e-2  # Gravitational constant (scaled for visualization)
    dt: float = 0.01  # Time step
    softening: float = 1.0  # Plummer softening length
    theta: float = 0.5  # Barnes-Hut opening angle

    def __post_init__(self):
        if not self.G > 0:
            raise ValueError(f"G must be positive, got {self.G}")
        if not self.dt > 0:
            raise ValueError(f"dt must be positive, got {self.dt}")
        if not self.softening >= 0:
            raise ValueError(f"softening must be non-negative, got {self.softening}")
        if not self.theta > 0:
            raise ValueError(f"theta must be positive, got {self.theta}")

    def replace(self, **changes) -> "SimulationConstants":
        return dataclasses.replace(self, **changes)


@dataclass
class Config:
    """Run configuration."""
    # Initial conditions: a scenario file wins over a preset
    scenario: Optional[str] = None
    preset: str = "solar_system"
    n_particles: int = 200
    seed: Optional[int] = None

    # Simulation parameters
    steps: int = 1000
    dt: Optional[float] = None
    integrator: str = "rk4"
    force_method: str = "auto"
    theta: Optional[float] = None
    workers: int = 1
    barnes_hut_threshold: int = 256

    # Output
    plot_path: Optional[str] = None
    report_interval: int = 0
    log_level: str = "WARNING"


def load_config(config_path: str) -> Config:
    """Load configuration from file.

    Args:
        config_path: Path to config file (.json or .yaml)

    Returns:
        Config object
    """
    config_path = Path(config_path)

    with open(config_path, 'r') as f:
        try:
            if config_path.suffix in ('.yaml', '.yml'):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Config file {config_path} is not valid YAML: {e}") from e

    data = data or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must hold a mapping, got {type(data).__name__}")
    known = {field.name for field in dataclasses.fields(Config)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {config_path}: {unknown}")
    return Config(**data)


def save_config(config: Config, output_path: str):
    """Save configuration to file.

    Args:
        config: Config object
        output_path: Output file path (.json or .yaml)
    """
    output_path = Path(output_path)
    data = asdict(config)

    with open(output_path, 'w') as f:
        if output_path.suffix in ('.yaml', '.yml'):
            yaml.safe_dump(data, f, default_flow_style=False)
        else:
            json.dump(data, f, indent=2)

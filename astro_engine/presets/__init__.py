"""Preset scenario generators."""

from astro_engine.presets.base import Preset
from astro_engine.presets.cluster import RandomCluster
from astro_engine.presets.solar_system import SolarSystem
from astro_engine.presets.two_body import TwoBodyOrbit

PRESETS = {
    "solar_system": SolarSystem,
    "two_body": TwoBodyOrbit,
    "cluster": RandomCluster,
}


def get_preset(name: str, **kwargs) -> Preset:
    """Get preset by name."""
    preset_class = PRESETS.get(name.lower())
    if preset_class is None:
        raise ValueError(f"Unknown preset: {name}. Available: {list(PRESETS)}")
    return preset_class(**kwargs)


__all__ = ["Preset", "RandomCluster", "SolarSystem", "TwoBodyOrbit", "PRESETS", "get_preset"]

"""Configuration utilities."""

from astro_engine.utils.config import Config, SimulationConstants, load_config, save_config

__all__ = ["Config", "SimulationConstants", "load_config", "save_config"]

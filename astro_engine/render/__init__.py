"""Rendering helpers."""

from astro_engine.render.plot import plot_particles, save_snapshot

__all__ = ["plot_particles", "save_snapshot"]

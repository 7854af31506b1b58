"""Tests for preset generators."""

import numpy as np
import pytest

from astro_engine.presets import PRESETS, RandomCluster, SolarSystem, TwoBodyOrbit, get_preset


def test_solar_system():
    particles = SolarSystem().generate()
    assert len(particles) == 4
    assert particles.names[0] == "Sun"
    assert particles.fixed.tolist() == [False, False, False, False]
    assert particles.masses[0] == 5000.0


def test_two_body_orbit():
    preset = TwoBodyOrbit(distance=50.0, G=2.0, central_mass=100.0, orbiter_mass=1.0)
    particles = preset.generate()
    assert preset.speed == pytest.approx(2.0)
    assert preset.period == pytest.approx(2 * np.pi * 50.0 / 2.0)
    assert particles.fixed.tolist() == [True, False]
    assert particles.velocities[1].tolist() == pytest.approx([0.0, 2.0])
    with pytest.raises(ValueError):
        TwoBodyOrbit(distance=0.0)


def test_random_cluster_is_reproducible():
    a = RandomCluster(n_particles=25, radius=10.0, seed=3).generate()
    b = RandomCluster(n_particles=25, radius=10.0, seed=3).generate()
    assert len(a) == 25
    assert np.array_equal(a.positions, b.positions)
    assert np.all(np.linalg.norm(a.positions, axis=1) <= 10.0)
    assert np.all(a.masses > 0)
    with pytest.raises(ValueError):
        RandomCluster(mass_range=(0.0, 1.0))


def test_get_preset():
    for name in PRESETS:
        assert get_preset(name).name == name
    with pytest.raises(ValueError):
        get_preset("galaxy")

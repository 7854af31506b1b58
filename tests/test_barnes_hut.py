"""Tests for Barnes-Hut and direct force evaluation."""

import numpy as np
import pytest

from astro_engine.physics.barnes_hut import (
    ROOT_MARGIN,
    BarnesHutForceCalculator,
    build_tree,
    compute_forces_barnes_hut,
    root_boundary,
)
from astro_engine.physics.force_calculator import ForceCalculator, compute_forces_direct
from astro_engine.physics.particle import ParticleStore
from astro_engine.presets import RandomCluster


def _cluster(n=120, seed=1):
    return RandomCluster(n_particles=n, radius=50.0, seed=seed).generate()


def _max_relative_error(approx, exact):
    """Worst per-particle error relative to the typical force magnitude."""
    return float(
        np.max(np.linalg.norm(approx - exact, axis=1)) / np.mean(np.linalg.norm(exact, axis=1))
    )


def test_empty_input_returns_empty():
    """No particles, no forces, no exception."""
    assert compute_forces_barnes_hut(np.zeros((0, 2)), np.zeros(0)).shape == (0, 2)
    assert BarnesHutForceCalculator().compute_forces(ParticleStore(), 1.0, 1.0).shape == (0, 2)
    assert compute_forces_direct(np.zeros((0, 2)), np.zeros(0)).shape == (0, 2)


def test_single_particle_feels_no_force():
    forces = compute_forces_barnes_hut(np.array([[3.0, 4.0]]), np.array([7.0]))
    assert np.array_equal(forces, np.zeros((1, 2)))


def test_root_boundary_covers_particles_with_margin():
    positions = np.array([[0.0, 0.0], [10.0, 2.0], [4.0, -6.0]])
    b = root_boundary(positions)
    assert b.center == (5.0, -2.0)
    assert b.half_size == pytest.approx(10.0 * ROOT_MARGIN)
    assert all(b.contains(p) for p in positions)


def test_root_boundary_for_zero_extent():
    b = root_boundary(np.array([[2.0, 2.0], [2.0, 2.0]]))
    assert b.half_size == 1.0
    assert b.contains((2.0, 2.0))


def test_tree_root_mass_for_snapshot():
    particles = _cluster()
    tree = build_tree(particles.positions, particles.masses)
    assert tree.total_mass == pytest.approx(particles.total_mass)


def test_two_bodies_match_direct_sum():
    positions = np.array([[0.0, 0.0], [3.0, 4.0]])
    masses = np.array([2.0, 3.0])
    bh = compute_forces_barnes_hut(positions, masses, G=1.5, softening=0.1)
    direct = compute_forces_direct(positions, masses, G=1.5, softening=0.1)
    assert np.allclose(bh, direct)
    assert np.allclose(bh[0], -bh[1])


def test_tiny_theta_reproduces_direct_sum():
    """As theta -> 0 no node is approximated."""
    particles = _cluster()
    exact = compute_forces_direct(particles.positions, particles.masses, G=1.0, softening=0.5)
    bh = compute_forces_barnes_hut(particles.positions, particles.masses, G=1.0, softening=0.5, theta=1e-6)
    assert np.allclose(bh, exact, rtol=1e-9, atol=1e-12)


def test_error_shrinks_with_theta():
    """Max relative force error decreases monotonically as theta decreases."""
    particles = _cluster(n=200, seed=5)
    exact = compute_forces_direct(particles.positions, particles.masses, G=1.0, softening=0.5)
    errors = []
    for theta in (1.0, 0.5, 0.2, 0.05):
        bh = compute_forces_barnes_hut(particles.positions, particles.masses, G=1.0, softening=0.5, theta=theta)
        errors.append(_max_relative_error(bh, exact))
    assert all(later <= earlier for earlier, later in zip(errors, errors[1:]))
    assert errors[-1] < 1e-2


def test_output_is_index_aligned():
    """Swapping two inputs swaps the corresponding outputs."""
    particles = _cluster(n=60)
    positions = particles.positions.copy()
    masses = particles.masses.copy()
    forces = compute_forces_barnes_hut(positions, masses, theta=0.3)

    i, j = 4, 41
    positions[[i, j]] = positions[[j, i]]
    masses[[i, j]] = masses[[j, i]]
    swapped = compute_forces_barnes_hut(positions, masses, theta=0.3)

    assert swapped.shape == forces.shape
    assert np.allclose(swapped[i], forces[j])
    assert np.allclose(swapped[j], forces[i])
    others = [k for k in range(len(masses)) if k not in (i, j)]
    assert np.allclose(swapped[others], forces[others])


def test_threaded_traversal_matches_inline():
    particles = _cluster(n=150)
    inline = BarnesHutForceCalculator(theta=0.5, workers=1).compute_forces(particles, 1.0, 1.0)
    threaded = BarnesHutForceCalculator(theta=0.5, workers=4).compute_forces(particles, 1.0, 1.0)
    assert np.array_equal(inline, threaded)


def test_evaluation_does_not_touch_snapshot():
    particles = _cluster(n=30)
    before = particles.positions.copy()
    BarnesHutForceCalculator().compute_forces(particles, 1.0, 1.0)
    assert np.array_equal(particles.positions, before)


def test_invalid_parameters_raise():
    with pytest.raises(ValueError):
        BarnesHutForceCalculator(theta=0.0)
    with pytest.raises(ValueError):
        BarnesHutForceCalculator(workers=0)
    with pytest.raises(ValueError):
        compute_forces_barnes_hut(np.ones((2, 2)), np.ones(2), theta=-1.0)
    with pytest.raises(ValueError):
        ForceCalculator(method="fmm")


def test_force_calculator_method_selection():
    calc = ForceCalculator(method="auto", barnes_hut_threshold=10)
    assert calc.resolve_method(10) == "direct"
    assert calc.resolve_method(11) == "barnes_hut"
    assert ForceCalculator(method="direct").resolve_method(10_000) == "direct"
    assert ForceCalculator(method="barnes_hut").resolve_method(2) == "barnes_hut"


def test_force_calculator_methods_agree():
    particles = _cluster(n=80)
    direct = ForceCalculator(method="direct").compute_forces(particles, 1.0, 1.0)
    bh = ForceCalculator(method="barnes_hut", theta=0.2).compute_forces(particles, 1.0, 1.0)
    assert _max_relative_error(bh, direct) < 0.05


def test_direct_forces_sum_to_zero():
    """Newton's third law: internal forces cancel."""
    particles = _cluster(n=50)
    forces = compute_forces_direct(particles.positions, particles.masses, G=1.0, softening=0.2)
    scale = np.abs(forces).max()
    assert np.allclose(forces.sum(axis=0), 0.0, atol=1e-10 * scale)

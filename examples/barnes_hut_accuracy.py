"""Compare Barnes-Hut forces against the exact pairwise sum for several opening angles."""

import time

import numpy as np

from astro_engine import compute_forces_barnes_hut, compute_forces_direct
from astro_engine.presets import RandomCluster


def main():
    particles = RandomCluster(n_particles=2000, radius=500.0, seed=42).generate()
    G, softening = 1.0, 1.0

    t0 = time.perf_counter()
    exact = compute_forces_direct(particles.positions, particles.masses, G, softening)
    print(f"direct:      {time.perf_counter() - t0:7.3f} s")

    norms = np.linalg.norm(exact, axis=1)
    for theta in (1.0, 0.7, 0.5, 0.3):
        t0 = time.perf_counter()
        approx = compute_forces_barnes_hut(particles.positions, particles.masses, G, softening, theta)
        elapsed = time.perf_counter() - t0
        err = np.linalg.norm(approx - exact, axis=1) / norms
        print(f"theta={theta:.1f}:  {elapsed:7.3f} s  median rel err={np.median(err):.2e}  max={err.max():.2e}")


if __name__ == "__main__":
    main()

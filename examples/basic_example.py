"""Basic example of using the N-body engine."""

from astro_engine import Simulator, SimulationConstants
from astro_engine.physics.integrators import RK4Integrator
from astro_engine.presets import SolarSystem


def main():
    """Run the default solar system with RK4."""
    particles = SolarSystem().generate()
    sim = Simulator(particles, SimulationConstants(dt=0.01), RK4Integrator())

    print("Running simulation...")
    print(f"Initial energy: {sim.get_energy():.6f}")

    for step in range(500):
        sim.step()
        if step % 100 == 0:
            energy = sim.get_energy()
            print(f"Step {step}: Time={sim.time:.2f}, Energy={energy:.6f}")

    print(f"Final energy: {sim.get_energy():.6f}")
    for p in sim.particles:
        print(f"  {p.name:10s} position=({p.position[0]:8.2f}, {p.position[1]:8.2f})")


if __name__ == "__main__":
    main()

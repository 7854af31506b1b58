"""CLI main entry point."""

import argparse
import logging
import sys
from typing import Optional, Sequence

import numpy as np

from astro_engine.io.scenario import ScenarioError, load_scenario
from astro_engine.physics.barnes_hut import build_tree
from astro_engine.physics.diagnostics import Diagnostics
from astro_engine.physics.force_calculator import METHODS, ForceCalculator
from astro_engine.physics.integrators import INTEGRATORS, get_integrator
from astro_engine.physics.simulator import Simulator
from astro_engine.presets import PRESETS, get_preset
from astro_engine.render.plot import save_snapshot
from astro_engine.utils.config import Config, SimulationConstants, load_config


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="astro-engine",
        description="Run a headless 2D N-body simulation (Barnes-Hut forces, RK4 by default)",
    )
    parser.add_argument('--config', type=str, default=None,
                        help='Run configuration file (.json or .yaml); flags override it')
    parser.add_argument('--scenario', type=str, default=None, help='Scenario JSON file')
    parser.add_argument('--preset', type=str, default=None, choices=sorted(PRESETS),
                        help='Built-in initial conditions (ignored when --scenario is given)')
    parser.add_argument('--particles', type=int, default=None, help='Particle count for the cluster preset')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for the cluster preset')
    parser.add_argument('--steps', type=int, default=None, help='Number of steps to run')
    parser.add_argument('--dt', type=float, default=None, help='Time step (overrides the scenario)')
    parser.add_argument('--integrator', type=str, default=None, choices=sorted(INTEGRATORS))
    parser.add_argument('--method', type=str, default=None, choices=METHODS, help='Force evaluation method')
    parser.add_argument('--theta', type=float, default=None, help='Barnes-Hut opening angle')
    parser.add_argument('--workers', type=int, default=None, help='Threads for force traversal')
    parser.add_argument('--report-interval', type=int, default=None,
                        help='Print diagnostics every N steps (0 = only at the end)')
    parser.add_argument('--plot', type=str, default=None,
                        help='Save a final snapshot with quadtree cells to this image file')
    parser.add_argument('--log-level', type=str, default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return parser


def merge_config(args: argparse.Namespace) -> Config:
    """Config file values, overridden by any flag given on the command line."""
    config = load_config(args.config) if args.config else Config()
    overrides = {
        'scenario': args.scenario,
        'preset': args.preset,
        'n_particles': args.particles,
        'seed': args.seed,
        'steps': args.steps,
        'dt': args.dt,
        'integrator': args.integrator,
        'force_method': args.method,
        'theta': args.theta,
        'workers': args.workers,
        'report_interval': args.report_interval,
        'plot_path': args.plot,
        'log_level': args.log_level,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)
    return config


def build_simulator(config: Config) -> Simulator:
    """Initial conditions, constants, integrator and force calculator from a config."""
    if config.scenario:
        scenario = load_scenario(config.scenario)
        particles, constants = scenario.particles, scenario.constants
        print(f"Loaded scenario: {scenario.name}")
    else:
        kwargs = {}
        if config.preset == 'cluster':
            kwargs = {'n_particles': config.n_particles, 'seed': config.seed}
        preset = get_preset(config.preset, **kwargs)
        particles, constants = preset.generate(), SimulationConstants()

    changes = {}
    if config.dt is not None:
        changes['dt'] = config.dt
    if config.theta is not None:
        changes['theta'] = config.theta
    constants = constants.replace(**changes)

    force_calculator = ForceCalculator(
        method=config.force_method,
        theta=constants.theta,
        workers=config.workers,
        barnes_hut_threshold=config.barnes_hut_threshold,
    )
    return Simulator(particles, constants, get_integrator(config.integrator), force_calculator)


def _report(sim: Simulator, diagnostics: Diagnostics):
    s = diagnostics.summary(sim.particles)
    print(
        f"t={sim.time:.4f} step={sim.step_count} E={s['total']:.6e} "
        f"K={s['kinetic']:.6e} U={s['potential']:.6e} "
        f"P=({s['momentum_x']:.4e}, {s['momentum_y']:.4e})"
    )


def run_simulation(config: Config) -> int:
    """Run a simulation and print a summary. Returns a process exit code."""
    sim = build_simulator(config)
    diagnostics = sim.diagnostics()
    n = len(sim.particles)
    method = sim.force_calculator.resolve_method(n)
    print(
        f"Particles: {n}  Integrator: {sim.integrator.name}  Forces: {method}  "
        f"G={sim.constants.G:g} dt={sim.constants.dt:g} "
        f"softening={sim.constants.softening:g} theta={sim.constants.theta:g}"
    )

    E0 = sim.get_energy()
    P0 = diagnostics.summary(sim.particles)
    _report(sim, diagnostics)

    interval = config.report_interval
    if interval and interval > 0:
        def on_step(s: Simulator):
            if s.step_count % interval == 0:
                _report(s, diagnostics)

        sim.on_step_callback = on_step

    sim.set_profiling(True)
    sim.run(config.steps)
    timing = sim.get_timing()

    E1 = sim.get_energy()
    P1 = diagnostics.summary(sim.particles)
    _report(sim, diagnostics)
    drift = abs(E1 - E0) / abs(E0) if E0 != 0 else abs(E1 - E0)
    momentum_drift = float(np.hypot(P1['momentum_x'] - P0['momentum_x'], P1['momentum_y'] - P0['momentum_y']))
    print(f"Relative energy drift: {drift:.3e}")
    print(f"Momentum change: {momentum_drift:.3e}")
    if timing["step_ms"] is not None:
        print(f"Last step: {timing['step_ms']:.2f} ms ({timing['force_calls']} force evaluations)")

    if config.plot_path:
        tree = build_tree(sim.particles.positions, sim.particles.masses) if n else None
        save_snapshot(
            sim.particles, config.plot_path, tree=tree,
            title=f"t = {sim.time:.3f} ({sim.step_count} steps)",
        )
        print(f"Snapshot saved to {config.plot_path}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = merge_config(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return run_simulation(config)
    except (ScenarioError, ValueError) as e:
        logger.debug("Run failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""Tests for the command-line runner."""

import json

from astro_engine.cli.main import build_parser, build_simulator, main, merge_config


def test_run_preset(capsys):
    assert main(["--preset", "two_body", "--steps", "5", "--integrator", "rk4"]) == 0
    out = capsys.readouterr().out
    assert "Particles: 2" in out
    assert "Relative energy drift" in out


def test_run_scenario_with_plot(tmp_path, capsys):
    scenario = tmp_path / "scenario.json"
    scenario.write_text(json.dumps({
        "name": "Pair",
        "particles": [
            {"position": [0, 0], "velocity": [0, 0], "mass": 100, "fixed": True},
            {"position": [10, 0], "velocity": [0, 1], "mass": 1},
        ],
        "settings": {"gravitational_constant": 0.1, "time_step": 0.05, "softening": 0.1},
    }))
    plot = tmp_path / "final.png"
    code = main([
        "--scenario", str(scenario), "--steps", "3", "--method", "barnes_hut",
        "--report-interval", "1", "--plot", str(plot),
    ])
    assert code == 0
    assert plot.exists()
    out = capsys.readouterr().out
    assert "Loaded scenario: Pair" in out
    assert "Forces: barnes_hut" in out


def test_invalid_scenario_exits_with_error(tmp_path, capsys):
    scenario = tmp_path / "bad.json"
    scenario.write_text(json.dumps({"particles": [{"position": [0, 0], "mass": 0}]}))
    assert main(["--scenario", str(scenario), "--steps", "1"]) == 1
    assert "positive mass" in capsys.readouterr().err


def test_missing_config_exits_with_error(tmp_path):
    assert main(["--config", str(tmp_path / "nope.yaml")]) == 1


def test_flags_override_config(tmp_path):
    config_path = tmp_path / "run.yaml"
    config_path.write_text("preset: cluster\nn_particles: 30\nsteps: 7\ntheta: 0.9\nseed: 1\n")
    args = build_parser().parse_args(["--config", str(config_path), "--theta", "0.3", "--dt", "0.002"])
    config = merge_config(args)
    assert config.steps == 7
    assert config.theta == 0.3

    sim = build_simulator(config)
    assert len(sim.particles) == 30
    assert sim.constants.theta == 0.3
    assert sim.constants.dt == 0.002
    assert sim.force_calculator.theta == 0.3


def test_malformed_config_exits_with_error(tmp_path, capsys):
    config_path = tmp_path / "run.yaml"
    config_path.write_text("steps: [1, 2\n")
    assert main(["--config", str(config_path)]) == 1
    assert "not valid YAML" in capsys.readouterr().err

    config_path.write_text("- 1\n- 2\n")
    assert main(["--config", str(config_path)]) == 1


def test_invalid_scenario_settings_exit_with_error(tmp_path, capsys):
    scenario = tmp_path / "bad_settings.json"
    scenario.write_text(json.dumps({
        "particles": [{"position": [0, 0], "mass": 1}],
        "settings": {"time_step": None},
    }))
    assert main(["--scenario", str(scenario), "--steps", "1"]) == 1
    assert "Invalid settings" in capsys.readouterr().err

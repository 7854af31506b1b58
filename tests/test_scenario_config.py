"""Tests for scenario loading and configuration."""

import json
from pathlib import Path

import pytest

from astro_engine.io.scenario import ScenarioError, dump_scenario, load_scenario, parse_scenario
from astro_engine.utils.config import Config, SimulationConstants, load_config, save_config


SOLAR = {
    "name": "Test System",
    "particles": [
        {"position": [400, 300], "velocity": [0, 0], "mass": 5000,
         "color": [255, 255, 0], "name": "Sun", "fixed": True},
        {"position": [400, 200], "velocity": [50, 0], "mass": 10,
         "color": [0, 255, 255], "name": "Planet"},
    ],
    "settings": {"gravitational_constant": 1.5, "time_step": 0.005, "softening": 0.5},
}


def _write(tmp_path, data, name="scenario.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data))
    return str(path)


def test_load_scenario(tmp_path):
    scenario = load_scenario(_write(tmp_path, SOLAR))
    assert scenario.name == "Test System"
    particles = scenario.particles
    assert len(particles) == 2
    assert particles.fixed.tolist() == [True, False]
    assert particles.names == ["Sun", "Planet"]
    assert particles.colors[0] == (255, 255, 0)
    assert particles.masses.tolist() == [5000.0, 10.0]
    assert particles.velocities[1].tolist() == [50.0, 0.0]

    c = scenario.constants
    assert (c.G, c.dt, c.softening) == (1.5, 0.005, 0.5)
    assert c.theta == SimulationConstants().theta


def test_missing_settings_use_defaults():
    defaults = SimulationConstants(G=2.0)
    scenario = parse_scenario({"particles": [{"position": [0, 0], "mass": 1}]}, defaults)
    assert scenario.constants == defaults
    assert scenario.name == "Unknown"
    assert scenario.particles.velocities.tolist() == [[0.0, 0.0]]


@pytest.mark.parametrize("entry,message", [
    ({"position": [0, 0]}, "missing required key"),
    ({"position": [0, 0], "mass": 0}, "positive mass"),
    ({"position": [0, 0], "mass": -5}, "positive mass"),
    ({"position": [0], "mass": 1}, "two components"),
    ({"position": [0, 0], "mass": "heavy"}, "invalid"),
])
def test_invalid_particles_rejected(entry, message):
    data = {"particles": [{"position": [1, 1], "mass": 1}, entry]}
    with pytest.raises(ScenarioError, match=message) as excinfo:
        parse_scenario(data)
    assert "Particle 1" in str(excinfo.value)


@pytest.mark.parametrize("settings", [
    {"time_step": -1},
    {"time_step": None},
    {"softening": "soft"},
    [0.1, 0.01],
])
def test_invalid_settings_rejected(settings):
    data = {"particles": [], "settings": settings}
    with pytest.raises(ScenarioError):
        parse_scenario(data)


def test_unreadable_files(tmp_path):
    with pytest.raises(ScenarioError):
        load_scenario(str(tmp_path / "missing.json"))
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(ScenarioError):
        load_scenario(str(bad))
    with pytest.raises(ScenarioError):
        parse_scenario({"bodies": []})


def test_constants_validation():
    with pytest.raises(ValueError):
        SimulationConstants(G=0.0)
    with pytest.raises(ValueError):
        SimulationConstants(dt=0.0)
    with pytest.raises(ValueError):
        SimulationConstants(softening=-1.0)
    with pytest.raises(ValueError):
        SimulationConstants(theta=0.0)
    assert SimulationConstants(softening=0.0).softening == 0.0


def test_constants_are_immutable():
    c = SimulationConstants()
    with pytest.raises(AttributeError):
        c.G = 2.0
    assert c.replace(G=2.0).G == 2.0
    assert c.G == SimulationConstants().G


def test_config_yaml(tmp_path):
    config = Config(preset="cluster", n_particles=50, steps=20, integrator="leapfrog", theta=0.7)
    path = str(tmp_path / "run.yaml")
    save_config(config, path)
    assert load_config(path) == config


def test_config_json_unknown_key(tmp_path):
    path = tmp_path / "run.json"
    path.write_text(json.dumps({"steps": 10, "bogus": 1}))
    with pytest.raises(ValueError, match="bogus"):
        load_config(str(path))


def test_bundled_solar_system_scenario():
    path = Path(__file__).resolve().parent.parent / "scenarios" / "solar_system.json"
    scenario = load_scenario(str(path))
    assert scenario.name == "Solar System"
    assert len(scenario.particles) == 4
    assert scenario.particles.fixed.sum() == 1


def test_dump_then_load_preserves_scenario(tmp_path):
    scenario = load_scenario(_write(tmp_path, SOLAR))
    path = str(tmp_path / "copy.json")
    dump_scenario(scenario, path)

    written = json.loads(Path(path).read_text())
    assert set(written) == {"name", "particles", "settings"}
    assert set(written["settings"]) == {"gravitational_constant", "time_step", "softening", "theta"}
    assert written["particles"][0]["fixed"] is True

    reloaded = load_scenario(path)
    assert reloaded.name == scenario.name
    assert reloaded.constants == scenario.constants
    original, copy = scenario.particles, reloaded.particles
    assert copy.positions.tolist() == original.positions.tolist()
    assert copy.velocities.tolist() == original.velocities.tolist()
    assert copy.masses.tolist() == original.masses.tolist()
    assert copy.fixed.tolist() == original.fixed.tolist()
    assert copy.names == original.names
    assert copy.colors == original.colors


def test_config_yaml_errors(tmp_path):
    malformed = tmp_path / "broken.yaml"
    malformed.write_text("steps: [1, 2\n")
    with pytest.raises(ValueError, match="not valid YAML"):
        load_config(str(malformed))

    listing = tmp_path / "list.yaml"
    listing.write_text("- steps\n- 10\n")
    with pytest.raises(ValueError, match="mapping"):
        load_config(str(listing))

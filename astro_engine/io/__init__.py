"""Scenario input/output."""

from astro_engine.io.scenario import (
    Scenario,
    ScenarioError,
    dump_scenario,
    load_scenario,
    parse_scenario,
    scenario_to_dict,
)

__all__ = [
    "Scenario",
    "ScenarioError",
    "dump_scenario",
    "load_scenario",
    "parse_scenario",
    "scenario_to_dict",
]

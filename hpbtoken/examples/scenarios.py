import importlib
import os
from typing import List, Tuple

from hpbtoken.examples.scenario import Scenario

examples_dir = os.path.dirname(os.path.abspath(__file__))
scenario_dir = os.path.join(examples_dir, 'sales')


def load_scenario(filename: str) -> Tuple[str, Scenario]:
    p = importlib.import_module(f'hpbtoken.examples.sales.{filename[:-3]}')
    s = p.SCENARIO
    return s.name(), s


def collect_scenarios(directory: str) -> List[Tuple[str, Scenario]]:
    scenarios: List[Tuple[str, Scenario]] = []
    for f in sorted(os.listdir(directory)):
        if f.endswith('.py') and not f.startswith('__'):
            scenarios.append(load_scenario(f))
    return scenarios


def get_scenario(name: str) -> Scenario:
    for scenario_name, scenario in all_scenarios:
        if scenario_name == name:
            return scenario
    raise KeyError(f'Unknown scenario {name}')


all_scenarios = collect_scenarios(scenario_dir)

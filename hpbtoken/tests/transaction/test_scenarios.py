from parameterized import parameterized_class

from hpbtoken.examples.scenario import run_scenario
from hpbtoken.examples.scenarios import all_scenarios
from hpbtoken.tests.utils.test_examples import TestScenario
from hpbtoken.transaction.runtime import Runtime


@parameterized_class(('name', 'scenario'), all_scenarios)
class TestScenarioExecution(TestScenario):

    def tearDown(self) -> None:
        Runtime.reset()
        super().tearDown()

    def test_run_scenario(self):
        token = run_scenario(self, self.scenario)
        self.assertIsNotNone(token)

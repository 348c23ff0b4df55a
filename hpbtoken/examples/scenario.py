from contextlib import nullcontext
from typing import Any, Optional, List, Union, Dict, Type, Collection
from unittest import TestCase

from hpbtoken.config import hpb_print
from hpbtoken.token_sale import HPBToken
from hpbtoken.transaction.runtime import Runtime
from hpbtoken.transaction.types import AddressValue

# Transaction name which denotes a plain value transfer to the contract address
VALUE_TRANSFER = '<value>'


class TransactionAssertion:
    def check_assertion(self, test: TestCase, token: HPBToken, users: Dict[str, AddressValue]):
        pass


class TokenBalanceAssertion(TransactionAssertion):
    def __init__(self, user: str, expected_balance: int) -> None:
        super().__init__()
        self.user = user
        self.balance = expected_balance

    def check_assertion(self, test: TestCase, token: HPBToken, users: Dict[str, AddressValue]):
        actual_balance = token.balance_of(users[self.user])
        test.assertEqual(self.balance, actual_balance, f'Token balance of {self.user}')


class ContractBalanceAssertion(TransactionAssertion):
    def __init__(self, expected_balance: int) -> None:
        super().__init__()
        self.balance = expected_balance

    def check_assertion(self, test: TestCase, token: HPBToken, users: Dict[str, AddressValue]):
        actual_balance = token.address.balance
        test.assertEqual(self.balance, actual_balance, 'Ether held by the token contract')


class SaleStateAssertion(TransactionAssertion):
    def __init__(self, *, started: Optional[bool] = None, in_progress: Optional[bool] = None,
                 ended: Optional[bool] = None, closed: Optional[bool] = None) -> None:
        super().__init__()
        self.expected = {'started': started, 'in_progress': in_progress, 'ended': ended, 'closed': closed}

    def check_assertion(self, test: TestCase, token: HPBToken, users: Dict[str, AddressValue]):
        getters = {
            'started': token.sale_started,
            'in_progress': token.sale_in_progress,
            'ended': token.sale_ended,
            'closed': token.sale_closed,
        }
        for key, expected in self.expected.items():
            if expected is not None:
                test.assertEqual(expected, getters[key](), f'Sale state "{key}"')


class BlockAdvance:
    def __init__(self, count: int) -> None:
        super().__init__()
        self.count = count

    def __str__(self):
        return f'mine({self.count})'


class Transaction:
    def __init__(self, user: str, name: str, *args: Any, amount: Optional[int] = None,
                 expected_events: Collection[str] = (), unexpected_events: Collection[str] = (),
                 expected_exception: Optional[Type[Exception]] = None):
        super().__init__()
        self.user = user
        self.name = name
        self.args = args
        self.amount = amount
        self.expected_events = tuple(expected_events)
        self.unexpected_events = tuple(unexpected_events)
        self.expected_exception = expected_exception

    @property
    def is_value_transfer(self) -> bool:
        return self.name == VALUE_TRANSFER

    def __str__(self):
        return f"{self.name}({', '.join([str(arg) for arg in self.args])}){{amount={self.amount}, user={self.user}}}"


class Scenario:
    def __init__(self, name: str):
        self._name = name
        self._users = None
        self._deployment_transaction = None
        self._steps = []

    def name(self):
        return self._name

    def users(self) -> List[str]:
        # Names of the users which participate
        return self._users

    def deployment_transaction(self) -> Transaction:
        return self._deployment_transaction

    def steps(self) -> List[Union[Transaction, TransactionAssertion, BlockAdvance]]:
        # Transactions, block advances and assertions, in execution order
        return self._steps


class ScenarioBuilder:
    def __init__(self, name: str) -> None:
        super().__init__()
        self.scenario = Scenario(name)

    def set_users(self, *users: str):
        self.scenario._users = list(users)
        return self

    def set_deployment_transaction(self, *, owner: str, target: Optional[str] = None,
                                   blocks_per_phase: Optional[int] = None, hard_cap: Optional[int] = None):
        assert self.scenario._deployment_transaction is None
        t = Transaction(owner, 'constructor', target, blocks_per_phase, hard_cap)
        self.scenario._deployment_transaction = t
        return self

    def add_transaction(self, fname: str, args: Optional[List] = None, *, user: str, amount=None,
                        expected_events=(), unexpected_events=(), expected_exception=None):
        args = [] if args is None else args
        t = Transaction(user, fname, *args, amount=amount, expected_events=expected_events,
                        unexpected_events=unexpected_events, expected_exception=expected_exception)
        self.scenario._steps.append(t)
        return self

    def add_value_transfer(self, amount: int, *, user: str, expected_events=(), unexpected_events=(),
                           expected_exception=None):
        return self.add_transaction(VALUE_TRANSFER, user=user, amount=amount, expected_events=expected_events,
                                    unexpected_events=unexpected_events, expected_exception=expected_exception)

    def mine_blocks(self, count: int):
        self.scenario._steps.append(BlockAdvance(count))
        return self

    def add_token_balance_assertion(self, user: str, expected_balance: int):
        self.scenario._steps.append(TokenBalanceAssertion(user, expected_balance))
        return self

    def add_contract_balance_assertion(self, expected_balance: int):
        self.scenario._steps.append(ContractBalanceAssertion(expected_balance))
        return self

    def add_sale_state_assertion(self, **expected: bool):
        self.scenario._steps.append(SaleStateAssertion(**expected))
        return self

    def build(self) -> Scenario:
        assert self.scenario.users() is not None
        assert self.scenario.deployment_transaction() is not None
        return self.scenario


def run_scenario(test: TestCase, scenario: Scenario) -> HPBToken:
    """
    Deploy a fresh token sale and execute all steps of scenario, checking expectations with test's assertion methods.

    Requires a debug backend (pre-funded test accounts, mining on demand).

    :return: the client of the deployed token sale
    """
    Runtime.reset()
    api = Runtime.blockchain()

    # Create dummy users
    user_names = scenario.users()
    users = dict(zip(user_names, api.create_test_accounts(len(user_names))))

    def resolve(arg):
        return users[arg] if isinstance(arg, str) and arg in users else arg

    deployment = scenario.deployment_transaction()
    target, blocks_per_phase, hard_cap = deployment.args
    token = HPBToken.deploy(users[deployment.user], target=resolve(target),
                            blocks_per_phase=blocks_per_phase, hard_cap=hard_cap)
    test.assertIsNotNone(token.address)

    for step in scenario.steps():
        if isinstance(step, TransactionAssertion):
            step.check_assertion(test, token, users)
        elif isinstance(step, BlockAdvance):
            hpb_print(f'Mining {step.count} block(s)')
            api.mine_blocks(step.count)
        else:
            assert isinstance(step, Transaction)
            hpb_print(f'Transaction: {step}')
            exception = step.expected_exception
            with nullcontext() if exception is None else test.assertRaises(exception):
                sender = users[step.user]
                if step.is_value_transfer:
                    result = token.buy(sender, step.amount)
                else:
                    args = [resolve(arg) for arg in step.args]
                    result = token.transact(sender, step.name, *args, wei_amount=step.amount)
                test.assertIsNotNone(result)
                for event in step.expected_events:
                    test.assertTrue(result.has_event(event), f'{step}: expected event {event}, got {result.event_names}')
                for event in step.unexpected_events:
                    test.assertFalse(result.has_event(event), f'{step}: unexpected event {event}')
    return token

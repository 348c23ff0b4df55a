from hpbtoken.examples.scenario import ScenarioBuilder
from hpbtoken.token_sale import to_wei, SALE_STARTED, INVALID_CALLER, INVALID_STATE, ISSUE_TOKEN, TRANSFER
from hpbtoken.transaction.interface import BlockChainError

owner, buyer = 'owner', 'buyer'
sb = ScenarioBuilder('IcoLifecycle').set_users(owner, buyer)
sb.set_deployment_transaction(owner=owner, blocks_per_phase=10)
sb.add_sale_state_assertion(started=False, in_progress=False, ended=False, closed=False)

# Only the owner may start the sale
sb.add_transaction('start', [100], user=buyer, expected_events=[INVALID_CALLER], unexpected_events=[SALE_STARTED])
sb.add_sale_state_assertion(started=False)

# Purchases before the start are refunded
sb.add_value_transfer(to_wei(1), user=buyer, expected_events=[INVALID_STATE], unexpected_events=[ISSUE_TOKEN])
sb.add_token_balance_assertion(buyer, 0)
sb.add_contract_balance_assertion(0)

sb.add_transaction('start', [10], user=owner, expected_events=[SALE_STARTED], unexpected_events=[INVALID_CALLER])
sb.add_sale_state_assertion(started=True, in_progress=True, ended=False)

# Below minimum purchase reverts
sb.add_value_transfer(to_wei(1, 'finney'), user=buyer, expected_exception=BlockChainError)

# 1 ether in the first phase yields 6000 HPB
sb.add_value_transfer(to_wei(1), user=buyer, expected_events=[ISSUE_TOKEN, TRANSFER], unexpected_events=[INVALID_STATE])
sb.add_token_balance_assertion(buyer, to_wei(6000))
sb.add_contract_balance_assertion(0)

# A second start attempt is rejected
sb.add_transaction('start', [10], user=owner, expected_events=[INVALID_STATE], unexpected_events=[SALE_STARTED])

SCENARIO = sb.build()

from hpbtoken.examples.scenario import ScenarioBuilder
from hpbtoken.token_sale import to_wei, SALE_STARTED, SALE_ENDED, INVALID_CALLER, INVALID_STATE, ISSUE_TOKEN

owner, buyer = 'owner', 'buyer'
sb = ScenarioBuilder('SaleExpiry').set_users(owner, buyer)
sb.set_deployment_transaction(owner=owner, blocks_per_phase=2)

# A sale without duration never starts
sb.add_transaction('start', [0], user=owner, expected_events=[INVALID_STATE], unexpected_events=[SALE_STARTED])
sb.add_sale_state_assertion(started=False)

sb.add_transaction('start', [5], user=owner, expected_events=[SALE_STARTED])

# Closing is only possible after the sale has ended
sb.add_transaction('close', user=owner, expected_events=[INVALID_STATE], unexpected_events=[SALE_ENDED])

sb.mine_blocks(6)
sb.add_sale_state_assertion(started=True, in_progress=False, ended=True, closed=False)
sb.add_value_transfer(to_wei(1), user=buyer, expected_events=[INVALID_STATE], unexpected_events=[ISSUE_TOKEN])
sb.add_token_balance_assertion(buyer, 0)
sb.add_contract_balance_assertion(0)

sb.add_transaction('close', user=buyer, expected_events=[INVALID_CALLER], unexpected_events=[SALE_ENDED])
sb.add_transaction('close', user=owner, expected_events=[SALE_ENDED])
sb.add_sale_state_assertion(closed=True, in_progress=False)
sb.add_transaction('close', user=owner, expected_events=[INVALID_STATE], unexpected_events=[SALE_ENDED])

SCENARIO = sb.build()

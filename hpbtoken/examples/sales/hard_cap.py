from hpbtoken.examples.scenario import ScenarioBuilder
from hpbtoken.token_sale import to_wei, SALE_STARTED, SALE_ENDED, INVALID_STATE, ISSUE_TOKEN, TRANSFER

owner, buyer1, buyer2 = 'owner', 'buyer1', 'buyer2'
sb = ScenarioBuilder('HardCap').set_users(owner, buyer1, buyer2)
sb.set_deployment_transaction(owner=owner, blocks_per_phase=10, hard_cap=to_wei(2))
sb.add_transaction('start', [1000], user=owner, expected_events=[SALE_STARTED])

sb.add_value_transfer(to_wei(1), user=buyer1, expected_events=[ISSUE_TOKEN, TRANSFER])
sb.add_sale_state_assertion(in_progress=True, ended=False)

# Reaching the cap ends the sale
sb.add_value_transfer(to_wei(1), user=buyer2, expected_events=[ISSUE_TOKEN, TRANSFER])
sb.add_sale_state_assertion(in_progress=False, ended=True)
sb.add_value_transfer(to_wei(1), user=buyer1, expected_events=[INVALID_STATE], unexpected_events=[ISSUE_TOKEN])

sb.add_token_balance_assertion(buyer1, to_wei(6000))
sb.add_token_balance_assertion(buyer2, to_wei(6000))
sb.add_contract_balance_assertion(0)

sb.add_transaction('close', user=owner, expected_events=[SALE_ENDED])

SCENARIO = sb.build()

from hpbtoken.examples.scenario import ScenarioBuilder
from hpbtoken.token_sale import to_wei, SALE_STARTED, INVALID_STATE, ISSUE_TOKEN, TRANSFER, APPROVAL
from hpbtoken.transaction.interface import BlockChainError

owner, payer, recipient, spender = 'owner', 'payer', 'recipient', 'spender'
sb = ScenarioBuilder('ThirdPartyPurchase').set_users(owner, payer, recipient, spender)
sb.set_deployment_transaction(owner=owner, blocks_per_phase=10)

sb.add_transaction('issueToken', [recipient], user=payer, amount=to_wei(1), expected_events=[INVALID_STATE],
                   unexpected_events=[ISSUE_TOKEN])
sb.add_transaction('start', [100], user=owner, expected_events=[SALE_STARTED])

# Tokens are credited to the recipient, not to the payer
sb.add_transaction('issueToken', [recipient], user=payer, amount=to_wei(1), expected_events=[ISSUE_TOKEN, TRANSFER])
sb.add_token_balance_assertion(payer, 0)
sb.add_token_balance_assertion(recipient, to_wei(6000))

# ERC20 transfers of the purchased tokens
sb.add_transaction('transfer', [payer, to_wei(1000)], user=recipient, expected_events=[TRANSFER])
sb.add_transaction('transfer', [payer, to_wei(6000)], user=recipient, expected_exception=BlockChainError)
sb.add_transaction('approve', [spender, to_wei(500)], user=recipient, expected_events=[APPROVAL])
sb.add_transaction('transferFrom', [recipient, spender, to_wei(500)], user=spender, expected_events=[TRANSFER])
sb.add_transaction('transferFrom', [recipient, spender, 1], user=spender, expected_exception=BlockChainError)
sb.add_token_balance_assertion(payer, to_wei(1000))
sb.add_token_balance_assertion(recipient, to_wei(4500))
sb.add_token_balance_assertion(spender, to_wei(500))

SCENARIO = sb.build()

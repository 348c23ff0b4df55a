"""
This package contains the solidity sources which are deployed by hpbtoken.

* HPBToken.sol: ERC20 token with an owner-gated, block-bounded token sale
"""
import os

contracts_dir = os.path.dirname(os.path.realpath(__file__))

token_contract_name = 'HPBToken'
token_contract_file = os.path.join(contracts_dir, f'{token_contract_name}.sol')

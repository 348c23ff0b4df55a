"""
The main hpbtoken package.

==========
Submodules
==========
* :py:mod:`.__main__`: hpbtoken command line interface
* :py:mod:`.config`: Global configuration (both user-configuration as well as internal configuration)
* :py:mod:`.token_sale`: Client for the HPB token sale contract

===========
Subpackages
===========
* :py:mod:`.compiler`: Solidity compilation via solc
* :py:mod:`.contracts`: Solidity sources of the token sale contract
* :py:mod:`.examples`: Declarative token sale scenarios
* :py:mod:`.my_logging`: Logging facilities
* :py:mod:`.transaction`: Runtime API for blockchain interaction
* :py:mod:`.utils`: Internal helper functionality
"""

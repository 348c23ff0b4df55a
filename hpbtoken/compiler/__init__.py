"""
This package contains the compilation glue between hpbtoken and solc.

===========
Subpackages
===========
* :py:mod:`.solidity`: Invocation of the solidity compiler via py-solc-x
"""

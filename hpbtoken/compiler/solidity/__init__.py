"""
This package contains the interface to solc.

==========
Submodules
==========
* :py:mod:`.compiler`: Functionality for compiling solidity code with solc (via the json interface)
"""

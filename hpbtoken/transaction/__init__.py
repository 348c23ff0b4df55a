"""
This package contains the runtime API used by the token client when working with transactions.

==========
Submodules
==========
* :py:mod:`.interface`: Runtime API interface
* :py:mod:`.runtime`: Static class which provides access to the blockchain backend singleton.
* :py:mod:`.types`: Type wrapper classes (for safer API interactions) used by the Runtime API.

===========
Subpackages
===========
* :py:mod:`.blockchain`: Blockchain backends
"""

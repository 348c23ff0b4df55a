"""
This module defines the hpbtoken options which are configurable by the user via command line arguments.

The argument parser in :py:mod:`.__main__` uses the docstrings, type hints and _values for the help
 strings and the _values fields for autocompletion

WARNING: This is one of the only hpbtoken modules that is imported before argcomplete.autocomplete is called. \
For performance reasons it should thus not have any import side-effects or perform any expensive operations during import.
"""
from typing import Any, Union

from appdirs import AppDirs


def _check_is_one_of(val: str, legal_vals):
    if val not in legal_vals:
        raise ValueError(f'Invalid config value {val}, must be one of {legal_vals}')


def _type_check(val: Any, t):
    if not isinstance(val, t):
        raise ValueError(f'Value {val} has wrong type (expected {t})')


class UserConfig:
    def __init__(self):
        self._appdirs = AppDirs('hpbtoken', appauthor=False, version=None, roaming=True)

        # User configuration
        # Each attribute must have a type hint and a docstring for correct help strings in the commandline interface.
        # If 'Available Options: [...]' is specified, the options are used for autocomplete suggestions.

        # Global defaults
        self._blockchain_backend: str = 'w3-eth-tester'
        self._blockchain_backend_values = ['w3-eth-tester', 'w3-ganache', 'w3-ipc', 'w3-http', 'w3-custom']

        self._blockchain_node_uri: Union[Any, str, None] = 'http://localhost:7545'
        self._blockchain_default_account: Union[int, str, None] = 0

        self._sale_blocks_per_phase: int = 10
        self._sale_hard_cap_ether: int = 100000

        self._solc_version: str = 'v0.8.19'
        self._solc_evm_version: str = 'paris'
        self._solc_evm_version_values = ['london', 'paris', 'shanghai', 'cancun']
        self._opt_solc_optimizer_runs: int = 200

        self._log_dir: str = self._appdirs.user_log_dir
        self._verbosity: int = 1

    @property
    def blockchain_backend(self) -> str:
        """
        Backend to use when interacting with the blockchain.

        Running unit tests is only supported with w3-eth-tester and w3-ganache at the moment (because they need pre-funded dummy accounts).
        See https://web3py.readthedocs.io/en/stable/providers.html for more information.

        Available Options: [w3-eth-tester, w3-ganache, w3-ipc, w3-http, w3-custom]
        """
        return self._blockchain_backend

    @blockchain_backend.setter
    def blockchain_backend(self, val: str):
        _check_is_one_of(val, self._blockchain_backend_values)
        self._blockchain_backend = val

    @property
    def blockchain_node_uri(self) -> Union[Any, str, None]:
        """
        Backend specific location of the ethereum node

        w3-eth-tester : unused
        w3-ganache    : url
        w3-ipc        : path to ipc socket file
        w3-http       : url
        w3-custom     : web3 instance, must be set in code
        """
        return self._blockchain_node_uri

    @blockchain_node_uri.setter
    def blockchain_node_uri(self, val: Union[Any, str, None]):
        self._blockchain_node_uri = val

    @property
    def blockchain_default_account(self) -> Union[int, str, None]:
        """
        Address of the wallet which should be made available under the name 'me' in the command line interface.

        If None -> must always specify a sender, empty blockchain_default_account is not allowed
        If int -> uses eth.accounts[int]
        If str -> use the given address
        """
        return self._blockchain_default_account

    @blockchain_default_account.setter
    def blockchain_default_account(self, val: Union[int, str, None]):
        if val is not None:
            _type_check(val, (int, str))
        self._blockchain_default_account = val

    @property
    def sale_blocks_per_phase(self) -> int:
        """
        Number of blocks in each bonus phase of a newly deployed token sale.

        The bonus percentage drops after every phase, a purchase in the first phase receives 6000 HPB per ether.
        """
        return self._sale_blocks_per_phase

    @sale_blocks_per_phase.setter
    def sale_blocks_per_phase(self, val: int):
        _type_check(val, int)
        if val < 1:
            raise ValueError('Phase length must be at least one block')
        self._sale_blocks_per_phase = val

    @property
    def sale_hard_cap_ether(self) -> int:
        """Amount of ether (in whole ether) after which a newly deployed token sale ends."""
        return self._sale_hard_cap_ether

    @sale_hard_cap_ether.setter
    def sale_hard_cap_ether(self, val: int):
        _type_check(val, int)
        if val < 1:
            raise ValueError('Hard cap must be positive')
        self._sale_hard_cap_ether = val

    @property
    def solc_version(self) -> str:
        """
        Version of the solidity compiler used for the token contract.

        Missing compiler versions are installed automatically on first use.
        """
        return self._solc_version

    @solc_version.setter
    def solc_version(self, val: str):
        _type_check(val, str)
        self._solc_version = val

    @property
    def solc_evm_version(self) -> str:
        """
        Target evm version passed to solc.

        Available Options: [london, paris, shanghai, cancun]
        """
        return self._solc_evm_version

    @solc_evm_version.setter
    def solc_evm_version(self, val: str):
        _check_is_one_of(val, self._solc_evm_version_values)
        self._solc_evm_version = val

    @property
    def opt_solc_optimizer_runs(self) -> int:
        """SOLC: optimizer runs (negative values disable the optimizer)"""
        return self._opt_solc_optimizer_runs

    @opt_solc_optimizer_runs.setter
    def opt_solc_optimizer_runs(self, val: int):
        _type_check(val, int)
        self._opt_solc_optimizer_runs = val

    @property
    def log_dir(self) -> str:
        """Path to default log directory."""
        return self._log_dir

    @log_dir.setter
    def log_dir(self, val: str):
        _type_check(val, str)
        self._log_dir = val

    @property
    def verbosity(self) -> int:
        """If 0, no output, if 1 normal output, if 2 debug output."""
        return self._verbosity

    @verbosity.setter
    def verbosity(self, val: int):
        self._verbosity = val

"""
This module defines the Runtime API, an abstraction layer which is used by the token client and the scenario runner.

It provides high level functions for blockchain interaction (deployment, connection to deployed contracts,
calls, transaction issuing, value transfers and event log decoding).
"""

from abc import ABCMeta, abstractmethod
from typing import Tuple, List, Optional, Union, Any

from hpbtoken.config import hpb_print, hpb_print_banner
from hpbtoken.transaction.types import AddressValue, Value, TxResult, EventLog


class IntegrityError(Exception):
    """Exception which is raised when the contract deployed at an address does not match the local contract file."""
    pass


class BlockChainError(Exception):
    """
    Exception which is raised when a blockchain interaction fails for any reason.
    """
    pass


class TransactionFailedException(BlockChainError):
    """Exception which is raised when a transaction fails."""
    pass


class HpbBlockchainInterface(metaclass=ABCMeta):
    """
    API to interact with the blockchain.

    Contract handles returned by :py:meth:`deploy` and :py:meth:`connect` are backend specific and should be treated
    as opaque values, they are only ever passed back into the methods of the same backend.

    Before a handle to an existing contract is returned, the runtime bytecode stored at the contract address is compared
    to the output obtained via local compilation of the corresponding source file.
    """

    # PUBLIC API

    @property
    def default_address(self) -> Optional[AddressValue]:
        """Return wallet address to use as from address when no address is explicitly specified."""
        addr = self._default_address()
        return None if addr is None else AddressValue(addr)

    def create_test_accounts(self, count: int) -> Tuple:
        """
        Return addresses of pre-funded accounts (only implemented for w3-eth-tester and w3-ganache, for debugging).

        :param count: how many accounts
        :raise NotImplementedError: if the backend does not support dummy accounts
        :raise ValueError: if not enough unused pre-funded accounts are available
        :return: tuple with count account addresses
        """
        # may not be supported by all backends
        raise NotImplementedError('Current blockchain backend does not support creating pre-funded test accounts.')

    def mine_blocks(self, count: int = 1):
        """
        Advance the chain by count empty blocks (only implemented for w3-eth-tester and w3-ganache, for debugging).

        :raise NotImplementedError: if the backend cannot mine on demand
        """
        raise NotImplementedError('Current blockchain backend does not support mining blocks on demand.')

    def contract_address(self, contract_handle) -> AddressValue:
        """Return the address of the contract behind contract_handle."""
        return self._contract_address(contract_handle)

    @property
    def block_number(self) -> int:
        """Number of the latest mined block."""
        return self._block_number()

    def get_balance(self, address: AddressValue) -> int:
        """Return the balance of the wallet with the designated address (in wei)."""
        return self._get_balance(AddressValue(address))

    def call(self, contract_handle, sender: Optional[AddressValue], name: str, *args) -> Union[bool, int, str, bytes, List]:
        """
        Call the specified pure/view function in the given contract with the provided arguments.

        :param contract_handle: the contract in which the function resides
        :param sender: sender address (None -> node default)
        :param name: name of the function to call
        :param args: argument values
        :raise BlockChainError: if request fails
        :return: function return value (single value if one return value, list if multiple return values)
        """
        assert contract_handle is not None
        hpb_print(f'Calling contract function {name}{Value.collection_to_string(args)}', verbosity_level=2)
        val = self._call(contract_handle, sender, name, *args)
        hpb_print(f'Got return value {val}', verbosity_level=2)
        return val

    def transact(self, contract_handle, sender: AddressValue, function: str, actual_args: List, wei_amount: Optional[int] = None) -> TxResult:
        """
        Issue a transaction for the specified function in the given contract with the provided arguments

        **WARNING: THIS ISSUES A CRYPTO CURRENCY TRANSACTION (GAS COST)**

        :param contract_handle: the contract in which the function resides
        :param sender: sender address, its eth private key must be hosted in the eth node to which the backend connects.
        :param function: name of the function
        :param actual_args: the function argument values
        :param wei_amount: how much money to send along with the transaction (only for payable functions)
        :raise BlockChainError: if there is an error in the backend
        :raise TransactionFailedException: if the transaction failed
        :return: the transaction outcome including all events emitted by contract_handle
        """
        assert contract_handle is not None
        hpb_print(f'Issuing transaction for function "{function}" from account "{sender}"')
        hpb_print(Value.collection_to_string(actual_args), verbosity_level=2)
        receipt = self._transact(contract_handle, AddressValue(sender), function, *actual_args, wei_amount=wei_amount)
        return self._tx_result(contract_handle, receipt)

    def send_value(self, contract_handle, sender: AddressValue, wei_amount: int) -> TxResult:
        """
        Transfer ether to a contract without calling a particular function (triggers its receive function).

        **WARNING: THIS ISSUES A CRYPTO CURRENCY TRANSACTION (GAS COST)**

        :param contract_handle: receiving contract, its abi is used to decode the emitted events
        :param sender: sender address, its eth private key must be hosted in the eth node to which the backend connects.
        :param wei_amount: amount to transfer in wei
        :raise BlockChainError: if there is an error in the backend
        :raise TransactionFailedException: if the transaction failed
        :return: the transaction outcome including all events emitted by contract_handle
        """
        assert contract_handle is not None
        hpb_print(f'Sending {wei_amount} wei from account "{sender}" to contract')
        receipt = self._send_value(AddressValue(sender), self._contract_address(contract_handle), wei_amount)
        return self._tx_result(contract_handle, receipt)

    def transfer(self, sender: AddressValue, receiver: AddressValue, wei_amount: int) -> TxResult:
        """
        Transfer ether between two accounts.

        **WARNING: THIS ISSUES A CRYPTO CURRENCY TRANSACTION (GAS COST)**

        :raise BlockChainError: if there is an error in the backend
        :raise TransactionFailedException: if the transaction failed
        :return: the transaction outcome (without events)
        """
        hpb_print(f'Sending {wei_amount} wei from account "{sender}" to "{receiver}"')
        receipt = self._send_value(AddressValue(sender), AddressValue(receiver), wei_amount)
        return self._tx_result(None, receipt)

    def deploy(self, sol_filename: str, contract: str, sender: AddressValue, actual_args: List, wei_amount: Optional[int] = None) -> Any:
        """
        Issue a deployment transaction which constructs the specified contract with the provided constructor arguments on the chain.

        **WARNING: THIS ISSUES A CRYPTO CURRENCY TRANSACTION (GAS COST)**

        :param sol_filename: solidity file which contains the contract
        :param sender: creator address, its eth private key must be hosted in the eth node to which the backend connects.
        :param contract: name of the contract to instantiate
        :param actual_args: the constructor argument values
        :param wei_amount: how much money to send along with the constructor transaction (only for payable constructors)
        :raise BlockChainError: if there is an error in the backend
        :raise TransactionFailedException: if the deployment transaction failed
        :return: handle for the newly created contract
        """
        hpb_print_banner(f'Deploy {contract}')
        hpb_print(f'Deploying contract {contract}{Value.collection_to_string(actual_args)}')
        handle = self._deploy(sol_filename, contract, AddressValue(sender), *actual_args, wei_amount=wei_amount)
        hpb_print(f'Deployed contract "{contract}" at address "{self._contract_address(handle)}"')
        hpb_print()
        return handle

    def connect(self, sol_filename: str, contract: str, contract_address: AddressValue) -> Any:
        """
        Create a handle which can be used to interact with an existing contract on the chain after verifying its integrity.

        :param sol_filename: solidity file which contains the contract
        :param contract: name of the contract
        :param contract_address: address of the deployed contract
        :raise IntegrityError: if the integrity check fails (mismatch between local code and remote contract)
        :raise BlockChainError: if there is an error in the backend
        :return: contract handle for the specified contract
        """
        hpb_print_banner(f'Connect to {contract}@{contract_address}')
        handle = self._verify_contract_integrity(AddressValue(contract_address), sol_filename, contract)
        hpb_print(f'OK: Bytecode at {contract_address} matches {contract}')
        return handle

    @classmethod
    def is_debug_backend(cls) -> bool:
        return False

    # INTERNAL FUNCTIONALITY

    def _tx_result(self, contract_handle, receipt) -> TxResult:
        events = [] if contract_handle is None else self._decode_events(contract_handle, receipt)
        result = self._make_tx_result(receipt, events)
        if events:
            hpb_print(f'Emitted events: {", ".join(map(str, result.events))}', verbosity_level=2)
        return result

    @abstractmethod
    def _make_tx_result(self, receipt, events: List[EventLog]) -> TxResult:
        pass

    @abstractmethod
    def _decode_events(self, contract_handle, receipt) -> List[EventLog]:
        """Decode all logs in receipt which were emitted by contract_handle."""
        pass

    @abstractmethod
    def _contract_address(self, contract_handle) -> AddressValue:
        pass

    @abstractmethod
    def _verify_contract_integrity(self, address: AddressValue, sol_filename: str, contract_name: str) -> Any:
        """
        Check if the bytecode of the contract at address matches the bytecode obtained by locally compiling sol_filename.

        :param address: address of the remote contract
        :param sol_filename: path to the local contract code file
        :param contract_name: contract name
        :raise IntegrityError: if there is a mismatch
        :return: a contract handle for the remote contract
        """
        pass

    @abstractmethod
    def _default_address(self) -> Union[None, bytes, str]:
        pass

    @abstractmethod
    def _block_number(self) -> int:
        pass

    @abstractmethod
    def _get_balance(self, address: AddressValue) -> int:
        pass

    @abstractmethod
    def _call(self, contract_handle, sender: Optional[AddressValue], name: str, *args) -> Union[bool, int, str, bytes, List]:
        pass

    @abstractmethod
    def _transact(self, contract_handle, sender: AddressValue, function: str, *actual_args, wei_amount: Optional[int] = None) -> Any:
        pass

    @abstractmethod
    def _send_value(self, sender: AddressValue, receiver: AddressValue, wei_amount: int) -> Any:
        pass

    @abstractmethod
    def _deploy(self, sol_filename: str, contract: str, sender: AddressValue, *actual_args, wei_amount: Optional[int] = None) -> Any:
        pass

from abc import abstractmethod
from typing import Any, Optional, Tuple, List, Union, Callable

from eth_tester import PyEVMBackend, EthereumTester
from web3 import Web3, EthereumTesterProvider, HTTPProvider, IPCProvider
from web3.logs import DISCARD

from hpbtoken import my_logging
from hpbtoken.compiler.solidity.compiler import compile_contract
from hpbtoken.config import cfg, hpb_print
from hpbtoken.my_logging.log_context import log_context
from hpbtoken.transaction.interface import HpbBlockchainInterface, IntegrityError, BlockChainError, \
    TransactionFailedException
from hpbtoken.transaction.types import AddressValue, Value, EventLog, TxResult
from hpbtoken.utils.helpers import normalized_hex
from hpbtoken.utils.timer import time_measure

max_gas_limit = 6000000


class Web3Blockchain(HpbBlockchainInterface):
    def __init__(self) -> None:
        super().__init__()
        self.w3 = self._create_w3_instance()
        if not self.w3.is_connected():
            raise BlockChainError(f'Failed to connect to blockchain: {self.w3.provider}')

    @abstractmethod
    def _create_w3_instance(self) -> Web3:
        pass

    @staticmethod
    def _w3_address(address: AddressValue) -> str:
        return Web3.to_checksum_address(address.val)

    def _w3_args(self, args) -> List:
        return [self._w3_address(a) if isinstance(a, AddressValue) else Value.unwrap_values(a) for a in args]

    def _default_address(self) -> Union[None, bytes, str]:
        account = cfg.blockchain_default_account
        if account is None:
            return None
        if isinstance(account, str) and account.isdigit():
            account = int(account)
        if isinstance(account, int):
            accounts = self.w3.eth.accounts
            if not 0 <= account < len(accounts):
                raise BlockChainError(f'No account with index {account} (node hosts {len(accounts)} accounts)')
            return accounts[account]
        else:
            return account

    def _block_number(self) -> int:
        return self.w3.eth.block_number

    def _get_balance(self, address: AddressValue) -> int:
        return self.w3.eth.get_balance(self._w3_address(address))

    def _contract_address(self, contract_handle) -> AddressValue:
        return AddressValue(contract_handle.address)

    def _call(self, contract_handle, sender: Optional[AddressValue], name: str, *args) -> Union[bool, int, str, bytes, List]:
        try:
            fct = contract_handle.functions[name]
            tx = {} if sender is None else {'from': self._w3_address(sender)}
            return fct(*self._w3_args(args)).call(tx)
        except Exception as e:
            raise BlockChainError(f'Call to "{name}" failed: {e}') from e

    def _transact(self, contract_handle, sender: AddressValue, function: str, *actual_params, wei_amount: Optional[int] = None) -> Any:
        from_addr = self._w3_address(sender)
        try:
            fct = contract_handle.constructor if function == 'constructor' else contract_handle.functions[function]
            args = self._w3_args(actual_params)
            estimate_tx = {'from': from_addr}
            if wei_amount:
                estimate_tx['value'] = wei_amount
            tx = dict(estimate_tx, gas=self._gas_heuristic(lambda limit: fct(*args).estimate_gas(dict(estimate_tx, gas=limit))))
            with time_measure('transaction_full'):
                tx_hash = fct(*args).transact(tx)
                tx_receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash)
        except Exception as e:
            raise BlockChainError(f'Transaction "{function}" failed: {e}') from e
        return self._check_receipt(tx_receipt)

    def _send_value(self, sender: AddressValue, receiver: AddressValue, wei_amount: int) -> Any:
        tx = {'from': self._w3_address(sender), 'to': self._w3_address(receiver), 'value': wei_amount}
        try:
            tx['gas'] = self._gas_heuristic(lambda limit: self.w3.eth.estimate_gas(dict(tx, gas=limit)))
            with time_measure('transaction_full'):
                tx_hash = self.w3.eth.send_transaction(tx)
                tx_receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash)
        except Exception as e:
            raise BlockChainError(f'Value transfer failed: {e}') from e
        return self._check_receipt(tx_receipt)

    def _check_receipt(self, tx_receipt):
        if tx_receipt['status'] == 0:
            raise TransactionFailedException("Transaction failed")
        gas = tx_receipt['gasUsed']
        hpb_print(f"Consumed gas: {gas}")
        my_logging.data('gas', gas)
        return tx_receipt

    def _deploy(self, sol_filename: str, contract: str, sender: AddressValue, *actual_args, wei_amount: Optional[int] = None) -> Any:
        cout = compile_contract(sol_filename, contract)
        contract_factory = self.w3.eth.contract(abi=cout['abi'], bytecode=cout['bin'])
        with log_context('constructor'):
            with log_context(f'{contract}'):
                tx_receipt = self._transact(contract_factory, sender, 'constructor', *actual_args, wei_amount=wei_amount)
        return self.w3.eth.contract(address=tx_receipt['contractAddress'], abi=cout['abi'])

    def _verify_contract_integrity(self, address: AddressValue, sol_filename: str, contract_name: str) -> Any:
        w3_address = self._w3_address(address)
        try:
            actual_byte_code = normalized_hex(self.w3.eth.get_code(w3_address))
        except Exception as e:
            raise BlockChainError(f'Failed to retrieve code at {w3_address}: {e}') from e
        if not actual_byte_code:
            raise IntegrityError(f'Expected contract {contract_name} is not deployed at address {w3_address}')

        cout = compile_contract(sol_filename, contract_name)
        expected_byte_code = normalized_hex(cout['deployed_bin'])
        if actual_byte_code != expected_byte_code:
            raise IntegrityError(f'Deployed contract at address {w3_address} does not match local contract {sol_filename}')

        return self.w3.eth.contract(address=w3_address, abi=cout['abi'])

    def _decode_events(self, contract_handle, receipt) -> List[EventLog]:
        contract_address = self._contract_address(contract_handle)
        events = []
        for abi_entry in contract_handle.abi:
            if abi_entry.get('type') != 'event':
                continue
            event = contract_handle.events[abi_entry['name']]()
            for log in event.process_receipt(receipt, errors=DISCARD):
                log_address = AddressValue(log['address'])
                if log_address != contract_address:
                    continue
                events.append(EventLog(log['event'], log['args'], log['logIndex'], log_address))
        return events

    def _make_tx_result(self, receipt, events: List[EventLog]) -> TxResult:
        return TxResult(bytes(receipt['transactionHash']), receipt['blockNumber'], receipt['gasUsed'], receipt['status'], events)

    def _gas_heuristic(self, estimate: Callable[[int], int]) -> int:
        limit = self.w3.eth.get_block('latest')['gasLimit']
        return min(int(estimate(limit) * 1.2), limit)


class Web3TesterBlockchain(Web3Blockchain):
    def __init__(self) -> None:
        self.eth_tester = None
        super().__init__()
        self.next_acc_idx = 1

    @classmethod
    def is_debug_backend(cls) -> bool:
        return True

    def _create_w3_instance(self) -> Web3:
        self.eth_tester = EthereumTester(backend=PyEVMBackend())
        w3 = Web3(EthereumTesterProvider(self.eth_tester))
        return w3

    def create_test_accounts(self, count: int) -> Tuple:
        accounts = self.w3.eth.accounts
        if len(accounts[self.next_acc_idx:]) < count:
            raise ValueError(f'Can have at most {len(accounts)-1} dummy accounts in total')
        dummy_accounts = tuple(AddressValue(acc) for acc in accounts[self.next_acc_idx:self.next_acc_idx + count])
        self.next_acc_idx += count
        return dummy_accounts

    def mine_blocks(self, count: int = 1):
        self.eth_tester.mine_blocks(count)

    def _gas_heuristic(self, estimate: Callable[[int], int]) -> int:
        return min(max_gas_limit, self.w3.eth.get_block('latest')['gasLimit'])


class Web3HttpBlockchain(Web3Blockchain):
    def _create_w3_instance(self) -> Web3:
        assert cfg.blockchain_node_uri is None or isinstance(cfg.blockchain_node_uri, str)
        return Web3(HTTPProvider(cfg.blockchain_node_uri))


class Web3IpcBlockchain(Web3Blockchain):
    def _create_w3_instance(self) -> Web3:
        assert cfg.blockchain_node_uri is None or isinstance(cfg.blockchain_node_uri, str)
        return Web3(IPCProvider(cfg.blockchain_node_uri))


class Web3HttpGanacheBlockchain(Web3HttpBlockchain):
    def __init__(self) -> None:
        super().__init__()
        self.next_acc_idx = 1

    @classmethod
    def is_debug_backend(cls) -> bool:
        return True

    def create_test_accounts(self, count: int) -> Tuple:
        accounts = self.w3.eth.accounts
        if len(accounts[self.next_acc_idx:]) < count:
            raise ValueError(f'Can have at most {len(accounts)-1} dummy accounts in total')
        dummy_accounts = tuple(AddressValue(acc) for acc in accounts[self.next_acc_idx:self.next_acc_idx + count])
        self.next_acc_idx += count
        return dummy_accounts

    def mine_blocks(self, count: int = 1):
        for _ in range(count):
            response = self.w3.provider.make_request('evm_mine', [])
            if 'error' in response:
                raise BlockChainError(f'evm_mine failed: {response["error"]}')

    def _gas_heuristic(self, estimate: Callable[[int], int]) -> int:
        return self.w3.eth.get_block('latest')['gasLimit']


class Web3CustomBlockchain(Web3Blockchain):
    def _create_w3_instance(self) -> Web3:
        assert isinstance(cfg.blockchain_node_uri, Web3)
        return cfg.blockchain_node_uri

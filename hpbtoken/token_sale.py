"""
Client for the HPB token sale contract.

An :py:class:`HPBToken` instance wraps a contract handle obtained from the runtime backend and exposes the token
and sale functionality with python names. State-changing operations return a :py:class:`TxResult`, which lists the
events the contract emitted (e.g. ``SaleStarted``, ``InvalidCaller`` or ``InvalidState``).
"""
from decimal import Decimal
from typing import Optional, Union, Dict, Any

from web3 import Web3

from hpbtoken.config import cfg
from hpbtoken.contracts import token_contract_file, token_contract_name
from hpbtoken.my_logging.log_context import log_context
from hpbtoken.transaction.interface import HpbBlockchainInterface
from hpbtoken.transaction.runtime import Runtime
from hpbtoken.transaction.types import AddressValue, TxResult

SALE_STARTED = 'SaleStarted'
SALE_ENDED = 'SaleEnded'
INVALID_CALLER = 'InvalidCaller'
INVALID_STATE = 'InvalidState'
ISSUE_TOKEN = 'IssueToken'
TRANSFER = 'Transfer'
APPROVAL = 'Approval'


def to_wei(amount: Union[int, float, str, Decimal], unit: str = 'ether') -> int:
    return Web3.to_wei(amount, unit)


def from_wei(amount: int, unit: str = 'ether') -> Union[int, Decimal]:
    return Web3.from_wei(amount, unit)


class HPBToken:
    def __init__(self, handle, blockchain: Optional[HpbBlockchainInterface] = None):
        self.handle = handle
        self.api = Runtime.blockchain() if blockchain is None else blockchain

    @classmethod
    def deploy(cls, owner: AddressValue, *, target: Optional[AddressValue] = None,
               blocks_per_phase: Optional[int] = None, hard_cap: Optional[int] = None) -> 'HPBToken':
        """
        Deploy a new token sale contract.

        :param owner: account which pays for the deployment
        :param target: sale owner and receiver of the proceeds (default: owner)
        :param blocks_per_phase: length of a bonus phase in blocks (default: cfg.sale_blocks_per_phase)
        :param hard_cap: amount of wei after which the sale ends (default: cfg.sale_hard_cap_ether)
        :return: client for the new contract
        """
        target = owner if target is None else target
        blocks_per_phase = cfg.sale_blocks_per_phase if blocks_per_phase is None else blocks_per_phase
        hard_cap = to_wei(cfg.sale_hard_cap_ether) if hard_cap is None else hard_cap

        api = Runtime.blockchain()
        handle = api.deploy(token_contract_file, token_contract_name, AddressValue(owner),
                            [AddressValue(target), blocks_per_phase, hard_cap])
        return cls(handle, api)

    @classmethod
    def connect(cls, address: Union[AddressValue, str]) -> 'HPBToken':
        """Resolve an already deployed token sale contract (its bytecode must match the local contract)."""
        api = Runtime.blockchain()
        handle = api.connect(token_contract_file, token_contract_name, AddressValue(address))
        return cls(handle, api)

    @property
    def address(self) -> AddressValue:
        return self.api.contract_address(self.handle)

    def _call(self, name: str, *args, sender: Optional[AddressValue] = None):
        return self.api.call(self.handle, sender, name, *args)

    def transact(self, sender: AddressValue, function: str, *args, wei_amount: Optional[int] = None) -> TxResult:
        """Issue a transaction for an arbitrary contract function."""
        with log_context(function):
            return self.api.transact(self.handle, AddressValue(sender), function, list(args), wei_amount=wei_amount)

    # Sale

    def target(self) -> AddressValue:
        return AddressValue(self._call('target'))

    def start(self, sale_duration: int, sender: AddressValue) -> TxResult:
        """
        Start the sale for sale_duration blocks.

        Emits SaleStarted on success. When sender is not the owner the contract emits InvalidCaller instead,
        when the sale already started it emits InvalidState. Neither case reverts.
        """
        return self.transact(sender, 'start', sale_duration)

    def buy(self, sender: AddressValue, wei_amount: int) -> TxResult:
        """Purchase tokens by sending wei_amount straight to the contract address."""
        with log_context('buy'):
            return self.api.send_value(self.handle, AddressValue(sender), wei_amount)

    def issue_token(self, sender: AddressValue, recipient: AddressValue, wei_amount: int) -> TxResult:
        """Purchase tokens paid by sender and credited to recipient."""
        return self.transact(sender, 'issueToken', AddressValue(recipient), wei_amount=wei_amount)

    def close(self, sender: AddressValue) -> TxResult:
        return self.transact(sender, 'close')

    def sale_started(self) -> bool:
        return self._call('saleStarted')

    def sale_ended(self) -> bool:
        return self._call('saleEnded')

    def sale_in_progress(self) -> bool:
        return self._call('saleInProgress')

    def sale_closed(self) -> bool:
        return self._call('saleClosed')

    def compute_token_amount(self, wei_amount: int) -> int:
        return self._call('computeTokenAmount', wei_amount)

    def total_eth_received(self) -> int:
        return self._call('totalEthReceived')

    def sale_info(self) -> Dict[str, Any]:
        return {
            'target': str(self.target()),
            'first_block': self._call('firstblock'),
            'last_block': self._call('lastblock'),
            'blocks_per_phase': self._call('blocksPerPhase'),
            'hard_cap': self._call('hardCap'),
            'total_eth_received': self.total_eth_received(),
            'started': self.sale_started(),
            'ended': self.sale_ended(),
            'closed': self.sale_closed(),
        }

    # ERC20

    def token_info(self) -> Dict[str, Any]:
        return {
            'name': self._call('name'),
            'symbol': self._call('symbol'),
            'decimals': self._call('decimals'),
            'total_supply': self.total_supply(),
        }

    def total_supply(self) -> int:
        return self._call('totalSupply')

    def balance_of(self, holder: AddressValue) -> int:
        return self._call('balanceOf', AddressValue(holder))

    def allowance(self, holder: AddressValue, spender: AddressValue) -> int:
        return self._call('allowance', AddressValue(holder), AddressValue(spender))

    def transfer(self, sender: AddressValue, receiver: AddressValue, amount: int) -> TxResult:
        return self.transact(sender, 'transfer', AddressValue(receiver), amount)

    def approve(self, sender: AddressValue, spender: AddressValue, amount: int) -> TxResult:
        return self.transact(sender, 'approve', AddressValue(spender), amount)

    def transfer_from(self, sender: AddressValue, holder: AddressValue, receiver: AddressValue, amount: int) -> TxResult:
        return self.transact(sender, 'transferFrom', AddressValue(holder), AddressValue(receiver), amount)

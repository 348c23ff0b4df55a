from typing import Optional, Collection, Any, Dict, List, Union, Callable

from web3 import Web3


class Value(tuple):
    def __new__(cls, contents: Collection):
        return super(Value, cls).__new__(cls, contents)

    def __str__(self):
        return f'{type(self).__name__}({super().__str__()})'

    def __eq__(self, other):
        return isinstance(other, type(self)) and super().__eq__(other)

    def __hash__(self):
        return self[:].__hash__()

    @staticmethod
    def unwrap_values(v: Union[int, bool, 'Value', List, Dict]) -> Union[int, List, Dict]:
        if isinstance(v, List):
            return list(map(Value.unwrap_values, v))
        elif isinstance(v, AddressValue):
            return v.val
        elif isinstance(v, Dict):
            return {key: Value.unwrap_values(vals) for key, vals in v.items()}
        else:
            return list(v[:]) if isinstance(v, Value) else v

    @staticmethod
    def collection_to_string(v: Union[int, bool, 'Value', Dict, List, tuple]) -> str:
        if isinstance(v, List):
            return f"[{', '.join(map(Value.collection_to_string, v))}]"
        elif isinstance(v, tuple) and not isinstance(v, Value):
            return f"({', '.join(map(Value.collection_to_string, v))})"
        elif isinstance(v, Dict):
            return f"{{{', '.join([f'{key}: {Value.collection_to_string(val)}' for key, val in v.items()])}}}"
        else:
            return str(v)


class AddressValue(Value):
    get_balance: Optional[Callable[['AddressValue'], int]] = None

    def __new__(cls, val: Union[str, int, bytes, 'AddressValue']):
        """
        :param val: 20 raw bytes, an integer below 2^160 or a hex address string (40 digits, optional 0x prefix,
                    mixed case must carry a valid checksum)
        :raise ValueError: if val does not denote an address
        """
        if isinstance(val, AddressValue):
            val = val.val
        if not isinstance(val, bytes):
            if isinstance(val, str):
                if not Web3.is_address(val):
                    raise ValueError(f'Invalid address "{val}"')
                val = int(val, 16)
            if not 0 <= val < 2 ** 160:
                raise ValueError(f'Address {val} out of range')
            val = val.to_bytes(20, byteorder='big')
        elif len(val) != 20:
            raise ValueError(f'Address must be 20 bytes long, got {len(val)}')
        return super(AddressValue, cls).__new__(cls, [val])

    def __str__(self):
        return f'0x{self.val.hex()}'

    @property
    def val(self) -> bytes:
        return self[0]

    @property
    def balance(self) -> int:
        """Ether balance in wei (requires an active runtime backend)."""
        if AddressValue.get_balance is None:
            raise RuntimeError('No blockchain backend available')
        return AddressValue.get_balance(self)


class EventLog:
    """A single decoded event emitted during a transaction."""

    def __init__(self, name: str, args: Dict[str, Any], log_index: int, address: AddressValue):
        self.__name = name
        self.__args = dict(args)
        self.__log_index = log_index
        self.__address = address

    @property
    def name(self) -> str:
        return self.__name

    @property
    def args(self) -> Dict[str, Any]:
        return self.__args

    @property
    def log_index(self) -> int:
        return self.__log_index

    @property
    def address(self) -> AddressValue:
        return self.__address

    def __getitem__(self, arg_name: str) -> Any:
        return self.__args[arg_name]

    def __str__(self):
        return f'{self.name}{Value.collection_to_string(self.args)}'

    def __repr__(self):
        return f'EventLog({self})'


class TxResult:
    """
    Outcome of a mined transaction.

    Holds the receipt essentials and all events emitted by the contract the transaction was
    addressed to, in log order.
    """

    def __init__(self, tx_hash: bytes, block_number: int, gas_used: int, status: int, events: List[EventLog]):
        self.__tx_hash = tx_hash
        self.__block_number = block_number
        self.__gas_used = gas_used
        self.__status = status
        self.__events = sorted(events, key=lambda e: e.log_index)

    @property
    def tx_hash(self) -> bytes:
        return self.__tx_hash

    @property
    def block_number(self) -> int:
        return self.__block_number

    @property
    def gas_used(self) -> int:
        return self.__gas_used

    @property
    def status(self) -> int:
        return self.__status

    @property
    def events(self) -> List[EventLog]:
        return list(self.__events)

    @property
    def event_names(self) -> List[str]:
        return [e.name for e in self.__events]

    def events_named(self, name: str) -> List[EventLog]:
        return [e for e in self.__events if e.name == name]

    def find_event(self, name: str) -> Optional[EventLog]:
        """Return the first event with the given name, None if the transaction did not emit one."""
        for event in self.__events:
            if event.name == name:
                return event
        return None

    def has_event(self, name: str) -> bool:
        return self.find_event(name) is not None

    def __str__(self):
        return f'TxResult(block={self.block_number}, gas={self.gas_used}, events=[{", ".join(map(str, self.__events))}])'

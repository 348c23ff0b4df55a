from hpbtoken.config import cfg
from hpbtoken.transaction.interface import HpbBlockchainInterface
from hpbtoken.transaction.blockchain import *

_blockchain_classes = {
    'w3-eth-tester': Web3TesterBlockchain,
    'w3-ganache': Web3HttpGanacheBlockchain,
    'w3-ipc': Web3IpcBlockchain,
    'w3-http': Web3HttpBlockchain,
    'w3-custom': Web3CustomBlockchain
}


class Runtime:
    """
    Provides global access to the singleton runtime API backend instance.
    See interface.py for more information.

    The global configuration in config.py determines which backend is made available via the Runtime class.
    """

    __blockchain = None

    @staticmethod
    def reset():
        """
        Reboot the runtime.

        When a new backend is selected in the configuration, it will only be loaded after a runtime reset.
        For the w3-eth-tester backend this also discards the whole in-memory chain.
        """
        Runtime.__blockchain = None
        from hpbtoken.transaction.types import AddressValue
        AddressValue.get_balance = None

    @staticmethod
    def blockchain() -> HpbBlockchainInterface:
        """Return singleton object which implements HpbBlockchainInterface."""
        if Runtime.__blockchain is None:
            Runtime.__blockchain = _blockchain_classes[cfg.blockchain_backend]()
            from hpbtoken.transaction.types import AddressValue
            AddressValue.get_balance = Runtime.__blockchain.get_balance
        return Runtime.__blockchain

"""Chain height lookups against an Ethereum node through web3."""
import logging
from typing import Any
from urllib.parse import urlparse

from web3 import Web3

LOG = logging.getLogger()

IPC_PREFIX = 'file://'


def make_provider(interface: str) -> Any:
    """
    Creates the web3 provider matching an interface.

    IPC paths are recognized the same way as by the nonce gatherer: by their
    '.ipc' suffix, with or without a 'file://' prefix.

    Args:
        interface: HTTP(S) or WS(S) URI, or path to a Geth IPC socket.

    Returns:
        web3 provider.

    Raises:
        ValueError: If the interface scheme is not supported.
    """
    if interface[-4:] == '.ipc':
        if interface.startswith(IPC_PREFIX):
            interface = interface[len(IPC_PREFIX):]
        return Web3.IPCProvider(interface)

    scheme = urlparse(interface).scheme
    if scheme in ('http', 'https'):
        return Web3.HTTPProvider(interface)
    if scheme in ('ws', 'wss'):
        return Web3.WebsocketProvider(interface)
    raise ValueError('Unsupported interface: {}'.format(interface))


class BlockchainWrapper:
    """Reads the chain height, optionally lowered by a number of confirmations."""

    def __init__(self, interface: str,
                 finality_threshold: int = 12) -> None:
        """
        Initialization.

        Args:
            interface: HTTP(S) or WS(S) URI, or path to a Geth IPC socket.
            finality_threshold: How many confirmations a block has to have.
        """
        self._finality_threshold = finality_threshold
        self._web3 = Web3(make_provider(interface))

    def get_height(self) -> int:
        """
        Get current height of the blockchain.

        Returns:
            Current blockchain height.
        """
        return self._web3.eth.block_number

    def get_confirmed_height(self) -> int:
        """
        Get height of the newest block with enough confirmations.

        Returns:
            Blockchain height lowered by the finality threshold.
        """
        height = self.get_height()
        LOG.info('Blockchain height is {}.'.format(height))
        return max(height - self._finality_threshold, 0)

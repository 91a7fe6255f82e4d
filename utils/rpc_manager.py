"""
RPC Manager
Run-scoped connection to the target network
"""

from typing import Dict, Optional
from web3 import Web3
from loguru import logger

from blockchain.exceptions import NetworkUnavailable


class NetworkProvider:
    """
    Owns the Web3 connection for one deployment run

    Constructed explicitly and passed by reference; nothing here is shared
    between runs, so several networks can be deployed to side by side.
    """

    def __init__(self, network_config: Dict, w3: Optional[Web3] = None, request_timeout: int = 30):
        """
        Initialize Network Provider

        Args:
            network_config: Resolved network section (see utils.config.resolve_network)
            w3: Pre-built Web3 instance (a new HTTP connection is created when None)
            request_timeout: HTTP request timeout in seconds
        """
        self.network_config = network_config
        self.name = network_config.get('name', network_config.get('key'))
        self.rpc_url = network_config.get('rpc_url')
        self.expected_chain_id = network_config.get('chain_id')
        self.currency_symbol = network_config.get('currency_symbol', 'ETH')

        if w3 is None:
            w3 = Web3(Web3.HTTPProvider(self.rpc_url, request_kwargs={'timeout': request_timeout}))

        self.w3 = w3
        self.chain_id: Optional[int] = None

    def connect(self) -> Web3:
        """
        Check the endpoint and its chain id

        Returns:
            Connected Web3 instance

        Raises:
            NetworkUnavailable: If the node is unreachable or on the wrong chain
        """
        try:
            connected = self.w3.is_connected()
        except Exception as e:
            raise NetworkUnavailable(f"Error connecting to {self.name}: {e}") from e

        if not connected:
            raise NetworkUnavailable(f"Failed to connect to {self.name} at {self.rpc_url}")

        chain_id = self.w3.eth.chain_id

        if self.expected_chain_id is not None and chain_id != self.expected_chain_id:
            raise NetworkUnavailable(
                f"{self.name} expects chain id {self.expected_chain_id}, node reports {chain_id}"
            )

        self.chain_id = chain_id
        logger.success(f"Connected to {self.name} (chain id {chain_id})")
        return self.w3

    def get_block_number(self) -> int:
        return self.w3.eth.block_number

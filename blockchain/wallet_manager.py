"""
Wallet Manager
Supplies the deployer account and its balance
"""

import os
from typing import Dict, Optional
from web3 import Web3
from eth_account import Account
from loguru import logger

from .exceptions import SignerUnavailable
from .types import Signer


class SignerProvider:
    """
    Provides the account that signs the deployment

    Two sources, in order:
    - DEPLOYER_PRIVATE_KEY: local account, transactions signed client-side
    - Node-managed accounts (eth_accounts), e.g. a local hardhat node
    """

    def __init__(self, w3: Web3, private_key: Optional[str] = None):
        """
        Initialize Signer Provider

        Args:
            w3: Web3 instance
            private_key: Deployer private key (defaults to DEPLOYER_PRIVATE_KEY)
        """
        self.w3 = w3
        self.private_key = private_key if private_key is not None else os.getenv('DEPLOYER_PRIVATE_KEY')

    def _local_account(self):
        try:
            return Account.from_key(self.private_key)
        except (ValueError, TypeError) as e:
            # Never echo the key itself
            raise SignerUnavailable(f"DEPLOYER_PRIVATE_KEY is not a valid private key: {type(e).__name__}") from e

    def _node_account(self) -> str:
        try:
            accounts = self.w3.eth.accounts
        except Exception as e:
            raise SignerUnavailable(f"Could not list node accounts: {e}") from e

        if not accounts:
            raise SignerUnavailable(
                "No signing account configured: set DEPLOYER_PRIVATE_KEY or use a node with unlocked accounts"
            )

        return accounts[0]

    def acquire_signer(self) -> Signer:
        """
        Resolve the deployer account and read its balance

        Returns:
            Signer

        Raises:
            SignerUnavailable: If no account can sign
        """
        if self.private_key:
            account = self._local_account()
            address = account.address
        else:
            account = None
            address = Web3.to_checksum_address(self._node_account())

        try:
            balance = self.w3.eth.get_balance(address)
        except Exception as e:
            raise SignerUnavailable(f"Could not read balance of {address}: {e}") from e

        return Signer(address=address, balance=balance, account=account)

    def sign_transaction(self, signer: Signer, transaction: Dict):
        """
        Sign a transaction with the signer's local key

        Args:
            signer: Signer holding a local account
            transaction: Transaction dict

        Returns:
            Signed transaction
        """
        if not signer.is_local:
            raise SignerUnavailable(f"{signer.address} is node-managed and cannot sign locally")

        try:
            return signer.account.sign_transaction(transaction)
        except Exception as e:
            logger.error(f"Error signing transaction: {e}")
            raise

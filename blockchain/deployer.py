"""
Deployment Orchestrator
Submits the contract-creation transaction and waits for it to be mined
"""

import time
import threading
from dataclasses import replace
from typing import Dict, Optional, Union
from web3 import Web3
from web3.exceptions import TransactionNotFound, Web3Exception
from loguru import logger

from .contract_factory import ContractFactory
from .exceptions import (
    ContractCallFailed,
    DeploymentTimeout,
    TransactionReverted,
)
from .types import DeploymentRequest, DeploymentResult, PendingDeployment, Signer
from .verifier import is_empty_code
from .wallet_manager import SignerProvider


class DeploymentOrchestrator:
    """
    Drives a single contract into existence on-chain

    Sequence: acquire signer -> build and submit creation tx -> wait (bounded)
    for the receipt -> return address and transaction hash.
    """

    def __init__(
        self,
        w3: Web3,
        signer_provider: SignerProvider,
        contract_factory: ContractFactory,
        deployment_config: Optional[Dict] = None,
        chain_id: Optional[int] = None
    ):
        """
        Initialize Deployment Orchestrator

        Args:
            w3: Web3 instance scoped to this run
            signer_provider: Source of the deployer account
            contract_factory: Artifact resolver
            deployment_config: "deployment" section of deploy_config.json
            chain_id: Expected chain id (read from the node when None)
        """
        self.w3 = w3
        self.signer_provider = signer_provider
        self.contract_factory = contract_factory
        self.chain_id = chain_id

        config = deployment_config or {}
        self.confirmation_timeout = float(config.get('confirmation_timeout', 300))
        self.poll_interval = float(config.get('poll_interval', 2))
        self.gas_buffer = float(config.get('gas_buffer', 1.2))
        self.default_gas_limit = int(config.get('default_gas_limit', 3000000))
        self.price_function = config.get('price_function', 'getListingPrice')

        self.signer: Optional[Signer] = None

    def acquire_signer(self) -> Signer:
        """
        Obtain the deployer account

        Raises:
            SignerUnavailable: If no account is configured
        """
        signer = self.signer_provider.acquire_signer()

        logger.info(f"Deploying contracts with the account: {signer.address}")
        logger.info(f"Account balance: {signer.balance_ether}")

        self.signer = signer
        return signer

    def deploy(
        self,
        factory_ref: Union[str, DeploymentRequest],
        cancel_event: Optional[threading.Event] = None
    ) -> DeploymentResult:
        """
        Deploy a contract and wait for the creation transaction to be mined

        Args:
            factory_ref: Contract name or DeploymentRequest
            cancel_event: Set it to abandon the deployment (before sending) or the wait for mining

        Returns:
            DeploymentResult with address and transaction hash

        Raises:
            UnknownContract: If no artifact exists (before any network call)
            TransactionReverted: If the creation transaction failed on-chain
            DeploymentTimeout: If cancelled or the receipt did not arrive in time
        """
        if isinstance(factory_ref, DeploymentRequest):
            request = factory_ref
        else:
            request = DeploymentRequest(contract_name=factory_ref)

        # Resolve locally first
        self.contract_factory.load(request.contract_name)

        signer = self.signer or self.acquire_signer()

        pending = self.submit(request, signer, cancel_event=cancel_event)
        receipt = self.wait_for_mining(pending, cancel_event=cancel_event)

        return self._result_from_receipt(pending, receipt)

    def _estimate_gas(self, constructor, sender: str) -> int:
        try:
            gas_estimate = constructor.estimate_gas({'from': sender})
            return int(gas_estimate * self.gas_buffer)
        except Exception as e:
            logger.warning(f"Gas estimation failed: {e}, using default")
            return self.default_gas_limit

    def submit(
        self,
        request: DeploymentRequest,
        signer: Signer,
        cancel_event: Optional[threading.Event] = None
    ) -> PendingDeployment:
        """
        Build, sign and send the creation transaction

        Args:
            request: What to deploy
            signer: Who pays for it
            cancel_event: Checked right before the transaction is sent

        Returns:
            PendingDeployment

        Raises:
            DeploymentTimeout: If cancelled before sending
        """
        Contract = self.contract_factory.get_factory(self.w3, request.contract_name)
        constructor = Contract.constructor(*request.constructor_args)

        logger.info(f"Deploying {request.contract_name}...")

        gas_limit = self._estimate_gas(constructor, signer.address)
        gas_price = self.w3.eth.gas_price

        logger.info(f"Gas limit: {gas_limit}")
        logger.info(f"Gas price: {Web3.from_wei(gas_price, 'gwei')} gwei")

        tx_params = {
            'from': signer.address,
            'gas': gas_limit,
            'gasPrice': gas_price
        }

        if cancel_event is not None and cancel_event.is_set():
            logger.warning("Deployment cancelled before the transaction was sent")
            raise DeploymentTimeout(f"Deployment of {request.contract_name} was cancelled before sending")

        if signer.is_local:
            tx_params['nonce'] = self.w3.eth.get_transaction_count(signer.address)
            tx_params['chainId'] = self.chain_id if self.chain_id is not None else self.w3.eth.chain_id

            transaction = constructor.build_transaction(tx_params)
            signed_tx = self.signer_provider.sign_transaction(signer, transaction)
            tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        else:
            # Node-managed account, the node signs
            tx_hash = constructor.transact(tx_params)

        pending = PendingDeployment(
            tx_hash=Web3.to_hex(tx_hash),
            contract_name=request.contract_name,
            sender=signer.address
        )

        logger.info(f"Transaction sent: {pending.tx_hash}")
        return pending

    def wait_for_mining(self, pending: PendingDeployment, cancel_event: Optional[threading.Event] = None):
        """
        Poll for the receipt until mined, the deadline passes or the wait is cancelled

        Args:
            pending: Submitted deployment
            cancel_event: Cancellation token

        Returns:
            Transaction receipt

        Raises:
            DeploymentTimeout: On deadline or cancellation
        """
        logger.info("Waiting for confirmation...")

        deadline = time.monotonic() + self.confirmation_timeout

        while True:
            try:
                receipt = self.w3.eth.get_transaction_receipt(pending.tx_hash)
                if receipt is not None:
                    return receipt
            except TransactionNotFound:
                pass

            if cancel_event is not None and cancel_event.is_set():
                raise DeploymentTimeout(
                    f"Wait for {pending.tx_hash} was cancelled",
                    tx_hash=pending.tx_hash
                )

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise DeploymentTimeout(
                    f"Transaction {pending.tx_hash} not mined after {self.confirmation_timeout:g}s",
                    tx_hash=pending.tx_hash
                )

            delay = min(self.poll_interval, remaining)
            if cancel_event is not None:
                cancel_event.wait(delay)
            else:
                time.sleep(delay)

    def _result_from_receipt(self, pending: PendingDeployment, receipt) -> DeploymentResult:
        if receipt.get('status') == 0:
            logger.error("❌ Deployment failed")
            logger.error(f"Transaction hash: {pending.tx_hash}")
            raise TransactionReverted(
                f"Creation transaction {pending.tx_hash} reverted",
                tx_hash=pending.tx_hash
            )

        contract_address = receipt.get('contractAddress')
        if not contract_address:
            raise TransactionReverted(
                f"Receipt for {pending.tx_hash} has no contract address",
                tx_hash=pending.tx_hash
            )

        result = DeploymentResult(
            contract_address=Web3.to_checksum_address(contract_address),
            tx_hash=pending.tx_hash,
            contract_name=pending.contract_name,
            block_number=receipt.get('blockNumber'),
            gas_used=receipt.get('gasUsed')
        )

        logger.info(f"{result.contract_name} deployed to: {result.contract_address}")
        logger.info(f"Transaction hash: {result.tx_hash}")
        if result.gas_used is not None:
            logger.info(f"Gas used: {result.gas_used}")

        return result

    def read_listing_price(self, address: str, contract_name: str = "NFTMarketplace") -> int:
        """
        Read the listing price from the deployed contract

        Args:
            address: Deployed contract address
            contract_name: Artifact providing the ABI

        Returns:
            Listing price in wei

        Raises:
            ContractCallFailed: If there is no code or the call fails
        """
        artifact = self.contract_factory.load(contract_name)

        if not artifact.has_function(self.price_function):
            raise ContractCallFailed(f"{contract_name} ABI has no {self.price_function}()")

        try:
            code = self.w3.eth.get_code(Web3.to_checksum_address(address))
        except (Web3Exception, ValueError) as e:
            raise ContractCallFailed(f"Could not read code at {address}: {e}") from e

        if is_empty_code(code):
            raise ContractCallFailed(f"No contract code at {address}")

        contract = self.contract_factory.get_instance(self.w3, contract_name, address)

        try:
            price = getattr(contract.functions, self.price_function)().call()
        except (Web3Exception, ValueError) as e:
            raise ContractCallFailed(f"{self.price_function}() failed at {address}: {e}") from e

        logger.info(f"Listing price: {Web3.from_wei(price, 'ether')}")
        return price

    def attach_listing_price(self, result: DeploymentResult, price: int) -> DeploymentResult:
        """Copy of the result carrying the listing price"""
        return replace(result, listing_price=price)

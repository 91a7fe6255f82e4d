"""
Smart Contract Deployment Script
Deploys the NFTMarketplace contract, verifies its bytecode and prints a summary
"""

import sys
import signal
import threading
from typing import Dict, Optional, TextIO, Tuple
from web3 import Web3
from loguru import logger
from dotenv import load_dotenv

from blockchain.contract_factory import ContractFactory
from blockchain.deployer import DeploymentOrchestrator
from blockchain.exceptions import ConfigurationError, DeploymentError
from blockchain.verifier import DeploymentVerifier
from blockchain.wallet_manager import SignerProvider
from utils.config import load_deploy_config, resolve_network
from utils.log_setup import configure_logging
from utils.rpc_manager import NetworkProvider
from utils.summary import DeploymentSummary, SummaryReporter

EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_UNVERIFIED = 2


def run_deployment(
    config: Dict,
    network: Optional[str] = None,
    w3: Optional[Web3] = None,
    private_key: Optional[str] = None,
    stream: Optional[TextIO] = None,
    cancel_event: Optional[threading.Event] = None
) -> Tuple[int, Optional[DeploymentSummary]]:
    """
    Run one deployment end to end

    Args:
        config: Loaded deployment config
        network: Network key (defaults to DEPLOY_NETWORK / default_network)
        w3: Web3 instance to use instead of a new HTTP connection
        private_key: Deployer key (defaults to DEPLOYER_PRIVATE_KEY)
        stream: Summary output channel (stdout when None)
        cancel_event: Set to cancel before sending or to abandon the wait for mining

    Returns:
        Tuple of (exit code, summary or None)
    """
    deployment_config = config.get('deployment', {})
    contract_name = config.get('contract_name', 'NFTMarketplace')

    try:
        network_config = resolve_network(config, network)

        logger.info(f"Deploying {contract_name} to {network_config['name']}...")

        # Artifact is checked before the node is contacted
        factory = ContractFactory(config.get('artifacts_dir', 'artifacts'))
        factory.load(contract_name)

        provider = NetworkProvider(network_config, w3=w3)
        provider.connect()

        orchestrator = DeploymentOrchestrator(
            provider.w3,
            SignerProvider(provider.w3, private_key),
            factory,
            deployment_config,
            chain_id=provider.chain_id
        )

        signer = orchestrator.acquire_signer()

        min_balance = deployment_config.get('min_balance')
        if min_balance is not None and signer.balance < Web3.to_wei(min_balance, 'ether'):
            logger.warning(
                f"Deployer balance {signer.balance_ether} {provider.currency_symbol} "
                f"is below {min_balance} {provider.currency_symbol}"
            )

        result = orchestrator.deploy(contract_name, cancel_event=cancel_event)

        outcome = DeploymentVerifier(provider.w3).verify(result.contract_address)

        if outcome.is_confirmed:
            price = orchestrator.read_listing_price(result.contract_address, contract_name)
            result = orchestrator.attach_listing_price(result, price)
        else:
            logger.warning("Skipping listing price read, no bytecode at the deployed address")

    except DeploymentError as e:
        logger.error(f"Deployment failed: {type(e).__name__}: {e}")
        return EXIT_FAILURE, None
    except Exception as e:
        logger.opt(exception=e).error(f"Deployment failed: {e}")
        return EXIT_FAILURE, None

    reporter = SummaryReporter(stream=stream)
    summary = reporter.build_summary(network_config['name'], result, outcome, signer)
    reporter.render(summary)

    if not summary.verified:
        if deployment_config.get('fail_on_unverified', False):
            logger.error("Bytecode verification failed, exiting non-zero (fail_on_unverified)")
            return EXIT_UNVERIFIED, summary

        logger.warning("Bytecode verification failed, summary emitted anyway")

    return EXIT_SUCCESS, summary


def main() -> int:
    """Script entry point"""
    load_dotenv()
    configure_logging()

    try:
        config = load_deploy_config()
    except ConfigurationError as e:
        logger.error(str(e))
        return EXIT_FAILURE

    cancel_event = threading.Event()

    def _signal_handler(signum, frame):
        logger.warning(f"Received signal {signum}, cancelling deployment")
        cancel_event.set()

    previous = {
        sig: signal.signal(sig, _signal_handler)
        for sig in (signal.SIGINT, signal.SIGTERM)
    }

    try:
        exit_code, _ = run_deployment(config, cancel_event=cancel_event)
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())

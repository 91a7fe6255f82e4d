"""
System Check Script
Verifies configuration, RPC connection, deployer account and artifact before deploying
"""

import sys
from typing import Dict, Optional
from web3 import Web3
from loguru import logger
from dotenv import load_dotenv

from blockchain.contract_factory import ContractFactory
from blockchain.exceptions import DeploymentError
from blockchain.wallet_manager import SignerProvider
from utils.config import load_deploy_config, resolve_network
from utils.log_setup import configure_logging
from utils.rpc_manager import NetworkProvider


def check_artifact(config: Dict) -> bool:
    """Check that the contract has been compiled"""
    logger.info("Checking contract artifact...")

    factory = ContractFactory(config.get('artifacts_dir', 'artifacts'))
    contract_name = config.get('contract_name', 'NFTMarketplace')

    if not factory.exists(contract_name):
        logger.error(f"  ✗ Contract artifact not found: {factory.artifact_path(contract_name)}")
        logger.info("  Run 'npx hardhat compile' first")
        return False

    try:
        artifact = factory.load(contract_name)
    except DeploymentError as e:
        logger.error(f"  ✗ {e}")
        return False

    logger.success(f"✓ Artifact found: {artifact.path}")
    return True


def check_rpc_connection(provider: NetworkProvider) -> bool:
    """Check RPC endpoint connection and chain id"""
    logger.info("Checking RPC connection...")

    try:
        provider.connect()
        block = provider.get_block_number()
    except DeploymentError as e:
        logger.error(f"  ✗ {e}")
        return False

    logger.success(f"✓ {provider.name}: Connected (Block: {block})")
    return True


def check_deployer_balance(provider: NetworkProvider, config: Dict, private_key: Optional[str] = None) -> bool:
    """Check that a deployer account exists and can pay for gas"""
    logger.info("Checking deployer account...")

    try:
        signer = SignerProvider(provider.w3, private_key).acquire_signer()
    except DeploymentError as e:
        logger.error(f"  ✗ {e}")
        return False

    min_balance = config.get('deployment', {}).get('min_balance', 0)
    symbol = provider.currency_symbol

    logger.info(f"  Deployer: {signer.address}")
    logger.info(f"  Balance: {signer.balance_ether:.4f} {symbol}")

    if signer.balance < Web3.to_wei(min_balance, 'ether'):
        logger.error(f"  ⚠ Deployer balance low (need at least {min_balance} {symbol})")
        return False

    logger.success("✓ Deployer balance sufficient")
    return True


def run_checks(config: Dict, network: Optional[str] = None, w3: Optional[Web3] = None,
               private_key: Optional[str] = None) -> bool:
    """
    Run all checks

    Returns:
        True if every check passed
    """
    results = {'artifact': check_artifact(config)}

    try:
        network_config = resolve_network(config, network)
    except DeploymentError as e:
        logger.error(str(e))
        results['network'] = False
    else:
        provider = NetworkProvider(network_config, w3=w3)
        results['rpc'] = check_rpc_connection(provider)

        if results['rpc']:
            results['deployer'] = check_deployer_balance(provider, config, private_key)

    passed = sum(1 for ok in results.values() if ok)
    total = len(results)

    logger.info("=" * 70)
    if passed == total:
        logger.success(f"All checks passed ({passed}/{total})")
    else:
        failed = [name for name, ok in results.items() if not ok]
        logger.error(f"{total - passed} check(s) failed: {', '.join(failed)}")
    logger.info("=" * 70)

    return passed == total


def main() -> int:
    load_dotenv()
    configure_logging()

    try:
        config = load_deploy_config()
    except DeploymentError as e:
        logger.error(str(e))
        return 1

    return 0 if run_checks(config) else 1


if __name__ == "__main__":
    sys.exit(main())

"""
Deployment Configuration
Loads config/deploy_config.json and applies environment overrides
"""

import os
import json
from typing import Dict, Optional
from loguru import logger

from blockchain.exceptions import ConfigurationError

DEFAULT_CONFIG_PATH = "config/deploy_config.json"

TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _env_flag(name: str) -> Optional[bool]:
    value = os.getenv(name)
    if value is None or value == '':
        return None
    return value.strip().lower() in TRUE_VALUES


def load_deploy_config(config_path: Optional[str] = None) -> Dict:
    """
    Load deployment configuration

    Args:
        config_path: JSON config path (defaults to DEPLOY_CONFIG_PATH or config/deploy_config.json)

    Returns:
        Config dict with environment overrides applied

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    config_path = config_path or os.getenv('DEPLOY_CONFIG_PATH') or DEFAULT_CONFIG_PATH

    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Deployment config not found: {config_path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {config_path}: {e}") from e

    if not isinstance(config.get('networks'), dict) or not config['networks']:
        raise ConfigurationError(f"{config_path} defines no networks")

    config.setdefault('contract_name', 'NFTMarketplace')
    config.setdefault('artifacts_dir', 'artifacts')
    config.setdefault('deployment', {})

    if not isinstance(config['deployment'], dict):
        raise ConfigurationError(f"'deployment' in {config_path} must be an object")

    # Environment overrides
    if os.getenv('DEPLOY_CONTRACT'):
        config['contract_name'] = os.getenv('DEPLOY_CONTRACT')

    if os.getenv('DEPLOY_ARTIFACTS_DIR'):
        config['artifacts_dir'] = os.getenv('DEPLOY_ARTIFACTS_DIR')

    fail_on_unverified = _env_flag('FAIL_ON_UNVERIFIED')
    if fail_on_unverified is not None:
        config['deployment']['fail_on_unverified'] = fail_on_unverified

    logger.debug(f"Loaded deployment config from {config_path}")
    return config


def resolve_network(config: Dict, network: Optional[str] = None) -> Dict:
    """
    Pick the target network section

    Args:
        config: Loaded deployment config
        network: Network key (defaults to DEPLOY_NETWORK, then default_network)

    Returns:
        Network config dict including its 'key' and resolved 'rpc_url'

    Raises:
        ConfigurationError: If the network is not configured
    """
    network_key = network or os.getenv('DEPLOY_NETWORK') or config.get('default_network')

    if not network_key:
        raise ConfigurationError("No network selected (set DEPLOY_NETWORK or default_network)")

    networks = config['networks']
    if network_key not in networks:
        raise ConfigurationError(
            f"Unknown network '{network_key}'. Configured: {', '.join(sorted(networks))}"
        )

    network_config = dict(networks[network_key])
    network_config['key'] = network_key
    network_config.setdefault('name', network_key)
    network_config.setdefault('currency_symbol', 'ETH')

    rpc_env = network_config.get('rpc_url_env')
    rpc_url = os.getenv(rpc_env) if rpc_env else None
    network_config['rpc_url'] = rpc_url or network_config.get('default_rpc_url')

    if not network_config['rpc_url']:
        raise ConfigurationError(f"No RPC URL for network '{network_key}' (set {rpc_env})")

    return network_config

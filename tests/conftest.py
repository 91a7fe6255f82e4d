"""
Shared fixtures: a compiled NFTMarketplace artifact on disk and a mocked Web3
"""

import json
import pytest
from unittest.mock import MagicMock

# Hardhat default account #0 and the first contract it deploys
DEPLOYER = '0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266'
DEPLOYER_KEY = '0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80'
CONTRACT_ADDRESS = '0x5FbDB2315678afecb367f032d93F642f64180aa3'
TX_HASH = bytes.fromhex('ab' * 32)
TX_HASH_HEX = '0x' + 'ab' * 32

MARKETPLACE_ABI = [
    {
        "inputs": [],
        "stateMutability": "nonpayable",
        "type": "constructor"
    },
    {
        "inputs": [],
        "name": "getListingPrice",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function"
    }
]

ENV_VARS = (
    'DEPLOYER_PRIVATE_KEY',
    'DEPLOY_NETWORK',
    'DEPLOY_CONTRACT',
    'DEPLOY_CONFIG_PATH',
    'DEPLOY_ARTIFACTS_DIR',
    'FAIL_ON_UNVERIFIED',
    'CORE_TESTNET2_RPC_URL',
    'LOCALHOST_RPC_URL',
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep a developer's .env out of the tests"""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def write_artifact(artifacts_dir, name, abi=None, bytecode='0x6080604052'):
    contract_dir = artifacts_dir / "contracts" / f"{name}.sol"
    contract_dir.mkdir(parents=True, exist_ok=True)
    path = contract_dir / f"{name}.json"
    path.write_text(json.dumps({
        "contractName": name,
        "abi": MARKETPLACE_ABI if abi is None else abi,
        "bytecode": bytecode
    }))
    return path


@pytest.fixture
def artifacts_dir(tmp_path):
    """Artifacts root holding a compiled NFTMarketplace"""
    root = tmp_path / "artifacts"
    write_artifact(root, "NFTMarketplace")
    return root


@pytest.fixture
def deploy_config(artifacts_dir):
    """Loaded deployment config pointing at the test artifacts"""
    return {
        'default_network': 'core_testnet2',
        'contract_name': 'NFTMarketplace',
        'artifacts_dir': str(artifacts_dir),
        'deployment': {
            'confirmation_timeout': 5,
            'poll_interval': 0,
            'gas_buffer': 1.2,
            'default_gas_limit': 3000000,
            'min_balance': 0.1,
            'fail_on_unverified': False
        },
        'networks': {
            'core_testnet2': {
                'name': 'Core Testnet 2',
                'chain_id': 1114,
                'rpc_url_env': 'CORE_TESTNET2_RPC_URL',
                'default_rpc_url': 'https://rpc.test2.btcs.network',
                'currency_symbol': 'tCORE2'
            }
        }
    }


@pytest.fixture
def deployed_instance():
    """Contract instance bound to the deployed address"""
    instance = MagicMock()
    instance.functions.getListingPrice.return_value.call.return_value = 10 ** 16
    return instance


@pytest.fixture
def contract_handle():
    """Deployable contract factory returned by w3.eth.contract(abi=, bytecode=)"""
    handle = MagicMock()
    constructor = handle.constructor.return_value
    constructor.estimate_gas.return_value = 1000000
    constructor.transact.return_value = TX_HASH
    return handle


@pytest.fixture
def w3(contract_handle, deployed_instance):
    """Mocked Web3 for a node with one unlocked account and a successful deployment"""
    mock_w3 = MagicMock()
    mock_w3.is_connected.return_value = True

    mock_w3.eth.chain_id = 1114
    mock_w3.eth.block_number = 123
    mock_w3.eth.accounts = [DEPLOYER]
    mock_w3.eth.get_balance.return_value = 5 * 10 ** 18
    mock_w3.eth.gas_price = 10 ** 9
    mock_w3.eth.get_transaction_count.return_value = 0
    mock_w3.eth.send_raw_transaction.return_value = TX_HASH
    mock_w3.eth.get_transaction_receipt.return_value = {
        'status': 1,
        'contractAddress': CONTRACT_ADDRESS,
        'blockNumber': 7,
        'gasUsed': 950000
    }
    mock_w3.eth.get_code.return_value = bytes.fromhex('6080604052')

    def _contract(**kwargs):
        return deployed_instance if 'address' in kwargs else contract_handle

    mock_w3.eth.contract.side_effect = _contract
    return mock_w3

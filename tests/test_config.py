"""
Unit Tests for configuration loading
"""

import json
import pytest

from blockchain.exceptions import ConfigurationError
from utils.config import load_deploy_config, resolve_network


@pytest.fixture
def config_file(tmp_path, deploy_config):
    path = tmp_path / "deploy_config.json"
    path.write_text(json.dumps(deploy_config))
    return path


class TestLoadDeployConfig:
    """Test JSON config loading"""

    def test_load(self, config_file):
        config = load_deploy_config(str(config_file))

        assert config['contract_name'] == "NFTMarketplace"
        assert config['deployment']['confirmation_timeout'] == 5

    def test_path_from_environment(self, config_file, monkeypatch):
        monkeypatch.setenv('DEPLOY_CONFIG_PATH', str(config_file))

        assert load_deploy_config()['default_network'] == 'core_testnet2'

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_deploy_config(str(tmp_path / "nope.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{")

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            load_deploy_config(str(path))

    def test_no_networks(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({'networks': {}}))

        with pytest.raises(ConfigurationError):
            load_deploy_config(str(path))

    def test_defaults(self, tmp_path):
        path = tmp_path / "minimal.json"
        path.write_text(json.dumps({'networks': {'localhost': {'default_rpc_url': 'http://127.0.0.1:8545'}}}))

        config = load_deploy_config(str(path))

        assert config['contract_name'] == "NFTMarketplace"
        assert config['artifacts_dir'] == "artifacts"
        assert config['deployment'] == {}

    def test_environment_overrides(self, config_file, monkeypatch):
        monkeypatch.setenv('DEPLOY_CONTRACT', 'OtherContract')
        monkeypatch.setenv('DEPLOY_ARTIFACTS_DIR', '/tmp/out')
        monkeypatch.setenv('FAIL_ON_UNVERIFIED', 'true')

        config = load_deploy_config(str(config_file))

        assert config['contract_name'] == 'OtherContract'
        assert config['artifacts_dir'] == '/tmp/out'
        assert config['deployment']['fail_on_unverified'] is True

    def test_fail_on_unverified_false(self, config_file, monkeypatch):
        monkeypatch.setenv('FAIL_ON_UNVERIFIED', '0')

        assert load_deploy_config(str(config_file))['deployment']['fail_on_unverified'] is False


class TestResolveNetwork:
    """Test network selection"""

    def test_default_network(self, deploy_config):
        network = resolve_network(deploy_config)

        assert network['key'] == 'core_testnet2'
        assert network['name'] == 'Core Testnet 2'
        assert network['rpc_url'] == 'https://rpc.test2.btcs.network'

    def test_rpc_url_from_environment(self, deploy_config, monkeypatch):
        monkeypatch.setenv('CORE_TESTNET2_RPC_URL', 'https://example.invalid/rpc')

        assert resolve_network(deploy_config)['rpc_url'] == 'https://example.invalid/rpc'

    def test_network_from_environment(self, deploy_config, monkeypatch):
        deploy_config['networks']['localhost'] = {'default_rpc_url': 'http://127.0.0.1:8545'}
        monkeypatch.setenv('DEPLOY_NETWORK', 'localhost')

        network = resolve_network(deploy_config)

        assert network['key'] == 'localhost'
        assert network['name'] == 'localhost'
        assert network['currency_symbol'] == 'ETH'

    def test_unknown_network(self, deploy_config):
        with pytest.raises(ConfigurationError, match="Unknown network"):
            resolve_network(deploy_config, 'mainnet')

    def test_no_rpc_url(self, deploy_config):
        deploy_config['networks']['core_testnet2'].pop('default_rpc_url')

        with pytest.raises(ConfigurationError, match="CORE_TESTNET2_RPC_URL"):
            resolve_network(deploy_config)

    def test_does_not_mutate_config(self, deploy_config):
        resolve_network(deploy_config)

        assert 'rpc_url' not in deploy_config['networks']['core_testnet2']


@pytest.mark.parametrize('section', [None, [], "fast"])
def test_deployment_section_must_be_object(tmp_path, deploy_config, monkeypatch, section):
    deploy_config['deployment'] = section
    path = tmp_path / "bad_section.json"
    path.write_text(json.dumps(deploy_config))
    monkeypatch.setenv('FAIL_ON_UNVERIFIED', 'true')

    with pytest.raises(ConfigurationError, match="deployment"):
        load_deploy_config(str(path))

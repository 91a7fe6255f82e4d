"""
Contract Factory
Resolves compiled hardhat artifacts into deployable contract handles
"""

import os
import json
from dataclasses import dataclass
from typing import Dict, List, Optional
from web3 import Web3
from loguru import logger

from .exceptions import UnknownContract


@dataclass
class ContractArtifact:
    """Compiled contract interface and creation bytecode"""

    name: str
    abi: List[Dict]
    bytecode: str
    path: str

    def has_function(self, function_name: str) -> bool:
        return any(
            entry.get('type') == 'function' and entry.get('name') == function_name
            for entry in self.abi
        )


class ContractFactory:
    """
    Loads contract artifacts produced by `npx hardhat compile`

    Artifacts are read from disk only; no network access happens here so an
    unknown contract fails before anything is sent to the node.
    """

    def __init__(self, artifacts_dir: str = "artifacts"):
        """
        Initialize Contract Factory

        Args:
            artifacts_dir: Hardhat artifacts root directory
        """
        self.artifacts_dir = artifacts_dir
        self._artifacts: Dict[str, ContractArtifact] = {}

    def artifact_path(self, contract_name: str) -> str:
        """Path of the artifact JSON for a contract name"""
        return os.path.join(
            self.artifacts_dir, "contracts", f"{contract_name}.sol", f"{contract_name}.json"
        )

    def exists(self, contract_name: str) -> bool:
        return os.path.exists(self.artifact_path(contract_name))

    def load(self, contract_name: str) -> ContractArtifact:
        """
        Load and validate a compiled artifact

        Args:
            contract_name: Contract name, e.g. "NFTMarketplace"

        Returns:
            ContractArtifact

        Raises:
            UnknownContract: If the artifact is missing or incomplete
        """
        if contract_name in self._artifacts:
            return self._artifacts[contract_name]

        if not contract_name:
            raise UnknownContract("No contract name given")

        contract_path = self.artifact_path(contract_name)

        if not os.path.exists(contract_path):
            logger.error(f"Contract artifact not found: {contract_path}")
            logger.info("Run 'npx hardhat compile' first")
            raise UnknownContract(f"No compiled artifact for contract '{contract_name}' at {contract_path}")

        try:
            with open(contract_path, 'r') as f:
                contract_json = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise UnknownContract(f"Unreadable artifact for contract '{contract_name}': {e}") from e

        abi = contract_json.get('abi')
        bytecode = contract_json.get('bytecode')

        if not isinstance(abi, list) or not bytecode or bytecode == '0x':
            # Interfaces and abstract contracts compile to an empty bytecode
            raise UnknownContract(f"Artifact for '{contract_name}' has no deployable bytecode")

        artifact = ContractArtifact(
            name=contract_json.get('contractName', contract_name),
            abi=abi,
            bytecode=bytecode,
            path=contract_path
        )
        self._artifacts[contract_name] = artifact

        logger.debug(f"Loaded artifact for {contract_name} from {contract_path}")
        return artifact

    def get_factory(self, w3: Web3, contract_name: str):
        """
        Get a deployable contract handle

        Args:
            w3: Web3 instance
            contract_name: Contract name

        Returns:
            web3 contract factory (no address)
        """
        artifact = self.load(contract_name)
        return w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)

    def get_instance(self, w3: Web3, contract_name: str, address: str, abi: Optional[List[Dict]] = None):
        """
        Get a contract instance bound to a deployed address

        Args:
            w3: Web3 instance
            contract_name: Contract name (used for the ABI)
            address: Deployed contract address
            abi: Explicit ABI overriding the artifact's

        Returns:
            web3 contract instance
        """
        if abi is None:
            abi = self.load(contract_name).abi

        return w3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=abi
        )

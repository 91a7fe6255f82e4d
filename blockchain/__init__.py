"""
Blockchain Interaction Package
Handles artifact loading, signing, contract deployment and bytecode verification
"""

from .contract_factory import ContractArtifact, ContractFactory
from .deployer import DeploymentOrchestrator
from .verifier import DeploymentVerifier
from .wallet_manager import SignerProvider

__all__ = [
    'ContractArtifact',
    'ContractFactory',
    'DeploymentOrchestrator',
    'DeploymentVerifier',
    'SignerProvider'
]

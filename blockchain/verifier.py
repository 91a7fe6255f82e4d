"""
Deployment Verifier
Independent bytecode check of a claimed contract address
"""

from web3 import Web3
from loguru import logger

from .types import VerificationOutcome


def is_empty_code(code) -> bool:
    """True when eth_getCode returned no bytecode"""
    if code is None:
        return True
    if isinstance(code, str):
        return code in ('', '0x', '0X')
    return len(code) == 0


class DeploymentVerifier:
    """
    Confirms a deployment by re-reading the code stored at its address

    The receipt alone is not trusted: only non-empty bytecode at the address
    counts as a deployed contract. Evaluated exactly once, no retries.
    """

    def __init__(self, w3: Web3):
        self.w3 = w3

    def verify(self, address: str) -> VerificationOutcome:
        """
        Classify the deployment at an address

        Args:
            address: Claimed contract address

        Returns:
            CONFIRMED if bytecode is present, FAILED otherwise
        """
        logger.info("Verifying deployment...")

        code = self.w3.eth.get_code(Web3.to_checksum_address(address))

        if is_empty_code(code):
            logger.warning(f"❌ Contract deployment failed! No bytecode at {address}")
            return VerificationOutcome.FAILED

        logger.success("✅ Contract deployed successfully!")
        return VerificationOutcome.CONFIRMED

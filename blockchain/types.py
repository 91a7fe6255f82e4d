"""
Deployment Types
Transient records passed between the deployment stages
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple

from web3 import Web3


@dataclass
class Signer:
    """Account that authorizes and pays for the deployment"""

    address: str
    balance: int  # wei
    account: Optional[Any] = field(default=None, repr=False)  # LocalAccount, None for node-managed

    @property
    def is_local(self) -> bool:
        return self.account is not None

    @property
    def balance_ether(self):
        return Web3.from_wei(self.balance, 'ether')


@dataclass
class DeploymentRequest:
    contract_name: str
    constructor_args: Tuple[Any, ...] = ()


@dataclass
class PendingDeployment:
    """Creation transaction that was submitted but not yet mined"""

    tx_hash: str
    contract_name: str
    sender: str


@dataclass(frozen=True)
class DeploymentResult:
    """Confirmed outcome of a mined creation transaction"""

    contract_address: str
    tx_hash: str
    contract_name: str
    block_number: Optional[int] = None
    gas_used: Optional[int] = None
    listing_price: Optional[int] = None  # wei


class VerificationOutcome(Enum):
    CONFIRMED = 'confirmed'
    FAILED = 'failed'

    @property
    def is_confirmed(self) -> bool:
        return self is VerificationOutcome.CONFIRMED

"""
Summary Reporter
Builds and renders the deployment summary
"""

import sys
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, TextIO
from loguru import logger

from blockchain.types import DeploymentResult, Signer, VerificationOutcome

WEI_PER_ETHER = 10 ** 18

# Rendered key order
SUMMARY_FIELDS = (
    'network',
    'contractAddress',
    'deployer',
    'transactionHash',
    'listingPrice',
    'deployedAt',
)


def format_ether(wei: int) -> str:
    """
    Format a wei amount as a decimal string in native units

    Always keeps a fractional part: 0 -> "0.0", 10**16 -> "0.01", 5 * 10**18 -> "5.0"

    Raises:
        ValueError: If the amount is negative
    """
    wei = int(wei)
    if wei < 0:
        raise ValueError(f"Negative amount: {wei}")

    whole, fraction = divmod(wei, WEI_PER_ETHER)
    fraction_str = f"{fraction:018d}".rstrip('0') or '0'
    return f"{whole}.{fraction_str}"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix"""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass(frozen=True)
class DeploymentSummary:
    """Final record of a deployment run"""

    network: Optional[str]
    contract_address: Optional[str]
    deployer: Optional[str]
    transaction_hash: Optional[str]
    listing_price: Optional[str]
    deployed_at: str
    outcome: Optional[VerificationOutcome] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return dict(zip(SUMMARY_FIELDS, (
            self.network,
            self.contract_address,
            self.deployer,
            self.transaction_hash,
            self.listing_price,
            self.deployed_at,
        )))

    @property
    def verified(self) -> bool:
        return self.outcome is not None and self.outcome.is_confirmed


class SummaryReporter:
    """
    Assembles the summary and writes it to the operator's output channel
    """

    def __init__(self, stream: Optional[TextIO] = None, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize Summary Reporter

        Args:
            stream: Output channel (stdout when None)
            clock: Returns the current time (timezone-aware)
        """
        self.stream = stream
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def build_summary(
        self,
        network: Optional[str],
        result: Optional[DeploymentResult],
        outcome: Optional[VerificationOutcome],
        signer: Optional[Signer]
    ) -> DeploymentSummary:
        """
        Build the summary; never raises, missing values become None

        Args:
            network: Network display name
            result: Deployment result (may be partial)
            outcome: Verification outcome
            signer: Deployer account

        Returns:
            DeploymentSummary
        """
        listing_price = None
        price_wei = getattr(result, 'listing_price', None)

        if price_wei is not None:
            try:
                listing_price = format_ether(price_wei)
            except (TypeError, ValueError) as e:
                logger.warning(f"Cannot format listing price {price_wei!r}: {e}")

        try:
            deployed_at = utc_timestamp(self.clock())
        except Exception as e:
            logger.warning(f"Clock failed ({e}), using system time")
            deployed_at = utc_timestamp()

        return DeploymentSummary(
            network=network,
            contract_address=getattr(result, 'contract_address', None),
            deployer=getattr(signer, 'address', None),
            transaction_hash=getattr(result, 'tx_hash', None),
            listing_price=listing_price,
            deployed_at=deployed_at,
            outcome=outcome
        )

    def render(self, summary: DeploymentSummary, stream: Optional[TextIO] = None) -> str:
        """
        Serialize the summary and write it out

        Args:
            summary: Summary to render
            stream: Output channel overriding the reporter's

        Returns:
            Rendered text
        """
        text = "\n=== Deployment Summary ===\n" + json.dumps(summary.to_dict(), indent=2) + "\n"

        out = stream or self.stream or sys.stdout
        out.write(text)
        out.flush()

        return text

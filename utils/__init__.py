"""
Utilities Package
Configuration, network connection, logging and summary reporting
"""

from .rpc_manager import NetworkProvider
from .summary import DeploymentSummary, SummaryReporter, format_ether

__all__ = [
    'NetworkProvider',
    'DeploymentSummary',
    'SummaryReporter',
    'format_ether'
]

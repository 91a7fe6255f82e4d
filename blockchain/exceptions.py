"""
Deployment Exceptions
Failure taxonomy for the deploy -> confirm -> verify -> report sequence
"""


class DeploymentError(Exception):
    """Base exception for deployment failures"""

    pass


class ConfigurationError(DeploymentError, ValueError):
    """Raised when the deployment configuration is missing or invalid"""

    pass


class NetworkUnavailable(DeploymentError, ConnectionError):
    """Raised when the RPC endpoint is unknown or unreachable"""

    pass


class SignerUnavailable(DeploymentError, RuntimeError):
    """Raised when no account is available to sign the deployment"""

    pass


class UnknownContract(DeploymentError, LookupError):
    """Raised when a contract name has no compiled artifact"""

    pass


class TransactionReverted(DeploymentError, RuntimeError):
    """Raised when the creation transaction failed on-chain"""

    def __init__(self, message: str, tx_hash: str = None):
        super().__init__(message)
        self.tx_hash = tx_hash


class DeploymentTimeout(DeploymentError, TimeoutError):
    """Raised when mining confirmation did not arrive before the deadline"""

    def __init__(self, message: str, tx_hash: str = None):
        super().__init__(message)
        self.tx_hash = tx_hash


class ContractCallFailed(DeploymentError, RuntimeError):
    """Raised when a read-only call against the deployed contract fails"""

    pass

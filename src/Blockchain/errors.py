# errors.py
# error taxonomy of a deployment run


class DonationDeployError(Exception):
    """Base class of every error raised by a deployment run."""


class ArtifactLoadError(DonationDeployError):
    """A named artifact is missing or malformed."""


class DeploymentError(DonationDeployError):
    """A deployment transaction reverted or was not mined."""


class UnresolvedDependency(DonationDeployError):
    """An argument references a contract which is not deployed yet."""


class VerificationError(DonationDeployError):
    """The explorer refused or failed a verification request. Never fatal."""


class WiringError(DonationDeployError):
    """A post-deployment call failed."""


class ScenarioError(DonationDeployError):
    """A step of the funding scenario failed."""


class TransactionReverted(DonationDeployError):
    # raised by the chain session on a status 0 receipt
    def __init__(self, tx_hash, receipt=None):
        super().__init__(f"Transaction {tx_hash} reverted")
        self.tx_hash = tx_hash
        self.receipt = receipt

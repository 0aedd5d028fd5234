"""
LendTrust — Domain errors.

The scoring engine itself never raises on evidence content. These cover the
edges around it: payload shape, applicant lookup, strategy selection.
"""


class LendTrustError(Exception):
    pass


class EvidenceValidationError(LendTrustError):
    pass


class EvidenceNotFound(LendTrustError):
    def __init__(self, handle: str):
        self.handle = handle
        super().__init__(f"No evidence available for applicant '{handle}'")


class UnknownStrategyError(LendTrustError):
    def __init__(self, name: str, available: tuple = ()):
        self.name = name
        self.available = available
        super().__init__(f"Unknown scoring strategy '{name}'. Available: {', '.join(available) or 'none'}")

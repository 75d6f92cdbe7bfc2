"""Exception hierarchy for the crowdfunding ledger."""


class CrowdfundingError(Exception):
    """Base exception for ledger errors."""

    pass


class InvalidArgumentError(CrowdfundingError, ValueError):
    """Raised when a caller passes an unusable argument."""

    pass


class MissingSecretError(InvalidArgumentError):
    """Raised when service data is read or stored without a secret."""

    pass


class InvalidTransactionIdError(InvalidArgumentError):
    """Raised when an operation needs a persisted transaction id."""

    pass


class InvalidCurrencyError(InvalidArgumentError):
    """Raised on an empty currency id or code lookup."""

    pass


class InvalidUserIdError(InvalidArgumentError):
    """Raised on an empty user id lookup."""

    pass


class UnknownColumnError(InvalidArgumentError):
    """Raised when a lookup names a column the table does not have."""

    pass


class ServiceDataDecryptionError(CrowdfundingError):
    """Raised when an encrypted service data blob fails authentication."""

    pass

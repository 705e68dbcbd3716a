"""
Exception and Error Definitions Module

Defines the exception hierarchy raised while building Permit2 typed data.
All exceptions inherit from Permit2Error for unified exception handling.

Exception Hierarchy:
    Permit2Error (root)
    ├── PermitRangeError
    │   ├── SigDeadlineOutOfRangeError
    │   ├── NonceOutOfRangeError
    │   └── AmountOutOfRangeError
    └── ConfigurationError
"""


class Permit2Error(Exception):
    """
    Root exception class for all project-specific exceptions.

    All custom exceptions should inherit from this class to enable
    unified exception handling by callers.
    """
    pass


class PermitRangeError(Permit2Error, ValueError):
    """
    Base exception for permit fields exceeding their protocol maximum.

    Each subclass carries a fixed ``code`` naming the overflowing field.
    Raised before any typed data is assembled, so no partial result exists.

    Attributes:
        field: Name of the permit field that overflowed
        value: The rejected value
        maximum: Inclusive upper bound for the field
    """

    code = "OUT_OF_RANGE"
    field = ""

    def __init__(self, value: int, maximum: int):
        self.value = value
        self.maximum = maximum
        super().__init__(f"{self.code}: {self.field}={value} exceeds maximum {maximum}")


class SigDeadlineOutOfRangeError(PermitRangeError):
    """Raised when a permit deadline exceeds ``MAX_SIG_DEADLINE``."""

    code = "SIG_DEADLINE_OUT_OF_RANGE"
    field = "deadline"


class NonceOutOfRangeError(PermitRangeError):
    """Raised when a permit nonce exceeds ``MAX_UNORDERED_NONCE``."""

    code = "NONCE_OUT_OF_RANGE"
    field = "nonce"


class AmountOutOfRangeError(PermitRangeError):
    """
    Raised when a permitted token amount exceeds ``MAX_SIGNATURE_TRANSFER_AMOUNT``.

    In batch permits this is raised for the first offending entry only.
    """

    code = "AMOUNT_OUT_OF_RANGE"
    field = "amount"


class ConfigurationError(Permit2Error):
    """
    Raised when configuration is missing or invalid.

    This includes scenarios such as:
    - A ``permit2_address`` environment value that is not an EVM address
    """
    pass

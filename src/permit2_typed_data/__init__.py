from .constants import (
    MAX_UINT48,
    MAX_UINT160,
    MAX_UINT256,
    MAX_SIG_DEADLINE,
    MAX_UNORDERED_NONCE,
    MAX_SIGNATURE_TRANSFER_AMOUNT,
    PERMIT2_ADDRESS,
    resolve_permit2_address,
)
from .domain import EIP712Domain, permit2_domain
from .exceptions import (
    Permit2Error,
    PermitRangeError,
    SigDeadlineOutOfRangeError,
    NonceOutOfRangeError,
    AmountOutOfRangeError,
    ConfigurationError,
)
from .hashing import hash_typed_data
from .schemas import (
    CanonicalModel,
    TokenPermissions,
    PermitTransferFrom,
    PermitBatchTransferFrom,
    PermitWitnessTransferFrom,
    PermitBatchWitnessTransferFrom,
    Witness,
    WitnessStruct,
    parse_permit,
)
from .signature_transfer import (
    SignatureTransfer,
    PermitTransferFromData,
    PermitBatchTransferFromData,
    build_permit_types,
    get_primary_type,
    validate_permit_bounds,
)

__all__ = [
    "MAX_UINT48",
    "MAX_UINT160",
    "MAX_UINT256",
    "MAX_SIG_DEADLINE",
    "MAX_UNORDERED_NONCE",
    "MAX_SIGNATURE_TRANSFER_AMOUNT",
    "PERMIT2_ADDRESS",
    "resolve_permit2_address",
    "EIP712Domain",
    "permit2_domain",
    "Permit2Error",
    "PermitRangeError",
    "SigDeadlineOutOfRangeError",
    "NonceOutOfRangeError",
    "AmountOutOfRangeError",
    "ConfigurationError",
    "hash_typed_data",
    "CanonicalModel",
    "TokenPermissions",
    "PermitTransferFrom",
    "PermitBatchTransferFrom",
    "PermitWitnessTransferFrom",
    "PermitBatchWitnessTransferFrom",
    "Witness",
    "WitnessStruct",
    "parse_permit",
    "SignatureTransfer",
    "PermitTransferFromData",
    "PermitBatchTransferFromData",
    "build_permit_types",
    "get_primary_type",
    "validate_permit_bounds",
]

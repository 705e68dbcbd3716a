"""
Permit2 Signature-Transfer Typed Data

Builds the EIP-712 ``{domain, types, values}`` triple for Permit2
``permitTransferFrom`` / ``permitBatchTransferFrom`` (optionally extended with
witness data) and hashes it.  Nothing is signed and no RPC calls are made.

Exported helpers
----------------
SignatureTransfer.get_permit_data
    Validate a single or batch permit and return its typed data, ready to be
    sent in an ``eth_signTypedData_v4`` call (``data.to_dict()``).

SignatureTransfer.hash
    Same as ``get_permit_data`` followed by the EIP-712 digest of the result.

validate_permit_bounds
    Bounds-check deadline, nonce and every permitted amount, raising a
    ``PermitRangeError`` subclass on the first violation.

build_permit_types / get_primary_type
    Type-schema selection for the four (single/batch x witness/no witness)
    shapes.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from .constants import (
    MAX_SIG_DEADLINE,
    MAX_SIGNATURE_TRANSFER_AMOUNT,
    MAX_UNORDERED_NONCE,
    resolve_permit2_address,
)
from .domain import EIP712Domain, permit2_domain
from .exceptions import (
    AmountOutOfRangeError,
    NonceOutOfRangeError,
    SigDeadlineOutOfRangeError,
)
from .hashing import hash_typed_data
from .schemas import (
    Permit,
    PermitBatchTransferFrom,
    PermitBatchWitnessTransferFrom,
    PermitTransferFrom,
    PermitWitnessTransferFrom,
    TokenPermissions,
    TypeDeclarations,
    Witness,
    is_permit_transfer_from,
    parse_permit,
)

logger = logging.getLogger(__name__)

WitnessLike = Union[Witness, Mapping[str, Any]]

# Primary type name keyed by (batch, has_witness).
_PRIMARY_TYPES = {
    (False, False): "PermitTransferFrom",
    (False, True): "PermitWitnessTransferFrom",
    (True, False): "PermitBatchTransferFrom",
    (True, True): "PermitBatchWitnessTransferFrom",
}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_token_permissions(permissions: TokenPermissions) -> None:
    if permissions.amount > MAX_SIGNATURE_TRANSFER_AMOUNT:
        raise AmountOutOfRangeError(permissions.amount, MAX_SIGNATURE_TRANSFER_AMOUNT)


def validate_permit_bounds(permit: Permit) -> None:
    """
    Check a permit against the signature-transfer maxima.

    Checks run in order (deadline, nonce, then each permitted entry in list
    order) and stop at the first violation.  Bounds are inclusive.

    Raises:
        SigDeadlineOutOfRangeError: ``deadline > MAX_SIG_DEADLINE``.
        NonceOutOfRangeError:       ``nonce > MAX_UNORDERED_NONCE``.
        AmountOutOfRangeError:      an ``amount > MAX_SIGNATURE_TRANSFER_AMOUNT``.
    """
    if permit.deadline > MAX_SIG_DEADLINE:
        raise SigDeadlineOutOfRangeError(permit.deadline, MAX_SIG_DEADLINE)
    if permit.nonce > MAX_UNORDERED_NONCE:
        raise NonceOutOfRangeError(permit.nonce, MAX_UNORDERED_NONCE)

    if is_permit_transfer_from(permit):
        validate_token_permissions(permit.permitted)
    else:
        for permissions in permit.permitted:
            validate_token_permissions(permissions)


# ---------------------------------------------------------------------------
# Type schema
# ---------------------------------------------------------------------------

def get_primary_type(batch: bool, has_witness: bool) -> str:
    return _PRIMARY_TYPES[(batch, has_witness)]


def _token_permissions_fields() -> List[Dict[str, str]]:
    return [
        {"name": "token",  "type": "address"},
        {"name": "amount", "type": "uint256"},
    ]


def _permit_fields(permitted_type: str, witness_type_name: Optional[str]) -> List[Dict[str, str]]:
    fields = [
        {"name": "permitted", "type": permitted_type},
        {"name": "spender",   "type": "address"},
        {"name": "nonce",     "type": "uint256"},
        {"name": "deadline",  "type": "uint256"},
    ]
    if witness_type_name is not None:
        fields.append({"name": "witness", "type": witness_type_name})
    return fields


def build_permit_types(batch: bool, witness: Optional[Witness] = None) -> TypeDeclarations:
    """
    Build the struct declarations for a permit.

    Without a witness the result is ``TokenPermissions`` plus the base primary
    struct.  With one, the primary struct becomes its witness variant (with a
    trailing ``witness`` field typed ``witness.witness_type_name``) and every
    declaration from ``witness.witness_type`` is merged in.  ``TokenPermissions``
    and the primary struct always use the protocol definitions, for single and
    batch permits alike.  (The upstream Permit2 SDK lets a witness redeclare
    ``TokenPermissions`` for single permits but not for batch ones; a witness
    doing so here is simply overridden.)

    Returns:
        A freshly built mapping; callers may modify it freely.
    """
    types: TypeDeclarations = {}
    if witness is not None:
        for name, fields in witness.witness_type.items():
            types[name] = [dict(field) for field in fields]

    types["TokenPermissions"] = _token_permissions_fields()
    types[get_primary_type(batch, witness is not None)] = _permit_fields(
        "TokenPermissions[]" if batch else "TokenPermissions",
        witness.witness_type_name if witness is not None else None,
    )
    return types


# ---------------------------------------------------------------------------
# Typed-data containers
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class _PermitData:
    domain: EIP712Domain
    types: TypeDeclarations
    values: Any
    primary_type: str

    def to_dict(self) -> Dict[str, Any]:
        """Return a dict compatible with EIP-712 structured signing.

        The returned structure follows the conventional layout consumed by
        EIP-712 signing libraries: { types, primaryType, domain, message }.
        ``types`` additionally carries the ``EIP712Domain`` declaration.
        """
        return {
            "types": {"EIP712Domain": self.domain.eip712_type(), **self.types},
            "primaryType": self.primary_type,
            "domain": self.domain.to_dict(),
            "message": self.values.to_message(),
        }


@dataclass(frozen=True)
class PermitTransferFromData(_PermitData):
    """
    Typed data for a single-token permit.

    Attributes:
        domain:       Permit2 EIP-712 domain.
        types:        ``TokenPermissions`` plus ``PermitTransferFrom`` (or
                      ``PermitWitnessTransferFrom`` and the witness types).
        values:       The message record.
        primary_type: ``"PermitTransferFrom"`` or ``"PermitWitnessTransferFrom"``.
    """
    values: Union[PermitTransferFrom, PermitWitnessTransferFrom]


@dataclass(frozen=True)
class PermitBatchTransferFromData(_PermitData):
    """
    Typed data for a multi-token permit.

    Same layout as ``PermitTransferFromData`` with the batch struct names and
    ``permitted`` typed ``TokenPermissions[]``.
    """
    values: Union[PermitBatchTransferFrom, PermitBatchWitnessTransferFrom]


PermitData = Union[PermitTransferFromData, PermitBatchTransferFromData]


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

def _parse_witness(witness: Optional[WitnessLike]) -> Optional[Witness]:
    if witness is None or isinstance(witness, Witness):
        return witness
    return Witness.model_validate(witness)


class SignatureTransfer:
    """
    Typed-data builders for Permit2 signature transfers.

    Every method is static: pass the permit (a model or a plain mapping), the
    Permit2 contract address and the chain id, plus an optional witness.
    ``permit2_address=None`` resolves the address from the ``permit2_address``
    environment variable, falling back to the canonical deployment.

    Example::

        data = SignatureTransfer.get_permit_data(permit, PERMIT2_ADDRESS, 1)
        payload = data.to_dict()           # eth_signTypedData_v4 request
        digest = SignatureTransfer.hash(permit, PERMIT2_ADDRESS, 1)
    """

    def __init__(self):
        raise TypeError("SignatureTransfer cannot be instantiated")

    @staticmethod
    def get_permit_transfer_data(
        permit: Union[PermitTransferFrom, Mapping[str, Any]],
        permit2_address: Optional[str],
        chain_id: int,
        witness: Optional[WitnessLike] = None,
    ) -> PermitTransferFromData:
        permit = parse_permit(permit)
        if not isinstance(permit, PermitTransferFrom):
            raise TypeError("get_permit_transfer_data expects a single-token permit")
        witness = _parse_witness(witness)

        validate_permit_bounds(permit)
        domain = permit2_domain(resolve_permit2_address(permit2_address), chain_id)

        values: Union[PermitTransferFrom, PermitWitnessTransferFrom] = permit
        if witness is not None:
            values = PermitWitnessTransferFrom(
                permitted=permit.permitted,
                spender=permit.spender,
                nonce=permit.nonce,
                deadline=permit.deadline,
                witness=witness.witness,
            )

        data = PermitTransferFromData(
            domain=domain,
            types=build_permit_types(batch=False, witness=witness),
            primary_type=get_primary_type(False, witness is not None),
            values=values,
        )
        logger.debug(
            "Built %s typed data (chain_id=%s, verifyingContract=%s)",
            data.primary_type, chain_id, domain.verifyingContract,
        )
        return data

    @staticmethod
    def get_permit_batch_transfer_data(
        permit: Union[PermitBatchTransferFrom, Mapping[str, Any]],
        permit2_address: Optional[str],
        chain_id: int,
        witness: Optional[WitnessLike] = None,
    ) -> PermitBatchTransferFromData:
        permit = parse_permit(permit)
        if not isinstance(permit, PermitBatchTransferFrom):
            raise TypeError("get_permit_batch_transfer_data expects a batch permit")
        witness = _parse_witness(witness)

        validate_permit_bounds(permit)
        domain = permit2_domain(resolve_permit2_address(permit2_address), chain_id)

        values: Union[PermitBatchTransferFrom, PermitBatchWitnessTransferFrom] = permit
        if witness is not None:
            values = PermitBatchWitnessTransferFrom(
                permitted=permit.permitted,
                spender=permit.spender,
                nonce=permit.nonce,
                deadline=permit.deadline,
                witness=witness.witness,
            )

        data = PermitBatchTransferFromData(
            domain=domain,
            types=build_permit_types(batch=True, witness=witness),
            primary_type=get_primary_type(True, witness is not None),
            values=values,
        )
        logger.debug(
            "Built %s typed data for %d tokens (chain_id=%s, verifyingContract=%s)",
            data.primary_type, len(permit.permitted), chain_id, domain.verifyingContract,
        )
        return data

    @staticmethod
    def get_permit_data(
        permit: Union[Permit, Mapping[str, Any]],
        permit2_address: Optional[str],
        chain_id: int,
        witness: Optional[WitnessLike] = None,
    ) -> PermitData:
        """
        Return the data to be sent in an ``eth_signTypedData`` call for ``permit``.

        Dispatches on the permit shape: a ``permitted`` list selects the batch
        builder (even with a single entry), a single struct the single builder.

        Args:
            permit:          ``PermitTransferFrom``, ``PermitBatchTransferFrom``
                             or an equivalent mapping.
            permit2_address: Permit2 contract address used as
                             ``verifyingContract``; ``None`` resolves it from
                             configuration.
            chain_id:        EVM network ID.
            witness:         Optional ``Witness`` (or mapping with ``witness``,
                             ``witnessTypeName`` and ``witnessType``).

        Returns:
            ``PermitTransferFromData`` or ``PermitBatchTransferFromData``.

        Raises:
            PermitRangeError: If deadline, nonce or an amount exceeds its maximum.
            pydantic.ValidationError: If a mapping is not a valid permit or witness.
        """
        if is_permit_transfer_from(permit):
            return SignatureTransfer.get_permit_transfer_data(permit, permit2_address, chain_id, witness)
        return SignatureTransfer.get_permit_batch_transfer_data(permit, permit2_address, chain_id, witness)

    @staticmethod
    def hash(
        permit: Union[Permit, Mapping[str, Any]],
        permit2_address: Optional[str],
        chain_id: int,
        witness: Optional[WitnessLike] = None,
    ) -> str:
        """
        Compute the EIP-712 digest a wallet would sign for ``permit``.

        Accepts the same arguments as ``get_permit_data``.

        Returns:
            0x-prefixed 66-character hex string; a pure function of the inputs.
        """
        data = SignatureTransfer.get_permit_data(permit, permit2_address, chain_id, witness)
        return hash_typed_data(data.to_dict())

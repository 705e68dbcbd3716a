"""
Permit2 Signature-Transfer Schema Models

Pydantic models for the structs signed in a Permit2 signature transfer.  All
classes inherit from ``CanonicalModel`` and are immutable once built.

Permit classes:
    - TokenPermissions: A token address and the maximum amount that may be
      pulled with the permit.
    - PermitTransferFrom: Single-token permit.  ``permit_type`` tags it as the
      single variant.
    - PermitBatchTransferFrom: Multi-token permit.  ``permitted`` is an ordered
      list; order is significant for hashing.

Witness classes:
    - Witness: Generic descriptor attaching application data (and the EIP-712
      types describing it) to a permit.
    - WitnessStruct: Base for pydantic witness payloads that carry their own
      EIP-712 type name and schema.
    - PermitWitnessTransferFrom / PermitBatchWitnessTransferFrom: Permit records
      extended with the witness payload; the message signed when a witness is
      present.

Helpers:
    - parse_permit: Coerce a plain mapping (e.g. parsed JSON) into the matching
      permit model.
    - is_permit_transfer_from: Structural single/batch check.
"""

import json
from typing import Any, ClassVar, Dict, Generic, List, Literal, Mapping, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from web3 import Web3


#: EIP-712 struct declarations: type name -> ordered ``[{"name", "type"}]`` fields.
TypeDeclarations = Dict[str, List[Dict[str, str]]]


def _to_checksum_address(value: str) -> str:
    """Validate a 0x-prefixed 42-char address and return its EIP-55 form."""
    if not isinstance(value, str) or not value.startswith("0x"):
        raise ValueError("address must be a 0x-prefixed string")
    if len(value) != 42:
        raise ValueError(f"address must be 42 characters (0x + 40 hex), got {len(value)}")
    return Web3.to_checksum_address(value)


class CanonicalModel(BaseModel):
    """
    Immutable Pydantic base model with canonical JSON serialization.

    Provides a deterministic JSON representation (sorted keys, no extra
    whitespace) suitable for logging, fixtures and comparisons.  Models are
    frozen, so a permit handed to the typed-data builders can never be
    altered by them.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_canonical_json(self) -> str:
        """
        Convert model to canonical JSON string.

        Returns:
            str: JSON string with sorted keys and no extra whitespace.

        Example:
            TokenPermissions(token="0x" + "a" * 40, amount=1).to_canonical_json()
            # '{"amount":1,"token":"0x..."}'
        """
        data = self.model_dump(mode="json", by_alias=True)
        return json.dumps(
            data,
            separators=(",", ":"),
            sort_keys=True,
            ensure_ascii=False
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model to dictionary representation.

        Returns:
            Dict[str, Any]: Dictionary with all model fields.
        """
        return self.model_dump()


# ---------------------------------------------------------------------------
# Permit structs
# ---------------------------------------------------------------------------


class TokenPermissions(CanonicalModel):
    """
    ``TokenPermissions(address token,uint256 amount)``.

    Attributes:
        token: ERC-20 token contract address (stored checksummed).
        amount: Maximum amount the spender may transfer, in the token's
            smallest unit.  Upper bound is enforced when typed data is built.
    """

    token: str = Field(..., description="ERC-20 token contract address")
    amount: int = Field(..., ge=0, description="Maximum transferable amount (uint256)")

    @field_validator("token")
    @classmethod
    def checksum_token(cls, value: str) -> str:
        return _to_checksum_address(value)

    def to_message(self) -> Dict[str, Any]:
        return {"token": self.token, "amount": self.amount}


class _PermitFields(CanonicalModel):
    """Fields shared by the single and batch permit variants."""

    spender: str = Field(..., description="Address allowed to call permitTransferFrom")
    nonce: int = Field(..., ge=0, description="Unordered (bitmap) nonce")
    deadline: int = Field(..., ge=0, description="Unix timestamp after which the signature is invalid")

    @field_validator("spender")
    @classmethod
    def checksum_spender(cls, value: str) -> str:
        return _to_checksum_address(value)

    def _base_message(self) -> Dict[str, Any]:
        return {"spender": self.spender, "nonce": self.nonce, "deadline": self.deadline}


class PermitTransferFrom(_PermitFields):
    """
    Single-token signature-transfer permit.

    Example::

        permit = PermitTransferFrom(
            permitted=TokenPermissions(
                token="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
                amount=1_000_000,
            ),
            spender="0x1234567890123456789012345678901234567890",
            nonce=0,
            deadline=1_900_000_000,
        )
    """

    permit_type: Literal["PermitTransferFrom"] = Field(
        default="PermitTransferFrom", description="Permit variant tag"
    )
    permitted: TokenPermissions

    def to_message(self) -> Dict[str, Any]:
        """Return the EIP-712 message dict (the ``permit_type`` tag is not signed)."""
        return {"permitted": self.permitted.to_message(), **self._base_message()}


class PermitBatchTransferFrom(_PermitFields):
    """
    Multi-token signature-transfer permit.

    ``permitted`` keeps caller order; every entry is bounds-checked on its own.
    A list with a single entry is still a batch permit.
    """

    permit_type: Literal["PermitBatchTransferFrom"] = Field(
        default="PermitBatchTransferFrom", description="Permit variant tag"
    )
    permitted: List[TokenPermissions]

    def to_message(self) -> Dict[str, Any]:
        return {
            "permitted": [permission.to_message() for permission in self.permitted],
            **self._base_message(),
        }


Permit = Union[PermitTransferFrom, PermitBatchTransferFrom]


# ---------------------------------------------------------------------------
# Witness
# ---------------------------------------------------------------------------

WitnessT = TypeVar("WitnessT")


class WitnessStruct(CanonicalModel):
    """
    Base class for witness payloads described by their own EIP-712 types.

    Subclasses declare the struct name and its type declarations as class
    attributes, and the payload fields as ordinary model fields::

        class ExampleTrade(WitnessStruct):
            witness_type_name: ClassVar[str] = "ExampleTrade"
            witness_type: ClassVar[TypeDeclarations] = {
                "ExampleTrade": [{"name": "exampleField", "type": "uint256"}],
            }

            exampleField: int

        witness = Witness.from_struct(ExampleTrade(exampleField=1))
    """

    witness_type_name: ClassVar[str]
    witness_type: ClassVar[TypeDeclarations]

    def to_message(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class Witness(CanonicalModel, Generic[WitnessT]):
    """
    Application data bound into a permit signature.

    Attributes:
        witness: The payload, hashed as the ``witness`` field of the extended
            primary struct.  A ``WitnessStruct``, any pydantic model, or a plain
            mapping keyed by EIP-712 field name.
        witness_type_name: EIP-712 type name of the payload
            (alias ``witnessTypeName``).
        witness_type: Every struct declaration the payload needs, including
            nested ones (alias ``witnessType``).  Not validated further; an
            incomplete schema fails when hashing.
    """

    witness: WitnessT
    witness_type_name: str = Field(..., alias="witnessTypeName")
    witness_type: TypeDeclarations = Field(..., alias="witnessType")

    @classmethod
    def from_struct(cls, struct: WitnessStruct) -> "Witness":
        """Build a witness from a ``WitnessStruct`` using its declared schema."""
        return cls(
            witness=struct,
            witness_type_name=type(struct).witness_type_name,
            witness_type=type(struct).witness_type,
        )

    def to_message(self) -> Any:
        """Return the payload as it appears in the signed message."""
        return witness_message(self.witness)


def witness_message(payload: Any) -> Any:
    if isinstance(payload, WitnessStruct):
        return payload.to_message()
    if isinstance(payload, BaseModel):
        return payload.model_dump(by_alias=True)
    return payload


class PermitWitnessTransferFrom(PermitTransferFrom):
    """
    ``PermitTransferFrom`` extended with a ``witness`` payload.

    Still a single-token permit (``permitted`` is one struct); ``permit_type``
    names the extended struct that is signed.
    """

    permit_type: Literal["PermitWitnessTransferFrom"] = Field(  # type: ignore[assignment]
        default="PermitWitnessTransferFrom", description="Permit variant tag"
    )
    witness: Any

    def to_message(self) -> Dict[str, Any]:
        message = super().to_message()
        message["witness"] = witness_message(self.witness)
        return message


class PermitBatchWitnessTransferFrom(PermitBatchTransferFrom):
    """``PermitBatchTransferFrom`` extended with a ``witness`` payload."""

    permit_type: Literal["PermitBatchWitnessTransferFrom"] = Field(  # type: ignore[assignment]
        default="PermitBatchWitnessTransferFrom", description="Permit variant tag"
    )
    witness: Any

    def to_message(self) -> Dict[str, Any]:
        message = super().to_message()
        message["witness"] = witness_message(self.witness)
        return message


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------


def is_permit_transfer_from(permit: Union[Permit, Mapping[str, Any]]) -> bool:
    """
    Return ``True`` for a single permit, ``False`` for a batch permit.

    The check is structural: a permit is a batch permit iff ``permitted`` is
    an ordered sequence rather than a single struct.
    """
    permitted = permit.get("permitted") if isinstance(permit, Mapping) else permit.permitted
    return not isinstance(permitted, (list, tuple))


def parse_permit(permit: Union[Permit, Mapping[str, Any]]) -> Permit:
    """
    Coerce ``permit`` into ``PermitTransferFrom`` or ``PermitBatchTransferFrom``.

    Model instances are returned unchanged.  Mappings are validated into the
    variant selected by ``is_permit_transfer_from``.

    Raises:
        pydantic.ValidationError: If the mapping does not describe a permit.
    """
    if isinstance(permit, (PermitTransferFrom, PermitBatchTransferFrom)):
        return permit
    if is_permit_transfer_from(permit):
        return PermitTransferFrom.model_validate(permit)
    return PermitBatchTransferFrom.model_validate(permit)

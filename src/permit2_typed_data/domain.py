from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from web3 import Web3

from .constants import PERMIT2_DOMAIN_NAME


# -----------------------------
# EIP-712 Domain
# -----------------------------

# Field order of the EIP712Domain struct; absent fields are skipped.
_DOMAIN_FIELD_TYPES = (
    ("name", "string"),
    ("version", "string"),
    ("chainId", "uint256"),
    ("verifyingContract", "address"),
)


@dataclass(frozen=True)
class EIP712Domain:
    """
    EIP-712 domain separator fields.
    Used to prevent signature replay across contracts, chains and versions.

    ``version`` is optional: Permit2 signs without one, and an absent field
    is left out of both the domain values and the ``EIP712Domain`` type.
    """
    name: str
    chainId: int
    verifyingContract: str
    version: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            key: getattr(self, key)
            for key, _ in _DOMAIN_FIELD_TYPES
            if getattr(self, key) is not None
        }

    def eip712_type(self) -> List[Dict[str, str]]:
        """Return the ``EIP712Domain`` declaration matching the populated fields."""
        return [
            {"name": key, "type": type_}
            for key, type_ in _DOMAIN_FIELD_TYPES
            if getattr(self, key) is not None
        ]


def permit2_domain(permit2_address: str, chain_id: int) -> EIP712Domain:
    """
    Build the Permit2 signing domain.

    Args:
        permit2_address: Permit2 contract address (the ``verifyingContract``).
        chain_id:        EVM network ID (e.g. ``1`` Mainnet, ``8453`` Base).

    Returns:
        ``EIP712Domain`` with ``name="Permit2"`` and no ``version``.
    """
    return EIP712Domain(
        name=PERMIT2_DOMAIN_NAME,
        chainId=chain_id,
        verifyingContract=Web3.to_checksum_address(permit2_address),
    )

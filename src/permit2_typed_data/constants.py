"""
Permit2 Protocol Constants

Protocol-fixed maxima used to bounds-check signature-transfer permits, the
canonical Permit2 deployment address, and environment-aware resolution of
the address used as the EIP-712 ``verifyingContract``.
"""

import os
from typing import Optional

from web3 import Web3
import dotenv

from .exceptions import ConfigurationError

dotenv.load_dotenv()

# ---------------------------------------------------------------------------
# Integer widths
# ---------------------------------------------------------------------------

MAX_UINT48: int = 2**48 - 1
MAX_UINT160: int = 2**160 - 1
MAX_UINT256: int = 2**256 - 1

# ---------------------------------------------------------------------------
# Signature-transfer bounds (all inclusive)
# ---------------------------------------------------------------------------

#: Largest ``deadline`` accepted in a signature-transfer permit.
MAX_SIG_DEADLINE: int = MAX_UINT256

#: Largest unordered (bitmap) ``nonce`` accepted in a signature-transfer permit.
MAX_UNORDERED_NONCE: int = MAX_UINT256

#: Largest ``TokenPermissions.amount`` accepted in a signature-transfer permit.
MAX_SIGNATURE_TRANSFER_AMOUNT: int = MAX_UINT256

# ---------------------------------------------------------------------------
# Deployment
# ---------------------------------------------------------------------------

#: Canonical Permit2 singleton, deployed at the same address on every EVM chain (CREATE2).
PERMIT2_ADDRESS: str = "0x000000000022D473030F116dDEE9F6B43aC78BA3"

#: EIP-712 domain ``name`` of the Permit2 contract.
PERMIT2_DOMAIN_NAME: str = "Permit2"

#: Environment variable overriding ``PERMIT2_ADDRESS``.
PERMIT2_ADDRESS_ENV: str = "permit2_address"


def resolve_permit2_address(address: Optional[str] = None) -> str:
    """
    Resolve the Permit2 contract address to use as ``verifyingContract``.

    Resolution order: the explicit ``address`` argument, then the
    ``permit2_address`` environment variable (``.env`` files are honoured),
    then the canonical ``PERMIT2_ADDRESS``.

    Args:
        address: Explicit address; returned checksummed when given.

    Returns:
        EIP-55 checksummed address string.

    Raises:
        ConfigurationError: If the environment value is not a valid address.
    """
    if address is not None:
        return Web3.to_checksum_address(address)

    configured = os.getenv(PERMIT2_ADDRESS_ENV)
    if not configured:
        return PERMIT2_ADDRESS

    if not Web3.is_address(configured):
        raise ConfigurationError(
            f"{PERMIT2_ADDRESS_ENV} is not a valid EVM address: {configured!r}"
        )
    return Web3.to_checksum_address(configured)

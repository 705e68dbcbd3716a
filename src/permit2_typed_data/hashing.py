"""
EIP-712 Typed-Data Hashing

Thin wrapper over ``eth_account`` producing the final EIP-712 digest
``keccak256(0x19 || 0x01 || domainSeparator || hashStruct(message))`` of a
complete ``eth_signTypedData_v4`` payload.  Everything is computed
in-process; no RPC calls are made.
"""

import logging
from typing import Any, Dict, List, Mapping

from eth_account.messages import encode_typed_data
from eth_utils import keccak

logger = logging.getLogger(__name__)


def _reachable_types(types: Mapping[str, Any], primary_type: str) -> List[str]:
    """Return ``primary_type`` and every struct it references, directly or nested."""
    reachable: List[str] = []
    pending = [primary_type]
    while pending:
        name = pending.pop()
        if name in reachable or name not in types:
            continue
        reachable.append(name)
        for field in types[name]:
            # "Inner[]" and "Inner[2]" both reference "Inner"
            pending.append(field["type"].split("[", 1)[0])
    return reachable


def _select_types(typed_data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Drop declarations the primary type never reaches.

    ``eth_account`` infers the primary type from the type graph and rejects
    payloads with more than one root, so encoding starts from the explicit
    ``primaryType`` instead.  ``EIP712Domain`` is always kept.
    """
    full_message = dict(typed_data)
    primary_type = full_message.get("primaryType")
    if primary_type is None:
        return full_message

    types = full_message["types"]
    selected = {name: types[name] for name in _reachable_types(types, primary_type)}
    if "EIP712Domain" in types:
        selected["EIP712Domain"] = types["EIP712Domain"]
    full_message["types"] = selected
    return full_message


def hash_typed_data(typed_data: Mapping[str, Any]) -> str:
    """
    Hash a typed-data payload the way an EIP-712 signer would before signing.

    Args:
        typed_data: Mapping with ``domain``, ``types``, ``primaryType`` and
            ``message`` entries.  ``types`` may include or omit the
            ``EIP712Domain`` declaration; when omitted it is inferred from
            the populated domain fields.

    Returns:
        0x-prefixed 66-character hex string.

    Example::

        digest = hash_typed_data(data.to_dict())
    """
    signable = encode_typed_data(full_message=_select_types(typed_data))
    digest: bytes = keccak(b"\x19" + signable.version + signable.header + signable.body)
    result = "0x" + digest.hex()
    logger.debug("Hashed %s typed data: %s", typed_data.get("primaryType"), result)
    return result

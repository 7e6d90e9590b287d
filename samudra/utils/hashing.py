"""
Hashing and identifier utilities.
"""

import hashlib
import json
import secrets
import string
from typing import Any, Dict

from samudra.utils.time import epoch_millis

_ID_ALPHABET = string.ascii_lowercase + string.digits


def hash_payload(payload: Dict[str, Any]) -> str:
    """
    Generate SHA-256 hash of a payload.

    Args:
        payload: Dictionary to hash

    Returns:
        Hexadecimal SHA-256 hash string
    """
    # Sort keys for consistent hashing
    payload_str = json.dumps(payload, sort_keys=True, default=str)
    return hashlib.sha256(payload_str.encode()).hexdigest()


def generate_id(prefix: str) -> str:
    """Build a store key such as ``project_1718000000000_k3j9x0a2b``."""
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{prefix}_{epoch_millis()}_{suffix}"


def evidence_cid(payload: Dict[str, Any]) -> str:
    """Content identifier for an evidence bundle (IPFS-style ``Qm`` prefix)."""
    return f"Qm{hash_payload(payload)[:44]}"

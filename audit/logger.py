"""Offline audit trail of integrity decisions.

Each record is a JSON file signed with a per-directory Ed25519 key and chained
to its predecessor through a SHA3-512 hash, so deleting or editing a record
breaks verification of the ones that follow.
"""
from __future__ import annotations

import hashlib
import json
import os
import time
import uuid
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey

GENESIS = "GENESIS"
KEY_FILE = "signing_key.pem"
CHAIN_STATE_FILE = "chain.state"


def audit_dir() -> Path:
    """Return the directory where audit records are stored.

    ``DEVICE_INTEGRITY_AUDIT_DIR`` overrides the default location in the
    user's home directory. The directory is created on first use.
    """

    override = os.environ.get("DEVICE_INTEGRITY_AUDIT_DIR")
    directory = Path(override).expanduser() if override else Path.home() / ".device_integrity_audit"
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def _load_private_key(directory: Path) -> Ed25519PrivateKey:
    key_path = directory / KEY_FILE
    if key_path.exists():
        key = serialization.load_pem_private_key(key_path.read_bytes(), password=None)
        if not isinstance(key, Ed25519PrivateKey):
            raise ValueError(f"{key_path} does not hold an Ed25519 key")
        return key
    private_key = Ed25519PrivateKey.generate()
    key_path.write_bytes(
        private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
    )
    return private_key


def _load_public_key(directory: Path) -> Optional[Ed25519PublicKey]:
    """Read-only counterpart of :func:`_load_private_key`; never creates a key."""

    key_path = directory / KEY_FILE
    if not key_path.is_file():
        return None
    key = serialization.load_pem_private_key(key_path.read_bytes(), password=None)
    if not isinstance(key, Ed25519PrivateKey):
        return None
    return key.public_key()


def _encode(payload: Dict[str, Any]) -> bytes:
    return json.dumps(payload, ensure_ascii=False, sort_keys=True).encode("utf-8")


def last_chain_hash() -> str:
    try:
        return (audit_dir() / CHAIN_STATE_FILE).read_text().strip() or GENESIS
    except FileNotFoundError:
        return GENESIS


def record_event(event: str, *, details: Dict[str, Any] | None = None) -> Path:
    """Append a signed record for *event* and return its path."""

    directory = audit_dir()
    timestamp = int(time.time())
    payload = {
        "event": event,
        "details": details or {},
        "timestamp": timestamp,
        "prev_hash": last_chain_hash(),
    }
    message = _encode(payload)
    signature = _load_private_key(directory).sign(message)
    chain_hash = hashlib.sha3_512(message + signature).hexdigest()
    entry = {
        "payload": payload,
        "signature": signature.hex(),
        "chain_hash": chain_hash,
    }
    file_path = directory / f"audit_{timestamp}_{uuid.uuid4().hex}.json"
    file_path.write_text(json.dumps(entry, ensure_ascii=False, indent=2))
    (directory / CHAIN_STATE_FILE).write_text(chain_hash)
    return file_path


def verify_log(path: os.PathLike[str] | str) -> bool:
    """Check the signature and chain hash of a single record."""

    data = json.loads(Path(path).read_text())
    public_key = _load_public_key(Path(path).parent)
    if public_key is None:
        return False
    message = _encode(data["payload"])
    try:
        signature = bytes.fromhex(data.get("signature") or "")
        public_key.verify(signature, message)
    except (InvalidSignature, ValueError):
        return False
    return hashlib.sha3_512(message + signature).hexdigest() == data.get("chain_hash")


def iter_records() -> Iterator[Dict[str, Any]]:
    """Yield stored records ordered along the hash chain."""

    entries: List[Dict[str, Any]] = [
        json.loads(path.read_text()) for path in audit_dir().glob("audit_*.json")
    ]
    by_prev = {entry["payload"]["prev_hash"]: entry for entry in entries}
    current = GENESIS
    while current in by_prev:
        entry = by_prev.pop(current)
        yield entry
        current = entry["chain_hash"]


__all__ = ["audit_dir", "iter_records", "last_chain_hash", "record_event", "verify_log"]

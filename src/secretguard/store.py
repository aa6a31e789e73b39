# ABOUTME: Local encrypted key-value store backing the MCP vault.
# ABOUTME: Single AES-256-GCM file: IV(16) | tag(16) | ciphertext of a JSON object.
import hashlib
import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from secretguard.utils.files import atomic_write_bytes, ensure_private_dir

logger = logging.getLogger(__name__)

STORE_FILE = "secrets.enc"
META_FILE = "secrets.meta.json"

IV_LENGTH = 16
TAG_LENGTH = 16


class VaultCorruptedError(RuntimeError):
    """Raised by strict reads when the store cannot be decrypted or parsed."""


def derive_key(key_material: str) -> bytes:
    """Turn key material into a 256-bit AES key (SHA-256)."""
    return hashlib.sha256(key_material.encode("utf-8")).digest()


def encrypt(key: bytes, plaintext: bytes) -> bytes:
    """Encrypt with AES-256-GCM and a random 16-byte IV.

    ABOUTME: AESGCM appends the tag to the ciphertext, we move it in front
    """
    iv = os.urandom(IV_LENGTH)
    sealed = AESGCM(key).encrypt(iv, plaintext, None)
    ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
    return iv + tag + ciphertext


def decrypt(key: bytes, data: bytes) -> bytes:
    """Decrypt IV | tag | ciphertext.

    Raises:
        InvalidTag: On wrong key, truncation or tampering
    """
    if len(data) < IV_LENGTH + TAG_LENGTH:
        raise InvalidTag()
    iv = data[:IV_LENGTH]
    tag = data[IV_LENGTH:IV_LENGTH + TAG_LENGTH]
    ciphertext = data[IV_LENGTH + TAG_LENGTH:]
    return AESGCM(key).decrypt(iv, ciphertext + tag, None)


class LocalStore:
    """Encrypted flat key -> value store in one directory.

    ABOUTME: The only writer of secrets.enc and secrets.meta.json
    ABOUTME: Corrupt data reads as empty; writes over corrupt data start fresh
    ABOUTME: Read-merge-write cycles are serialized by a per-instance lock
    """

    def __init__(self, store_dir: Path, key_material: str) -> None:
        self.store_dir = Path(store_dir)
        self._key = derive_key(key_material)
        self._lock = threading.Lock()

    @property
    def store_path(self) -> Path:
        return self.store_dir / STORE_FILE

    @property
    def meta_path(self) -> Path:
        return self.store_dir / META_FILE

    def _load(self, strict: bool = False) -> dict[str, str]:
        if not self.store_path.exists():
            return {}

        try:
            plaintext = decrypt(self._key, self.store_path.read_bytes())
            data = json.loads(plaintext.decode("utf-8"))
            if not isinstance(data, dict):
                raise ValueError("store root is not an object")
        except (InvalidTag, ValueError, OSError) as e:
            if strict:
                raise VaultCorruptedError(
                    f"Cannot decrypt {self.store_path} (wrong key or corrupted store)"
                ) from e
            logger.warning(f"Ignoring unreadable vault store {self.store_path}")
            return {}

        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _save(self, data: dict[str, str]) -> None:
        ensure_private_dir(self.store_dir)
        plaintext = json.dumps(data).encode("utf-8")
        atomic_write_bytes(self.store_path, encrypt(self._key, plaintext))

    def _load_meta(self) -> dict[str, Any]:
        meta: dict[str, Any] = {"version": "1", "entries": {}}
        try:
            if self.meta_path.exists():
                loaded = json.loads(self.meta_path.read_text(encoding="utf-8"))
                if isinstance(loaded, dict) and isinstance(loaded.get("entries"), dict):
                    meta = loaded
        except (OSError, ValueError):
            logger.debug(f"Resetting unreadable metadata {self.meta_path}")
        return meta

    def _save_meta(self, meta: dict[str, Any]) -> None:
        # Advisory only, a failure here must not undo the secret write
        try:
            content = json.dumps(meta, indent=2) + "\n"
            atomic_write_bytes(self.meta_path, content.encode("utf-8"))
        except OSError as e:
            logger.warning(f"Could not update vault metadata {self.meta_path}: {e}")

    def resolve(self, prefix: str, strict: bool = False) -> dict[str, str]:
        """Return every entry whose key equals prefix or lives under prefix/.

        Args:
            prefix: Exact key or key prefix without trailing slash
            strict: Raise VaultCorruptedError instead of returning {} on bad data

        Returns:
            Mapping of full key to value
        """
        data = self._load(strict=strict)
        return {
            key: value
            for key, value in data.items()
            if key == prefix or key.startswith(prefix + "/")
        }

    def store(self, key: str, value: str) -> None:
        """Store one entry, overwriting any existing value."""
        self.store_many({key: value})

    def store_many(self, entries: dict[str, str]) -> None:
        """Merge entries into the store in one encrypt-and-write cycle.

        ABOUTME: Keys not in entries are kept (additive merge)
        """
        if not entries:
            return

        with self._lock:
            data = self._load()
            data.update(entries)
            self._save(data)

            meta = self._load_meta()
            created_at = datetime.now(timezone.utc).isoformat()
            for key in entries:
                meta["entries"][key] = {"created_at": created_at}
            self._save_meta(meta)

        logger.info(f"Stored {len(entries)} secret(s) in {self.store_path}")

    def delete_many(self, keys: list[str]) -> int:
        """Delete entries by key.

        Returns:
            Number of keys that existed and were removed
        """
        with self._lock:
            data = self._load()
            present = [key for key in keys if key in data]
            if not present:
                return 0

            for key in present:
                del data[key]
            self._save(data)

            meta = self._load_meta()
            for key in present:
                meta["entries"].pop(key, None)
            self._save_meta(meta)

        return len(present)

    def delete(self, key: str) -> bool:
        """Delete one entry. Returns True if the key existed."""
        return self.delete_many([key]) == 1

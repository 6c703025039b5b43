"""
One-way hashing for passwords and one-time codes.

bcrypt with SHA-256 pre-hashing. The bcrypt work runs in a worker thread so
callers on the event loop are not blocked.

Example:
    hasher = CredentialHasher(rounds=10)

    digest = await hasher.hash("secret1")
    assert await hasher.verify("secret1", digest)
"""

import asyncio
import base64
import hashlib

import bcrypt as bcrypt_lib


class HashingError(RuntimeError):
    """Underlying hashing library failure. Not a validation outcome."""


class CredentialHasher:
    """
    Salted, cost-parameterized hashing and constant-time verification.
    """

    DEFAULT_ROUNDS = 10

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        """
        Initialize hasher.

        Args:
            rounds: bcrypt work factor (log2 of iterations)
        """
        self.rounds = rounds

    def _prehash(self, plaintext: str) -> bytes:
        """
        Pre-hash with SHA-256 before bcrypt.

        This handles bcrypt's 72-byte limit and ensures consistent
        behavior across all input lengths.
        """
        sha256_hash = hashlib.sha256(plaintext.encode("utf-8")).digest()
        return base64.b64encode(sha256_hash)

    def _hash_sync(self, plaintext: str) -> str:
        try:
            salt = bcrypt_lib.gensalt(rounds=self.rounds)
            return bcrypt_lib.hashpw(self._prehash(plaintext), salt).decode("utf-8")
        except (TypeError, ValueError) as e:
            raise HashingError(f"Hashing failed: {e}") from e

    def _verify_sync(self, plaintext: str, digest: str) -> bool:
        try:
            return bcrypt_lib.checkpw(self._prehash(plaintext), digest.encode("utf-8"))
        except ValueError:
            # Malformed digest - never a match
            return False

    async def hash(self, plaintext: str) -> str:
        """
        Hash a plaintext secret.

        Raises:
            HashingError: If bcrypt fails
        """
        return await asyncio.to_thread(self._hash_sync, plaintext)

    async def verify(self, plaintext: str, digest: str) -> bool:
        """Check a plaintext secret against a stored digest."""
        if not digest:
            return False
        return await asyncio.to_thread(self._verify_sync, plaintext, digest)

"""
Credential Hashing Module

Salted, iterated password hashing with PBKDF2-HMAC.

Stored format: base64 of `salt || derived_key`, 16 + 20 = 36 raw bytes with
the default parameters. The default PRF (HMAC-SHA1) and iteration count keep
hashes produced by earlier deployments of the ledger verifiable.
"""

import base64
import binascii
import hashlib
import hmac
import secrets
from typing import Tuple

from .config import LedgerConfig
from .errors import MalformedCredentialRecord


DEFAULT_ITERATIONS = 10000
DEFAULT_HASH_NAME = "sha1"
DEFAULT_SALT_LENGTH = 16
DEFAULT_DERIVED_KEY_LENGTH = 20


class CredentialHasher:
    """
    Derives and verifies salted PBKDF2 password hashes.
    
    The iteration count is a cost parameter: raise it to slow offline
    guessing, bounded by acceptable login latency. Instances hold no mutable
    state and may be shared between threads.
    """
    
    def __init__(
        self,
        iterations: int = DEFAULT_ITERATIONS,
        hash_name: str = DEFAULT_HASH_NAME,
        salt_length: int = DEFAULT_SALT_LENGTH,
        derived_key_length: int = DEFAULT_DERIVED_KEY_LENGTH
    ):
        if iterations < 1:
            raise ValueError("iterations must be at least 1")
        if salt_length < 1 or derived_key_length < 1:
            raise ValueError("salt and derived key lengths must be positive")
        if hash_name not in hashlib.algorithms_available:
            raise ValueError(f"Unsupported hash algorithm '{hash_name}'")
        
        self.iterations = iterations
        self.hash_name = hash_name
        self.salt_length = salt_length
        self.derived_key_length = derived_key_length
    
    @classmethod
    def from_config(cls, config: LedgerConfig) -> 'CredentialHasher':
        """Build a hasher from the KDF settings of a LedgerConfig"""
        return cls(
            iterations=config.kdf_iterations,
            hash_name=config.kdf_hash_name,
            salt_length=config.salt_length,
            derived_key_length=config.derived_key_length
        )
    
    @property
    def record_length(self) -> int:
        """Length in raw bytes of a decoded stored hash"""
        return self.salt_length + self.derived_key_length
    
    def _derive(self, password: str, salt: bytes) -> bytes:
        return hashlib.pbkdf2_hmac(
            self.hash_name,
            password.encode("utf-8"),
            salt,
            self.iterations,
            dklen=self.derived_key_length
        )
    
    def hash(self, password: str) -> str:
        """
        Hash a plaintext password with a fresh random salt.
        
        Args:
            password: Plaintext password
            
        Returns:
            Base64 text of salt followed by the derived key
        """
        salt = secrets.token_bytes(self.salt_length)
        derived = self._derive(password, salt)
        return base64.b64encode(salt + derived).decode("ascii")
    
    def decode(self, encoded_hash: str) -> Tuple[bytes, bytes]:
        """
        Split a stored hash into (salt, derived_key).
        
        Raises:
            MalformedCredentialRecord: If the value is not valid base64 of
                exactly `record_length` bytes
        """
        if not isinstance(encoded_hash, str):
            raise MalformedCredentialRecord("Stored credential hash must be a string")
        try:
            raw = base64.b64decode(encoded_hash.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError):
            raise MalformedCredentialRecord("Stored credential hash is not valid base64") from None
        if len(raw) != self.record_length:
            raise MalformedCredentialRecord(
                f"Stored credential hash decodes to {len(raw)} bytes, expected {self.record_length}"
            )
        return raw[:self.salt_length], raw[self.salt_length:]
    
    def is_well_formed(self, encoded_hash: str) -> bool:
        try:
            self.decode(encoded_hash)
        except MalformedCredentialRecord:
            return False
        return True
    
    def verify(self, password: str, encoded_hash: str) -> bool:
        """
        Check a plaintext password against a stored hash.
        
        The derived keys are compared in constant time. A malformed stored
        hash never matches.
        """
        try:
            salt, stored = self.decode(encoded_hash)
        except MalformedCredentialRecord:
            return False
        candidate = self._derive(password, salt)
        return hmac.compare_digest(candidate, stored)

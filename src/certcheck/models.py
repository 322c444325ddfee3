"""Value objects for decoded certificates, keys and verification outcomes."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, padding
from pydantic import BaseModel, Field


class KeyAlgorithm(str, Enum):
    """Key algorithm tag attached to decoded keys and certificates."""

    RSA = "RSA"
    EC = "EC"
    ED25519 = "Ed25519"
    ED448 = "Ed448"
    UNKNOWN = "unknown"


class SignatureScheme(str, Enum):
    """Signature scheme a certificate was signed with."""

    RSA_PKCS1V15 = "RSA-PKCS1v15"
    RSA_PSS = "RSA-PSS"
    ECDSA = "ECDSA"
    ED25519 = "Ed25519"
    ED448 = "Ed448"
    UNSUPPORTED = "unsupported"

    @property
    def key_algorithm(self) -> KeyAlgorithm:
        """Key algorithm the signer must hold for this scheme."""
        return _SCHEME_KEY_ALGORITHMS[self]


_SCHEME_KEY_ALGORITHMS = {
    SignatureScheme.RSA_PKCS1V15: KeyAlgorithm.RSA,
    SignatureScheme.RSA_PSS: KeyAlgorithm.RSA,
    SignatureScheme.ECDSA: KeyAlgorithm.EC,
    SignatureScheme.ED25519: KeyAlgorithm.ED25519,
    SignatureScheme.ED448: KeyAlgorithm.ED448,
    SignatureScheme.UNSUPPORTED: KeyAlgorithm.UNKNOWN,
}


@dataclass(frozen=True)
class Certificate:
    """
    A fully decoded X.509 certificate.

    Optional extension fields use None for "extension absent" and a tuple
    (possibly empty) for "extension present".
    """

    subject: x509.Name
    issuer: x509.Name
    serial_number: int
    valid_from: datetime
    valid_to: datetime
    public_key: object = field(repr=False)
    public_key_algorithm: KeyAlgorithm
    public_key_size: int
    curve: Optional[str]
    signature_algorithm: str
    signature_scheme: SignatureScheme
    signature_hash_algorithm: Optional[hashes.HashAlgorithm] = field(repr=False)
    signature_padding: Optional[padding.AsymmetricPadding] = field(repr=False)
    raw_signature: bytes = field(repr=False)
    tbs_data: bytes = field(repr=False)
    subject_alt_names: Optional[Tuple[str, ...]]
    key_usage: Optional[Tuple[str, ...]]
    extended_key_usage: Optional[Tuple[str, ...]]
    fingerprint_sha256: str
    der: bytes = field(repr=False)


@dataclass(frozen=True)
class PrivateKey:
    """A decoded, unencrypted private key. The key handle never appears in repr()."""

    algorithm: KeyAlgorithm
    key_size: int
    curve: Optional[str]
    key: object = field(repr=False, compare=False)

    def sign(
        self,
        message: bytes,
        hash_algorithm: Optional[hashes.HashAlgorithm] = None
    ) -> bytes:
        """
        Sign a message with this key.

        Args:
            message: Bytes to sign
            hash_algorithm: Digest for RSA and ECDSA (default: SHA-256);
                ignored for EdDSA keys, which hash internally

        Returns:
            Raw signature bytes
        """
        hash_algorithm = hash_algorithm or hashes.SHA256()

        if self.algorithm is KeyAlgorithm.RSA:
            return self.key.sign(message, padding.PKCS1v15(), hash_algorithm)
        if self.algorithm is KeyAlgorithm.EC:
            return self.key.sign(message, ec.ECDSA(hash_algorithm))
        if self.algorithm in (KeyAlgorithm.ED25519, KeyAlgorithm.ED448):
            return self.key.sign(message)

        raise ValueError(f"Cannot sign with key algorithm: {self.algorithm.value}")

    def public_key(self):
        """Public half of this key."""
        return self.key.public_key()


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a single check: Verified, or Failed with a reason."""

    verified: bool
    reason: str = ""

    @classmethod
    def success(cls) -> "VerificationResult":
        return cls(verified=True)

    @classmethod
    def failure(cls, reason: str) -> "VerificationResult":
        return cls(verified=False, reason=reason)

    def __str__(self) -> str:
        return "Verified" if self.verified else f"Failed({self.reason})"


class CertificateSummary(BaseModel):
    """Human-readable summary of a certificate."""

    common_name: str = Field(..., description="First CN of the subject, or N/A")
    subject: str = Field(..., description="RFC 4514 subject string")
    issuer: str = Field(..., description="RFC 4514 issuer string")
    serial_number: str = Field(..., description="Serial number as hex")
    valid_from: datetime = Field(..., description="Start of validity (UTC)")
    valid_to: datetime = Field(..., description="End of validity (UTC)")
    sans: list[str] = Field(default_factory=list, description="Subject Alternative Names")
    public_key_algorithm: str = Field(..., description="Public key algorithm")
    public_key_size: int = Field(..., description="Public key size in bits")
    signature_algorithm: str = Field(..., description="Signature algorithm name")
    fingerprint_sha256: str = Field(..., description="SHA-256 fingerprint")
    key_usage: list[str] = Field(default_factory=list, description="Key usage flags")
    extended_key_usage: list[str] = Field(default_factory=list, description="Extended key usages")

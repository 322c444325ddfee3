"""Certificate signature and key-pair verification."""

from typing import Optional
import logging

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, padding

from .models import (
    Certificate,
    KeyAlgorithm,
    PrivateKey,
    SignatureScheme,
    VerificationResult,
)

logger = logging.getLogger(__name__)

PROBE_MESSAGE = b"test"
PROBE_HASH = hashes.SHA256()

_DIGEST_SCHEMES = (
    SignatureScheme.RSA_PKCS1V15,
    SignatureScheme.RSA_PSS,
    SignatureScheme.ECDSA,
)

# Scheme used for the key-pair probe signature
_PROBE_SCHEMES = {
    KeyAlgorithm.RSA: SignatureScheme.RSA_PKCS1V15,
    KeyAlgorithm.EC: SignatureScheme.ECDSA,
    KeyAlgorithm.ED25519: SignatureScheme.ED25519,
    KeyAlgorithm.ED448: SignatureScheme.ED448,
}


def _verify_signature(
    public_key,
    scheme: SignatureScheme,
    signature: bytes,
    data: bytes,
    hash_algorithm: Optional[hashes.HashAlgorithm],
    rsa_padding: Optional[padding.AsymmetricPadding] = None
) -> None:
    """
    Verify a signature with the primitive matching the scheme.

    Raises:
        InvalidSignature: If the signature does not match
    """
    if scheme is SignatureScheme.RSA_PKCS1V15:
        public_key.verify(signature, data, padding.PKCS1v15(), hash_algorithm)
    elif scheme is SignatureScheme.RSA_PSS:
        public_key.verify(signature, data, rsa_padding, hash_algorithm)
    elif scheme is SignatureScheme.ECDSA:
        public_key.verify(signature, data, ec.ECDSA(hash_algorithm))
    elif scheme in (SignatureScheme.ED25519, SignatureScheme.ED448):
        public_key.verify(signature, data)
    else:
        raise UnsupportedAlgorithm(f"No verifier for scheme {scheme.value}")


def _key_label(algorithm: KeyAlgorithm, curve: Optional[str]) -> str:
    return f"{algorithm.value} {curve}" if curve else algorithm.value


class CertificateVerifier:
    """Single-link signature and key-pair checks."""

    @staticmethod
    def verify_chain_link(leaf: Certificate, issuer: Certificate) -> VerificationResult:
        """
        Check that leaf was signed by the key of issuer.

        Only the signature is checked. Names, validity dates and trust
        anchors are not consulted.

        Args:
            leaf: Certificate whose signature is checked
            issuer: Certificate holding the expected signing key

        Returns:
            VerificationResult
        """
        leaf_name = leaf.subject.rfc4514_string()
        issuer_name = issuer.subject.rfc4514_string()
        logger.info(f"Verifying signature of {leaf_name} against issuer {issuer_name}")

        scheme = leaf.signature_scheme
        unsupported = (
            scheme is SignatureScheme.UNSUPPORTED
            or (scheme in _DIGEST_SCHEMES and leaf.signature_hash_algorithm is None)
            or (scheme is SignatureScheme.RSA_PSS and leaf.signature_padding is None)
        )
        if unsupported:
            logger.warning(f"Unsupported signature algorithm: {leaf.signature_algorithm}")
            return VerificationResult.failure(f"unsupported algorithm: {leaf.signature_algorithm}")

        if issuer.public_key_algorithm is not scheme.key_algorithm:
            logger.warning(
                f"Issuer key is {issuer.public_key_algorithm.value}, "
                f"leaf is signed with {leaf.signature_algorithm}"
            )
            return VerificationResult.failure(
                f"signature mismatch: issuer key is {issuer.public_key_algorithm.value} "
                f"but leaf is signed with {leaf.signature_algorithm}"
            )

        try:
            _verify_signature(
                issuer.public_key,
                scheme,
                leaf.raw_signature,
                leaf.tbs_data,
                leaf.signature_hash_algorithm,
                leaf.signature_padding,
            )
        except InvalidSignature:
            logger.warning(f"Invalid signature: {leaf_name} not signed by {issuer_name}")
            return VerificationResult.failure("signature mismatch")
        except UnsupportedAlgorithm as e:
            logger.warning(f"Backend cannot verify {leaf.signature_algorithm}: {e}")
            return VerificationResult.failure(f"unsupported algorithm: {leaf.signature_algorithm}")
        except ValueError as e:
            logger.warning(f"Signature verification error: {e}")
            return VerificationResult.failure(f"signature mismatch: {e}")

        logger.info(f"Signature of {leaf_name} verified against {issuer_name}")
        return VerificationResult.success()

    @staticmethod
    def verify_key_pair(cert: Certificate, key: PrivateKey) -> VerificationResult:
        """
        Check that key is the private half of the certificate's public key.

        Signs PROBE_MESSAGE with the key and verifies it with the certificate
        public key. This proves the keys correspond; it says nothing about
        the usage the key was issued for.

        Args:
            cert: Certificate holding the public key
            key: Candidate private key

        Returns:
            VerificationResult
        """
        logger.info(f"Verifying key pair for {cert.subject.rfc4514_string()}")

        if cert.public_key_algorithm is KeyAlgorithm.UNKNOWN:
            key_type = type(cert.public_key).__name__
            logger.warning(f"Unsupported certificate key type: {key_type}")
            return VerificationResult.failure(f"unsupported algorithm: {key_type}")

        if key.algorithm is not cert.public_key_algorithm or key.curve != cert.curve:
            cert_label = _key_label(cert.public_key_algorithm, cert.curve)
            key_label = _key_label(key.algorithm, key.curve)
            logger.warning(f"Key algorithm {key_label} does not match certificate {cert_label}")
            return VerificationResult.failure(
                f"algorithm mismatch between certificate ({cert_label}) and key ({key_label})"
            )

        try:
            signature = key.sign(PROBE_MESSAGE, PROBE_HASH)
            _verify_signature(
                cert.public_key,
                _PROBE_SCHEMES[key.algorithm],
                signature,
                PROBE_MESSAGE,
                PROBE_HASH,
            )
        except InvalidSignature:
            logger.warning("Private key does not match certificate public key")
            return VerificationResult.failure("signature verification failed")
        except Exception as e:
            logger.error(f"Key-pair check failed with {type(e).__name__}: {e}")
            return VerificationResult.failure(f"key-pair check error: {e}")

        logger.info("Private key matches certificate public key")
        return VerificationResult.success()


verify_chain_link = CertificateVerifier.verify_chain_link
verify_key_pair = CertificateVerifier.verify_key_pair

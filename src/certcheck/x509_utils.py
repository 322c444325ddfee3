"""X.509 certificate and private key decoding utilities."""

from pathlib import Path
from typing import Optional, Tuple
import logging

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.x509.oid import ExtendedKeyUsageOID, SignatureAlgorithmOID
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed448, ed25519, rsa

from .models import Certificate, KeyAlgorithm, PrivateKey, SignatureScheme

logger = logging.getLogger(__name__)

PEM_MARKER = b"-----BEGIN"

# OID -> (display name, scheme)
_SIGNATURE_ALGORITHMS = {
    SignatureAlgorithmOID.RSA_WITH_MD5: ("md5WithRSAEncryption", SignatureScheme.RSA_PKCS1V15),
    SignatureAlgorithmOID.RSA_WITH_SHA1: ("sha1WithRSAEncryption", SignatureScheme.RSA_PKCS1V15),
    SignatureAlgorithmOID.RSA_WITH_SHA224: ("sha224WithRSAEncryption", SignatureScheme.RSA_PKCS1V15),
    SignatureAlgorithmOID.RSA_WITH_SHA256: ("sha256WithRSAEncryption", SignatureScheme.RSA_PKCS1V15),
    SignatureAlgorithmOID.RSA_WITH_SHA384: ("sha384WithRSAEncryption", SignatureScheme.RSA_PKCS1V15),
    SignatureAlgorithmOID.RSA_WITH_SHA512: ("sha512WithRSAEncryption", SignatureScheme.RSA_PKCS1V15),
    SignatureAlgorithmOID.RSA_WITH_SHA3_224: ("RSA-SHA3-224", SignatureScheme.RSA_PKCS1V15),
    SignatureAlgorithmOID.RSA_WITH_SHA3_256: ("RSA-SHA3-256", SignatureScheme.RSA_PKCS1V15),
    SignatureAlgorithmOID.RSA_WITH_SHA3_384: ("RSA-SHA3-384", SignatureScheme.RSA_PKCS1V15),
    SignatureAlgorithmOID.RSA_WITH_SHA3_512: ("RSA-SHA3-512", SignatureScheme.RSA_PKCS1V15),
    SignatureAlgorithmOID.RSASSA_PSS: ("rsassaPss", SignatureScheme.RSA_PSS),
    SignatureAlgorithmOID.ECDSA_WITH_SHA1: ("ecdsa-with-SHA1", SignatureScheme.ECDSA),
    SignatureAlgorithmOID.ECDSA_WITH_SHA224: ("ecdsa-with-SHA224", SignatureScheme.ECDSA),
    SignatureAlgorithmOID.ECDSA_WITH_SHA256: ("ecdsa-with-SHA256", SignatureScheme.ECDSA),
    SignatureAlgorithmOID.ECDSA_WITH_SHA384: ("ecdsa-with-SHA384", SignatureScheme.ECDSA),
    SignatureAlgorithmOID.ECDSA_WITH_SHA512: ("ecdsa-with-SHA512", SignatureScheme.ECDSA),
    SignatureAlgorithmOID.ECDSA_WITH_SHA3_224: ("ecdsa_with_SHA3-224", SignatureScheme.ECDSA),
    SignatureAlgorithmOID.ECDSA_WITH_SHA3_256: ("ecdsa_with_SHA3-256", SignatureScheme.ECDSA),
    SignatureAlgorithmOID.ECDSA_WITH_SHA3_384: ("ecdsa_with_SHA3-384", SignatureScheme.ECDSA),
    SignatureAlgorithmOID.ECDSA_WITH_SHA3_512: ("ecdsa_with_SHA3-512", SignatureScheme.ECDSA),
    SignatureAlgorithmOID.ED25519: ("ED25519", SignatureScheme.ED25519),
    SignatureAlgorithmOID.ED448: ("ED448", SignatureScheme.ED448),
    SignatureAlgorithmOID.DSA_WITH_SHA1: ("dsaWithSHA1", SignatureScheme.UNSUPPORTED),
    SignatureAlgorithmOID.DSA_WITH_SHA224: ("dsa_with_SHA224", SignatureScheme.UNSUPPORTED),
    SignatureAlgorithmOID.DSA_WITH_SHA256: ("dsa_with_SHA256", SignatureScheme.UNSUPPORTED),
}

_KEY_USAGE_FLAGS = (
    ("digital_signature", "DigitalSignature"),
    ("content_commitment", "ContentCommitment"),
    ("key_encipherment", "KeyEncipherment"),
    ("data_encipherment", "DataEncipherment"),
    ("key_agreement", "KeyAgreement"),
    ("key_cert_sign", "CertSign"),
    ("crl_sign", "CRLSign"),
)

_EXTENDED_KEY_USAGES = {
    ExtendedKeyUsageOID.ANY_EXTENDED_KEY_USAGE: "Any",
    ExtendedKeyUsageOID.SERVER_AUTH: "ServerAuth",
    ExtendedKeyUsageOID.CLIENT_AUTH: "ClientAuth",
    ExtendedKeyUsageOID.CODE_SIGNING: "CodeSigning",
    ExtendedKeyUsageOID.EMAIL_PROTECTION: "EmailProtection",
    ExtendedKeyUsageOID.TIME_STAMPING: "TimeStamping",
    ExtendedKeyUsageOID.OCSP_SIGNING: "OCSPSigning",
}

# Errors the cryptography parsers raise for bad input
_PARSE_ERRORS = (
    ValueError,
    TypeError,
    UnsupportedAlgorithm,
    x509.InvalidVersion,
    x509.DuplicateExtension,
)


class DecodeError(Exception):
    """Exception raised when a certificate or key cannot be decoded."""

    def __init__(self, cause: str, source: Optional[str] = None):
        super().__init__(cause)
        self.cause = cause
        self.source = source

    def __str__(self) -> str:
        if self.source:
            return f"{self.source}: {self.cause}"
        return self.cause


def _is_pem(data: bytes) -> bool:
    return PEM_MARKER in data


def _describe(error: Exception) -> str:
    return str(error) or type(error).__name__


def _classify_key(key) -> Tuple[KeyAlgorithm, int, Optional[str]]:
    """Map a cryptography key object (public or private) to an algorithm tag."""
    if isinstance(key, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
        return KeyAlgorithm.RSA, key.key_size, None
    if isinstance(key, (ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey)):
        return KeyAlgorithm.EC, key.curve.key_size, key.curve.name
    if isinstance(key, (ed25519.Ed25519PrivateKey, ed25519.Ed25519PublicKey)):
        return KeyAlgorithm.ED25519, 256, None
    if isinstance(key, (ed448.Ed448PrivateKey, ed448.Ed448PublicKey)):
        return KeyAlgorithm.ED448, 448, None
    return KeyAlgorithm.UNKNOWN, getattr(key, "key_size", 0), None


def _general_name_to_str(name: x509.GeneralName) -> str:
    if isinstance(name, x509.IPAddress):
        return str(name.value)
    if isinstance(name, x509.DirectoryName):
        return name.value.rfc4514_string()
    if isinstance(name, x509.RegisteredID):
        return name.value.dotted_string
    if isinstance(name, x509.OtherName):
        return name.type_id.dotted_string
    return name.value


def _subject_alt_names(cert: x509.Certificate) -> Optional[Tuple[str, ...]]:
    try:
        ext = cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
    except x509.ExtensionNotFound:
        return None
    return tuple(_general_name_to_str(name) for name in ext.value)


def _key_usage(cert: x509.Certificate) -> Optional[Tuple[str, ...]]:
    try:
        usage = cert.extensions.get_extension_for_class(x509.KeyUsage).value
    except x509.ExtensionNotFound:
        return None

    names = [label for attr, label in _KEY_USAGE_FLAGS if getattr(usage, attr)]
    # encipher_only/decipher_only are only defined with key_agreement
    if usage.key_agreement:
        if usage.encipher_only:
            names.append("EncipherOnly")
        if usage.decipher_only:
            names.append("DecipherOnly")
    return tuple(names)


def _extended_key_usage(cert: x509.Certificate) -> Optional[Tuple[str, ...]]:
    try:
        usages = cert.extensions.get_extension_for_class(x509.ExtendedKeyUsage).value
    except x509.ExtensionNotFound:
        return None
    return tuple(_EXTENDED_KEY_USAGES.get(oid, oid.dotted_string) for oid in usages)


def _signature_details(cert: x509.Certificate):
    """Resolve name, scheme, digest and PSS padding of a certificate's signature."""
    oid = cert.signature_algorithm_oid
    name, scheme = _SIGNATURE_ALGORITHMS.get(
        oid, (oid.dotted_string, SignatureScheme.UNSUPPORTED)
    )

    hash_algorithm = None
    signature_padding = None
    if scheme is not SignatureScheme.UNSUPPORTED:
        try:
            hash_algorithm = cert.signature_hash_algorithm
            if scheme is SignatureScheme.RSA_PSS:
                signature_padding = cert.signature_algorithm_parameters
        except UnsupportedAlgorithm:
            logger.warning(f"Signature digest of {name} is not supported")
            scheme = SignatureScheme.UNSUPPORTED

    return name, scheme, hash_algorithm, signature_padding


def _build_certificate(cert: x509.Certificate) -> Certificate:
    public_key = cert.public_key()
    algorithm, key_size, curve = _classify_key(public_key)
    name, scheme, hash_algorithm, signature_padding = _signature_details(cert)

    return Certificate(
        subject=cert.subject,
        issuer=cert.issuer,
        serial_number=cert.serial_number,
        valid_from=cert.not_valid_before_utc,
        valid_to=cert.not_valid_after_utc,
        public_key=public_key,
        public_key_algorithm=algorithm,
        public_key_size=key_size,
        curve=curve,
        signature_algorithm=name,
        signature_scheme=scheme,
        signature_hash_algorithm=hash_algorithm,
        signature_padding=signature_padding,
        raw_signature=cert.signature,
        tbs_data=cert.tbs_certificate_bytes,
        subject_alt_names=_subject_alt_names(cert),
        key_usage=_key_usage(cert),
        extended_key_usage=_extended_key_usage(cert),
        fingerprint_sha256=cert.fingerprint(hashes.SHA256()).hex(),
        der=cert.public_bytes(serialization.Encoding.DER),
    )


def decode_certificate(data: bytes) -> Certificate:
    """
    Decode a PEM or DER certificate.

    Only the first certificate of a PEM bundle is decoded.

    Args:
        data: Raw certificate bytes

    Returns:
        Fully populated Certificate

    Raises:
        DecodeError: If the input is empty, malformed or unsupported
    """
    if not data:
        raise DecodeError("empty input")

    try:
        if _is_pem(data):
            cert = x509.load_pem_x509_certificate(data)
        else:
            cert = x509.load_der_x509_certificate(data)
        # Every attribute is read here so a bad extension fails the decode
        return _build_certificate(cert)
    except _PARSE_ERRORS as e:
        raise DecodeError(f"Failed to parse certificate: {_describe(e)}") from e


def decode_private_key(data: bytes) -> PrivateKey:
    """
    Decode an unencrypted PEM or DER private key (PKCS#8, PKCS#1 or SEC1).

    Args:
        data: Raw private key bytes

    Returns:
        PrivateKey able to sign with RSA, ECDSA or EdDSA

    Raises:
        DecodeError: If the input is empty, malformed, encrypted or uses an
            unsupported algorithm
    """
    if not data:
        raise DecodeError("empty input")

    if _is_pem(data) and b"ENCRYPTED" in data:
        raise DecodeError("encrypted private keys are not supported")

    try:
        if _is_pem(data):
            key = serialization.load_pem_private_key(data, password=None)
        else:
            key = serialization.load_der_private_key(data, password=None)
    except TypeError as e:
        # Raised when an encrypted DER key is loaded without a password
        raise DecodeError("encrypted private keys are not supported") from e
    except (ValueError, UnsupportedAlgorithm) as e:
        raise DecodeError(f"Failed to parse private key: {_describe(e)}") from e

    algorithm, key_size, curve = _classify_key(key)
    if algorithm is KeyAlgorithm.UNKNOWN:
        raise DecodeError(f"unsupported private key algorithm: {type(key).__name__}")

    return PrivateKey(algorithm=algorithm, key_size=key_size, curve=curve, key=key)


class X509Utils:
    """File-based loaders used when checking a domain directory."""

    @staticmethod
    def load_certificate(path: Path) -> Certificate:
        """
        Load and decode a certificate from file.

        Args:
            path: File path to load from

        Returns:
            Decoded certificate

        Raises:
            OSError: If the file cannot be read
            DecodeError: If the contents cannot be decoded
        """
        logger.info(f"Loading certificate from: {path}")
        cert = decode_certificate(Path(path).read_bytes())
        logger.info("Certificate loaded successfully")
        return cert

    @staticmethod
    def load_private_key(path: Path) -> PrivateKey:
        """
        Load and decode a private key from file.

        Args:
            path: File path to load from

        Returns:
            Decoded private key
        """
        logger.info(f"Loading private key from: {path}")
        key = decode_private_key(Path(path).read_bytes())
        logger.info(f"Private key loaded successfully ({key.algorithm.value})")
        return key

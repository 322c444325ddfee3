"""Summary extraction for decoded certificates."""

from cryptography import x509
from cryptography.x509.oid import NameOID

from .models import Certificate, CertificateSummary

NOT_AVAILABLE = "N/A"


def common_name(name: x509.Name) -> str:
    """First CN attribute of a distinguished name, or N/A."""
    attributes = name.get_attributes_for_oid(NameOID.COMMON_NAME)
    if not attributes:
        return NOT_AVAILABLE
    value = attributes[0].value
    return value.decode("utf-8", "replace") if isinstance(value, bytes) else value


def summarize(cert: Certificate) -> CertificateSummary:
    """
    Build a display summary of a certificate.

    Absent extensions summarize as empty lists.

    Args:
        cert: Decoded certificate

    Returns:
        CertificateSummary
    """
    return CertificateSummary(
        common_name=common_name(cert.subject),
        subject=cert.subject.rfc4514_string(),
        issuer=cert.issuer.rfc4514_string(),
        serial_number=format(cert.serial_number, "x"),
        valid_from=cert.valid_from,
        valid_to=cert.valid_to,
        sans=list(cert.subject_alt_names or ()),
        public_key_algorithm=cert.public_key_algorithm.value,
        public_key_size=cert.public_key_size,
        signature_algorithm=cert.signature_algorithm,
        fingerprint_sha256=cert.fingerprint_sha256,
        key_usage=list(cert.key_usage or ()),
        extended_key_usage=list(cert.extended_key_usage or ()),
    )

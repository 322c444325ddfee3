"""Pre-deployment check of a server certificate, its issuer and its key."""

import logging

from pydantic import BaseModel, Field, computed_field

from .attributes import summarize
from .config import Settings
from .models import Certificate, CertificateSummary, PrivateKey, VerificationResult
from .verification import verify_chain_link, verify_key_pair
from .x509_utils import DecodeError, X509Utils, decode_certificate, decode_private_key

logger = logging.getLogger(__name__)

SERVER_CERTIFICATE = "server certificate"
CHAIN_CERTIFICATE = "chain certificate"
PRIVATE_KEY = "private key"


class PreflightReport(BaseModel):
    """Summaries and check outcomes for one certificate set."""

    server: CertificateSummary = Field(..., description="Server certificate summary")
    intermediate: CertificateSummary = Field(..., description="Intermediate certificate summary")
    chain_link: VerificationResult = Field(..., description="Server certificate signed by intermediate")
    key_pair: VerificationResult = Field(..., description="Private key matches server certificate")

    @computed_field
    @property
    def verified(self) -> bool:
        return self.chain_link.verified and self.key_pair.verified


def _decode(loader, value, source: str):
    try:
        return loader(value)
    except DecodeError as e:
        logger.error(f"Failed to decode {source}: {e.cause}")
        raise DecodeError(e.cause, source=source) from e


def _check(server_cert: Certificate, intermediate_cert: Certificate, private_key: PrivateKey) -> PreflightReport:
    report = PreflightReport(
        server=summarize(server_cert),
        intermediate=summarize(intermediate_cert),
        chain_link=verify_chain_link(server_cert, intermediate_cert),
        key_pair=verify_key_pair(server_cert, private_key),
    )

    if report.verified:
        logger.info(f"Preflight passed for {report.server.common_name}")
    else:
        logger.warning(
            f"Preflight failed for {report.server.common_name}: "
            f"chain link {report.chain_link}, key pair {report.key_pair}"
        )
    return report


def run_preflight(cert_data: bytes, chain_data: bytes, key_data: bytes) -> PreflightReport:
    """
    Decode the three inputs and run both consistency checks.

    Both checks always run; neither depends on the other.

    Args:
        cert_data: Server certificate, PEM or DER
        chain_data: Intermediate certificate, PEM or DER
        key_data: Server private key, PEM or DER

    Returns:
        PreflightReport

    Raises:
        DecodeError: With source naming the input that failed to decode
    """
    server_cert = _decode(decode_certificate, cert_data, SERVER_CERTIFICATE)
    intermediate_cert = _decode(decode_certificate, chain_data, CHAIN_CERTIFICATE)
    private_key = _decode(decode_private_key, key_data, PRIVATE_KEY)

    return _check(server_cert, intermediate_cert, private_key)


def check_domain(domain: str, settings: Settings) -> PreflightReport:
    """
    Read a domain's files from the certificates directory and check them.

    Raises:
        ValueError: If the domain is not a plain directory name
        OSError: If a file cannot be read
        DecodeError: If a file cannot be decoded
    """
    cert_path, chain_path, key_path = settings.domain_paths(domain)
    logger.info(f"Checking certificate files for {domain} in {cert_path.parent}")

    server_cert = _decode(X509Utils.load_certificate, cert_path, SERVER_CERTIFICATE)
    intermediate_cert = _decode(X509Utils.load_certificate, chain_path, CHAIN_CERTIFICATE)
    private_key = _decode(X509Utils.load_private_key, key_path, PRIVATE_KEY)

    return _check(server_cert, intermediate_cert, private_key)

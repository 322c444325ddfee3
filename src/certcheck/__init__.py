"""Pre-deployment consistency checks for TLS certificates and keys."""

from .models import (
    Certificate,
    CertificateSummary,
    KeyAlgorithm,
    PrivateKey,
    SignatureScheme,
    VerificationResult,
)
from .x509_utils import X509Utils, DecodeError, decode_certificate, decode_private_key
from .attributes import summarize
from .verification import CertificateVerifier, verify_chain_link, verify_key_pair
from .preflight import PreflightReport, run_preflight, check_domain

__all__ = [
    'Certificate',
    'CertificateSummary',
    'KeyAlgorithm',
    'PrivateKey',
    'SignatureScheme',
    'VerificationResult',
    'X509Utils',
    'DecodeError',
    'decode_certificate',
    'decode_private_key',
    'summarize',
    'CertificateVerifier',
    'verify_chain_link',
    'verify_key_pair',
    'PreflightReport',
    'run_preflight',
    'check_domain',
]

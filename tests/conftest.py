"""Pytest configuration and shared fixtures for certificate checks."""

import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Generator

from .utils.test_helpers import TestCertificateFactory


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test artifacts."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(scope="session")
def issuer_ca():
    """Intermediate CA (certificate, key) that signs the server certificate."""
    return TestCertificateFactory.create_ca_certificate(subject_name="Test Intermediate CA")


@pytest.fixture(scope="session")
def unrelated_ca():
    """CA (certificate, key) that signed nothing else in the suite."""
    return TestCertificateFactory.create_ca_certificate(subject_name="Unrelated CA")


@pytest.fixture(scope="session")
def server(issuer_ca):
    """Server (certificate, key) issued by issuer_ca."""
    ca_cert, ca_key = issuer_ca
    return TestCertificateFactory.create_server_certificate(
        common_name="www.example.com",
        ca_cert=ca_cert,
        ca_key=ca_key,
        san_dns=["www.example.com", "example.com"],
        san_ips=["192.0.2.10"],
    )


@pytest.fixture(scope="session")
def unrelated_key():
    """RSA key that matches no certificate in the suite."""
    return TestCertificateFactory.create_private_key()

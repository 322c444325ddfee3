"""Unit tests for certificate summaries."""

from cryptography import x509
from cryptography.x509.oid import NameOID

from certcheck import decode_certificate, summarize
from certcheck.attributes import NOT_AVAILABLE, common_name

from ..utils.test_helpers import TestCertificateFactory, cert_to_pem


class TestSummarize:
    """Test summarize()."""

    def test_server_summary_fields(self, server, issuer_ca):
        server_cert, _ = server
        ca_cert, _ = issuer_ca

        summary = summarize(decode_certificate(cert_to_pem(server_cert)))

        assert summary.common_name == "www.example.com"
        assert summary.issuer == ca_cert.subject.rfc4514_string()
        assert "CN=Test Intermediate CA" in summary.issuer
        assert summary.sans == ["www.example.com", "example.com", "192.0.2.10"]
        assert summary.public_key_algorithm == "RSA"
        assert summary.public_key_size == 2048
        assert summary.signature_algorithm == "sha256WithRSAEncryption"
        assert summary.serial_number == format(server_cert.serial_number, "x")
        assert summary.valid_to == server_cert.not_valid_after_utc
        assert summary.valid_from == server_cert.not_valid_before_utc
        assert summary.key_usage == ["DigitalSignature", "KeyEncipherment"]
        assert summary.extended_key_usage == ["ServerAuth"]
        assert len(summary.fingerprint_sha256) == 64

    def test_missing_common_name_yields_sentinel(self, issuer_ca):
        """Test certificates without a CN still summarize."""
        ca_cert, ca_key = issuer_ca
        cert, _ = TestCertificateFactory.create_server_certificate(
            common_name=None,
            ca_cert=ca_cert,
            ca_key=ca_key,
            san_dns=["no-cn.example.com"],
        )

        summary = summarize(decode_certificate(cert_to_pem(cert)))

        assert summary.common_name == NOT_AVAILABLE == "N/A"
        assert summary.subject == "O=TestOrg"
        assert summary.sans == ["no-cn.example.com"]

    def test_absent_sans_yield_empty_list(self, issuer_ca):
        """Test absent SAN extension summarizes as an empty list."""
        ca_cert, ca_key = issuer_ca
        cert, _ = TestCertificateFactory.create_server_certificate(
            common_name="plain.example.com",
            ca_cert=ca_cert,
            ca_key=ca_key,
        )

        summary = summarize(decode_certificate(cert_to_pem(cert)))

        assert summary.sans == []

    def test_summary_is_serializable(self, server):
        server_cert, _ = server

        data = summarize(decode_certificate(cert_to_pem(server_cert))).model_dump(mode="json")

        assert data["common_name"] == "www.example.com"
        assert isinstance(data["valid_to"], str)


class TestCommonName:
    """Test common_name()."""

    def test_first_cn_wins(self):
        name = x509.Name([
            x509.NameAttribute(NameOID.COMMON_NAME, "first.example.com"),
            x509.NameAttribute(NameOID.COMMON_NAME, "second.example.com"),
        ])

        assert common_name(name) == "first.example.com"

    def test_empty_name(self):
        assert common_name(x509.Name([])) == "N/A"

"""Security tests: private key material must never reach the logs."""

import logging

import pytest

from certcheck import PrivateKey, KeyAlgorithm, decode_certificate, run_preflight, verify_key_pair

from ..utils.test_helpers import cert_to_pem, key_to_bytes


def _key_body_lines(key_pem: bytes) -> list[str]:
    return [
        line for line in key_pem.decode().splitlines()
        if line and not line.startswith("-----")
    ]


class TestKeyMaterialNotLogged:
    """Test logging during checks leaks no key material."""

    @pytest.mark.parametrize("matching", [True, False])
    def test_preflight_logs(self, caplog, server, issuer_ca, unrelated_key, matching):
        server_cert, server_key = server
        ca_cert, _ = issuer_ca
        key_pem = key_to_bytes(server_key if matching else unrelated_key)

        with caplog.at_level(logging.DEBUG):
            run_preflight(cert_to_pem(server_cert), cert_to_pem(ca_cert), key_pem)

        assert caplog.records
        for line in _key_body_lines(key_pem):
            assert line not in caplog.text

    def test_primitive_error_logs(self, caplog, server):
        """Test the error path logs the cause but not the key object."""

        class BrokenKey:
            def sign(self, *args, **kwargs):
                raise ValueError("bad key")

            def __repr__(self):
                return "SECRET-KEY-REPR"

        server_cert, _ = server
        key = PrivateKey(algorithm=KeyAlgorithm.RSA, key_size=2048, curve=None, key=BrokenKey())

        with caplog.at_level(logging.DEBUG):
            result = verify_key_pair(decode_certificate(cert_to_pem(server_cert)), key)

        assert result.verified is False
        assert "bad key" in caplog.text
        assert "SECRET-KEY-REPR" not in caplog.text
        assert "SECRET-KEY-REPR" not in repr(key)

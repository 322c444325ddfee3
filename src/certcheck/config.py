"""Settings for locating certificate material on disk."""

import json
import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CERTIFICATES_DIR = Path("../certificates")

ENV_OVERRIDES = {
    "CERTCHECK_CERTIFICATES_DIR": "certificates_dir",
    "CERTCHECK_LOG_LEVEL": "log_level",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Where to find each domain's certificate, chain and key files."""

    certificates_dir: Path = Field(
        default=DEFAULT_CERTIFICATES_DIR,
        description="Directory holding one subdirectory per domain",
    )
    cert_filename: str = Field(default="cert.pem", description="Server certificate file name")
    chain_filename: str = Field(default="chain.pem", description="Intermediate certificate file name")
    key_filename: str = Field(default="privkey.pem", description="Private key file name")
    log_level: str = Field(default="WARNING", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value

    def domain_paths(self, domain: str) -> Tuple[Path, Path, Path]:
        """
        Resolve the certificate, chain and key paths for a domain.

        Args:
            domain: Domain name, used as a directory name

        Returns:
            Tuple of (cert_path, chain_path, key_path)

        Raises:
            ValueError: If the domain is not a plain directory name
        """
        if not domain or domain in (".", "..") or "/" in domain or "\\" in domain:
            raise ValueError(f"Invalid domain name: {domain!r}")

        domain_dir = self.certificates_dir / domain
        return (
            domain_dir / self.cert_filename,
            domain_dir / self.chain_filename,
            domain_dir / self.key_filename,
        )


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None
) -> Settings:
    """
    Load settings from defaults, an optional JSON file and the environment.

    Environment variables take precedence over the file.

    Args:
        config_path: Optional JSON file with Settings fields
        environ: Environment mapping (default: os.environ)

    Returns:
        Validated Settings

    Raises:
        OSError: If the config file cannot be read
        ValueError: If the file is not a JSON object
        pydantic.ValidationError: If a value is invalid
    """
    data = {}

    if config_path is not None:
        logger.info(f"Loading settings from: {config_path}")
        with open(config_path, 'r') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a JSON object: {config_path}")

    env = os.environ if environ is None else environ
    for variable, key in ENV_OVERRIDES.items():
        if variable in env:
            data[key] = env[variable]

    return Settings(**data)

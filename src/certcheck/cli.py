"""Command line interface: certcheck DOMAIN [DOMAIN ...]."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import LOG_LEVELS, load_settings
from .models import CertificateSummary, VerificationResult
from .preflight import PreflightReport, check_domain
from .x509_utils import DecodeError

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="certcheck",
        description=(
            "Check that a domain's server certificate, intermediate certificate "
            "and private key are consistent before deployment."
        ),
    )
    parser.add_argument("domains", nargs="+", metavar="DOMAIN", help="Domain directory to check")
    parser.add_argument(
        "--certificates-dir",
        type=Path,
        help="Directory containing one subdirectory per domain",
    )
    parser.add_argument("--config", type=Path, help="JSON settings file")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="Logging level")
    parser.add_argument("--json", action="store_true", help="Print reports as JSON")
    return parser


def _join(values: List[str]) -> str:
    return f"[{', '.join(values)}]"


def print_details(title: str, summary: CertificateSummary, show_subject: bool = False) -> None:
    print(f"{title}:")
    print(f"  Valid until: {summary.valid_to.isoformat()}")
    print(f"  Issuer: {summary.issuer}")
    print(f"  Common name: {summary.common_name}")
    if show_subject:
        print(f"  Subject: {summary.subject}")
    print(f"  SANs: {_join(summary.sans)}")
    print(f"  Public key: {summary.public_key_algorithm} ({summary.public_key_size} bit)")
    print(f"  Signature algorithm: {summary.signature_algorithm}")
    print(f"  Key Usage: {_join(summary.key_usage)}")
    print(f"  Extended Key Usage: {_join(summary.extended_key_usage)}")


def print_result(label: str, result: VerificationResult) -> None:
    if result.verified:
        print(f"{label}: verified")
    else:
        print(f"{label}: FAILED ({result.reason})")


def print_report(report: PreflightReport) -> None:
    print_details("Server certificate", report.server)
    print_details("Intermediate certificate", report.intermediate, show_subject=True)
    print_result("Server certificate signed by intermediate", report.chain_link)
    print_result("Private key matches server certificate", report.key_pair)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the checks for every domain given on the command line.

    Returns:
        0 if every domain verified, 1 if any failed, 2 on configuration errors
    """
    args = build_parser().parse_args(argv)

    # Configured before settings load so its own log lines are emitted
    logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger().setLevel(args.log_level or logging.WARNING)

    try:
        settings = load_settings(args.config)
    except (OSError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    updates = {}
    if args.certificates_dir is not None:
        updates["certificates_dir"] = args.certificates_dir
    if args.log_level is not None:
        updates["log_level"] = args.log_level
    settings = settings.model_copy(update=updates)

    logging.getLogger().setLevel(settings.log_level)

    failed = 0
    output = {}

    for domain in args.domains:
        if not args.json:
            print(f"Verifying certificate for domain: {domain}")

        try:
            report = check_domain(domain, settings)
        except DecodeError as e:
            failed += 1
            output[domain] = {"verified": False, "error": f"Failed to decode {e}"}
            if not args.json:
                print(f"Failed to decode {e}", file=sys.stderr)
            continue
        except (OSError, ValueError) as e:
            failed += 1
            output[domain] = {"verified": False, "error": f"Failed to read certificate files: {e}"}
            if not args.json:
                print(f"Failed to read certificate files for {domain}: {e}", file=sys.stderr)
            continue

        if not report.verified:
            failed += 1

        if args.json:
            output[domain] = report.model_dump(mode="json")
        else:
            print_report(report)

    if args.json:
        print(json.dumps(output, indent=2))

    if failed:
        logger.warning(f"{failed} of {len(args.domains)} domain(s) failed verification")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Report whether the first certificate in a PEM file uses a named EC curve."""

from __future__ import annotations

import sys
from pathlib import Path

from .certificate import CertificateError, read_pem_file
from .classify import ClassificationError, ParamKind, classify

MESSAGES = {
    ParamKind.NAMED: "Certificate has EC key with a named group.",
    ParamKind.EXPLICIT: "Certificate has EC key with explicit parameters.",
    ParamKind.NOT_EC: "Certificate does not have an EC public key.",
}
ERROR_MESSAGE = "Error occurred while checking the certificate."


def check_file(path: str | Path) -> ParamKind:
    """Classify the first certificate in the PEM file at ``path``."""
    certs = read_pem_file(path)
    if not certs:
        raise CertificateError("no certificate found")
    return classify(certs[0])


def main(argv: list[str] | None = None) -> int:
    """Check one certificate file; always succeeds once arguments are valid."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("Usage: ecparamcheck-plain <certificate_file>", file=sys.stderr)
        return 1
    try:
        kind = check_file(args[0])
    except OSError as exc:
        print(f"Error opening certificate file: {exc.strerror or exc}", file=sys.stderr)
    except CertificateError as exc:
        print("Error reading X509 certificate.", file=sys.stderr)
        print(exc, file=sys.stderr)
    except ClassificationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print(ERROR_MESSAGE)
    else:
        print(MESSAGES[kind])
    return 0


if __name__ == "__main__":
    sys.exit(main())
"""Report the EC parameter kind of every certificate in a PEM chain file."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from .certificate import CertificateError, load_pem_certificates
from .classify import ClassificationError, ParamKind, classify

MESSAGES = {
    ParamKind.NAMED: "  -> EC key uses a named group.",
    ParamKind.EXPLICIT: "  -> EC key uses explicit elliptic curve parameters.",
    ParamKind.NOT_EC: "  -> This certificate does not have an EC public key.",
}
ERROR_MESSAGE = "  -> An error occurred while checking this certificate."


def process_chain_file(path: str | Path, out: TextIO) -> int:
    """Write a report for each certificate in ``path``; return how many there were."""
    data = Path(path).read_bytes()
    out.write(f"Processing certificate chain from file: {path}\n")
    certs = load_pem_certificates(data)
    for number, cert in enumerate(certs, start=1):
        out.write(f"\nCertificate #{number}:\n")
        try:
            line = MESSAGES[classify(cert)]
        except ClassificationError as exc:
            sys.stderr.write(f"Error: {exc}\n")
            line = ERROR_MESSAGE
        out.write(line + "\n")
    if not certs:
        out.write("No certificates found in the provided file.\n")
    return len(certs)


def main(argv: list[str] | None = None) -> int:
    """Check every certificate in one chain file."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print("Usage: ecparamcheck-chain <certificate_chain.pem>", file=sys.stderr)
        return 1
    try:
        process_chain_file(args[0], sys.stdout)
    except OSError as exc:
        print(f"Error opening certificate file: {exc.strerror or exc}", file=sys.stderr)
    except CertificateError as exc:
        print(f"Error: {exc}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
"""Verify a certificate against trusted CAs and check every EC key in the chain."""

from __future__ import annotations

import enum
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, TextIO

from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm

from . import der
from .certificate import Certificate, CertificateError, format_name_rfc2253, read_pem_file
from .classify import ClassificationError, ParamKind, classify
from .der import DerError

_RULE = "-------------------------------------------------------------------"

_REPORT = {
    ParamKind.NAMED: "    -> EC key uses a named group.",
    ParamKind.EXPLICIT: (
        "    -> EC key uses explicit elliptic curve parameters. (FLAGGED AS INVALID)"
    ),
    ParamKind.NOT_EC: "    -> This certificate does not have an EC public key.",
}
_REPORT_ERROR = "    -> An error occurred while checking this certificate's EC parameters."


class VerifyError(enum.IntEnum):
    """Chain verification outcomes, numbered as X.509 verifiers report them."""

    OK = 0
    UNABLE_TO_GET_ISSUER_CERT = 2
    CERT_SIGNATURE_FAILURE = 7
    CERT_NOT_YET_VALID = 9
    CERT_HAS_EXPIRED = 10
    ERROR_IN_CERT_NOT_BEFORE_FIELD = 13
    ERROR_IN_CERT_NOT_AFTER_FIELD = 14
    DEPTH_ZERO_SELF_SIGNED_CERT = 18
    UNABLE_TO_GET_ISSUER_CERT_LOCALLY = 20

    @property
    def message(self) -> str:
        return _ERROR_TEXT[self]


_ERROR_TEXT = {
    VerifyError.OK: "ok",
    VerifyError.UNABLE_TO_GET_ISSUER_CERT: "unable to get issuer certificate",
    VerifyError.CERT_SIGNATURE_FAILURE: "certificate signature failure",
    VerifyError.CERT_NOT_YET_VALID: "certificate is not yet valid",
    VerifyError.CERT_HAS_EXPIRED: "certificate has expired",
    VerifyError.ERROR_IN_CERT_NOT_BEFORE_FIELD: "format error in certificate's notBefore field",
    VerifyError.ERROR_IN_CERT_NOT_AFTER_FIELD: "format error in certificate's notAfter field",
    VerifyError.DEPTH_ZERO_SELF_SIGNED_CERT: "self signed certificate",
    VerifyError.UNABLE_TO_GET_ISSUER_CERT_LOCALLY: "unable to get local issuer certificate",
}


@dataclass
class ChainResult:
    """The chain that was built, leaf first, and how verification ended."""

    chain: list[Certificate] = field(default_factory=list)
    error: VerifyError = VerifyError.OK

    @property
    def verified(self) -> bool:
        return self.error is VerifyError.OK


def _time(element: der.Element) -> datetime:
    text = element.content.decode("ascii")
    if element.tag == 0x17:
        year = int(text[:2])
        text = f"{year + 2000 if year < 50 else year + 1900}{text[2:]}"
    elif element.tag != 0x18:
        raise ValueError("not a time value")
    return datetime.strptime(text, "%Y%m%d%H%M%SZ").replace(tzinfo=timezone.utc)


def _validity(cert: Certificate) -> list[der.Element]:
    tbs, _ = der.parse_one(cert.tbs_der)
    fields = tbs.children()
    if fields and fields[0].tag == 0xA0:
        fields = fields[1:]
    parts = fields[3].children()
    if len(parts) != 2:
        raise ValueError("malformed validity")
    return parts


def _check_time(cert: Certificate, now: datetime) -> VerifyError:
    try:
        not_before_el, not_after_el = _validity(cert)
        not_before = _time(not_before_el)
    except (DerError, ValueError, IndexError):
        return VerifyError.ERROR_IN_CERT_NOT_BEFORE_FIELD
    try:
        not_after = _time(not_after_el)
    except ValueError:
        return VerifyError.ERROR_IN_CERT_NOT_AFTER_FIELD
    if now < not_before:
        return VerifyError.CERT_NOT_YET_VALID
    if now > not_after:
        return VerifyError.CERT_HAS_EXPIRED
    return VerifyError.OK


def _signed_by(cert: Certificate, issuer: Certificate) -> bool:
    try:
        child = x509.load_der_x509_certificate(cert.der)
        parent = x509.load_der_x509_certificate(issuer.der)
        child.verify_directly_issued_by(parent)
    except (InvalidSignature, UnsupportedAlgorithm, ValueError, TypeError):
        return False
    return True


def build_chain(cert: Certificate, trusted: Iterable[Certificate]) -> ChainResult:
    """Build a chain from ``cert`` up to a trusted self-issued root and verify it."""
    trusted = list(trusted)
    anchors = {candidate.der for candidate in trusted}
    chain = [cert]
    current = cert
    while current.subject != current.issuer:
        used = {member.der for member in chain}
        issuer = next(
            (c for c in trusted if c.subject == current.issuer and c.der not in used),
            None,
        )
        if issuer is None:
            error = (
                VerifyError.UNABLE_TO_GET_ISSUER_CERT_LOCALLY
                if len(chain) == 1
                else VerifyError.UNABLE_TO_GET_ISSUER_CERT
            )
            return ChainResult(chain, error)
        chain.append(issuer)
        current = issuer
    if current.der not in anchors:
        return ChainResult(chain, VerifyError.DEPTH_ZERO_SELF_SIGNED_CERT)

    now = datetime.now(timezone.utc)
    for depth in reversed(range(len(chain))):
        subject = chain[depth]
        if depth + 1 < len(chain) and not _signed_by(subject, chain[depth + 1]):
            return ChainResult(chain, VerifyError.CERT_SIGNATURE_FAILURE)
        error = _check_time(subject, now)
        if error is not VerifyError.OK:
            return ChainResult(chain, error)
    return ChainResult(chain)


def report_certificate(cert: Certificate, out: TextIO) -> bool:
    """Write the certificate's subject and EC check; return True if it is flagged."""
    out.write(f"  Subject: {format_name_rfc2253(cert.subject)}\n")
    try:
        kind = classify(cert)
    except ClassificationError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        out.write(_REPORT_ERROR + "\n")
        return True
    out.write(_REPORT[kind] + "\n")
    return kind is ParamKind.EXPLICIT


def verify_and_report(
    cert_path: str | Path, ca_path: str | Path, out: TextIO, err: TextIO
) -> int:
    """Verify the end-entity certificate and report on its chain; return an exit status."""
    try:
        leaf_certs = read_pem_file(cert_path)
    except OSError as exc:
        err.write(f"Error opening end-entity certificate file: {exc.strerror or exc}\n")
        return 1
    except CertificateError as exc:
        leaf_certs = []
        err.write(f"{exc}\n")
    if not leaf_certs:
        err.write(f"Error: Could not read end-entity certificate from {cert_path}.\n")
        return 1

    try:
        trusted = read_pem_file(ca_path)
    except (OSError, CertificateError) as exc:
        trusted = []
        err.write(f"{exc}\n")
    if not trusted:
        err.write(f"Error: Could not load CA certificate(s) from {ca_path}.\n")
        return 1
    out.write(f"Loaded CA certificate(s) from: {ca_path}\n")

    out.write(f"\nAttempting to verify and process certificate chain for: {cert_path}\n")
    out.write(_RULE + "\n")

    result = build_chain(leaf_certs[0], trusted)
    if result.verified:
        out.write("Certificate verification successful.\n")
    else:
        err.write(
            f"Certificate verification failed: {result.error.message} "
            f"({int(result.error)})\n"
        )

    out.write("\nProcessing certificates in the built chain:\n")
    total = len(result.chain)
    invalid = False
    for index, member in enumerate(result.chain):
        out.write(f"Certificate in chain #{index + 1} (Level {total - 1 - index}):\n")
        invalid = report_certificate(member, out) or invalid
    out.write(_RULE + "\n")

    if invalid:
        out.write(
            "\nOverall result: **INVALID** - At least one EC certificate in the "
            "constructed chain uses explicitly defined parameters.\n"
        )
        return 1
    out.write(
        "\nOverall result: **VALID** - All EC certificates in the constructed "
        "chain use named groups.\n"
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Verify one certificate against a CA file and check its chain."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print(
            "Usage: ecparamcheck-trust <end_entity_certificate.pem> "
            "<trusted_ca_certificates.pem>",
            file=sys.stderr,
        )
        return 1
    return verify_and_report(args[0], args[1], sys.stdout, sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
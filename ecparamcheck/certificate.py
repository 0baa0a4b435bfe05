"""X.509 certificate loading, without needing to decode the public key."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from pathlib import Path

from . import der as _der
from .der import DerError, Element, decode_oid, parse_one

Name = tuple[tuple[tuple[str, Element], ...], ...]

_PEM_RE = re.compile(
    rb"-----BEGIN (X509 CERTIFICATE|CERTIFICATE)-----(.*?)-----END \1-----",
    re.DOTALL,
)

_SHORT_NAMES = {
    "2.5.4.3": "CN",
    "2.5.4.4": "SN",
    "2.5.4.5": "serialNumber",
    "2.5.4.6": "C",
    "2.5.4.7": "L",
    "2.5.4.8": "ST",
    "2.5.4.9": "street",
    "2.5.4.10": "O",
    "2.5.4.11": "OU",
    "2.5.4.12": "title",
    "2.5.4.42": "GN",
    "0.9.2342.19200300.100.1.1": "UID",
    "0.9.2342.19200300.100.1.25": "DC",
    "1.2.840.113549.1.9.1": "emailAddress",
}

_STRING_CODECS = {
    _der.UTF8_STRING: "utf-8",
    _der.PRINTABLE_STRING: "ascii",
    _der.IA5_STRING: "ascii",
    _der.T61_STRING: "latin-1",
    _der.BMP_STRING: "utf-16-be",
    _der.UNIVERSAL_STRING: "utf-32-be",
}


class CertificateError(ValueError):
    """Raised when a certificate cannot be read."""


def _expect(element: Element, tag: int, what: str) -> Element:
    if element.tag != tag:
        raise CertificateError(f"expected {what}, found tag 0x{element.tag:02x}")
    return element


def _parse_name(element: Element) -> Name:
    _expect(element, _der.SEQUENCE, "Name")
    rdns = []
    for rdn in element.children():
        _expect(rdn, _der.SET, "RelativeDistinguishedName")
        attrs = []
        for attr in rdn.children():
            parts = _expect(attr, _der.SEQUENCE, "AttributeTypeAndValue").children()
            if len(parts) != 2:
                raise CertificateError("malformed attribute")
            oid = decode_oid(_expect(parts[0], _der.OBJECT_IDENTIFIER, "OID").content)
            attrs.append((oid, parts[1]))
        rdns.append(tuple(attrs))
    return tuple(rdns)


def _bit_string(element: Element) -> bytes:
    _expect(element, _der.BIT_STRING, "BIT STRING")
    if not element.content:
        raise CertificateError("empty BIT STRING")
    return element.content[1:]


def _algorithm(element: Element) -> tuple[str, Element | None]:
    parts = _expect(element, _der.SEQUENCE, "AlgorithmIdentifier").children()
    if not parts or len(parts) > 2:
        raise CertificateError("malformed AlgorithmIdentifier")
    oid = decode_oid(_expect(parts[0], _der.OBJECT_IDENTIFIER, "OID").content)
    return oid, (parts[1] if len(parts) == 2 else None)


@dataclass(frozen=True)
class Certificate:
    """The fields of an X.509 certificate used by the checks."""

    der: bytes
    tbs_der: bytes
    version: int
    serial: int
    issuer: Name
    subject: Name
    key_algorithm: str
    key_parameters: Element | None
    public_key: bytes
    signature_algorithm: str
    signature: bytes

    @classmethod
    def from_der(cls, der: bytes) -> Certificate:
        """Parse one DER-encoded certificate."""
        try:
            outer, rest = parse_one(der)
            if rest:
                raise CertificateError("trailing data after certificate")
            parts = _expect(outer, _der.SEQUENCE, "Certificate").children()
            if len(parts) != 3:
                raise CertificateError("Certificate must have three parts")
            tbs, sig_alg, sig = parts
            fields = _expect(tbs, _der.SEQUENCE, "TBSCertificate").children()
            version = 0
            if fields and fields[0].tag == 0xA0:
                inner = fields.pop(0).children()
                if len(inner) != 1:
                    raise CertificateError("malformed version")
                version = int.from_bytes(
                    _expect(inner[0], _der.INTEGER, "version").content, "big", signed=True
                )
            if len(fields) < 6:
                raise CertificateError("TBSCertificate is too short")
            serial = int.from_bytes(
                _expect(fields[0], _der.INTEGER, "serial").content, "big", signed=True
            )
            issuer = _parse_name(fields[2])
            subject = _parse_name(fields[4])
            spki = _expect(fields[5], _der.SEQUENCE, "SubjectPublicKeyInfo").children()
            if len(spki) != 2:
                raise CertificateError("malformed SubjectPublicKeyInfo")
            key_alg, key_params = _algorithm(spki[0])
            public_key = _bit_string(spki[1])
            sig_oid, _ = _algorithm(sig_alg)
            signature = _bit_string(sig)
        except DerError as exc:
            raise CertificateError(str(exc)) from exc
        return cls(
            der=bytes(der),
            tbs_der=tbs.encoded,
            version=version,
            serial=serial,
            issuer=issuer,
            subject=subject,
            key_algorithm=key_alg,
            key_parameters=key_params,
            public_key=public_key,
            signature_algorithm=sig_oid,
            signature=signature,
        )


def load_pem_certificates(data: bytes | str) -> list[Certificate]:
    """Return every PEM certificate in ``data``, in order."""
    if isinstance(data, str):
        data = data.encode("ascii", "replace")
    certs = []
    for match in _PEM_RE.finditer(data):
        body = b"".join(match.group(2).split())
        try:
            raw = base64.b64decode(body, validate=True)
        except binascii.Error as exc:
            raise CertificateError(f"bad base64 in PEM block: {exc}") from exc
        certs.append(Certificate.from_der(raw))
    return certs


def read_pem_file(path: str | Path) -> list[Certificate]:
    """Read every PEM certificate in the file at ``path``."""
    return load_pem_certificates(Path(path).read_bytes())


def _attribute_text(value: Element) -> str:
    codec = _STRING_CODECS.get(value.tag)
    if codec is None:
        return "#" + value.encoded.hex().upper()
    try:
        text = value.content.decode(codec)
    except UnicodeDecodeError:
        return "#" + value.encoded.hex().upper()
    out = []
    last = len(text) - 1
    for index, char in enumerate(text):
        code = ord(char)
        if code < 0x20 or code == 0x7F:
            out.append(f"\\{code:02X}")
        elif code > 0x7F:
            out.extend(f"\\{b:02X}" for b in char.encode("utf-8"))
        elif char in ',+"\\<>;':
            out.append("\\" + char)
        elif (index == 0 and char in "# ") or (index == last and char == " "):
            out.append("\\" + char)
        else:
            out.append(char)
    return "".join(out)


def format_name_rfc2253(name: Name) -> str:
    """Format a parsed Name as an RFC 2253 string, most specific part first."""
    rdn_texts = []
    for rdn in reversed(name):
        rdn_texts.append(
            "+".join(
                f"{_SHORT_NAMES.get(oid, oid)}={_attribute_text(value)}"
                for oid, value in rdn
            )
        )
    return ",".join(rdn_texts)
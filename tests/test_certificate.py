import datetime

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from ecparamcheck.certificate import (
    Certificate,
    CertificateError,
    format_name_rfc2253,
    load_pem_certificates,
    read_pem_file,
)


def _make_cert(common_name="leaf"):
    key = ec.generate_private_key(ec.SECP256R1())
    name = x509.Name(
        [
            x509.NameAttribute(NameOID.COUNTRY_NAME, "US"),
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Example"),
            x509.NameAttribute(NameOID.COMMON_NAME, common_name),
        ]
    )
    now = datetime.datetime(2024, 1, 1)
    return (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(4242)
        .not_valid_before(now)
        .not_valid_after(now + datetime.timedelta(days=30))
        .sign(key, hashes.SHA256())
    )


def test_from_der_fields():
    built = _make_cert()
    cert = Certificate.from_der(built.public_bytes(serialization.Encoding.DER))
    assert cert.serial == 4242
    assert cert.version == 2
    assert cert.key_algorithm == "1.2.840.10045.2.1"
    assert cert.issuer == cert.subject
    assert cert.signature == built.signature
    assert cert.tbs_der == built.tbs_certificate_bytes


def test_subject_rfc2253_order():
    cert = Certificate.from_der(_make_cert().public_bytes(serialization.Encoding.DER))
    assert format_name_rfc2253(cert.subject) == "CN=leaf,O=Example,C=US"


def test_escaping_special_characters():
    cert = Certificate.from_der(
        _make_cert("a,b+c").public_bytes(serialization.Encoding.DER)
    )
    assert format_name_rfc2253(cert.subject).startswith("CN=a\\,b\\+c,")


def test_load_multiple_pem():
    first, second = _make_cert("one"), _make_cert("two")
    pem = first.public_bytes(serialization.Encoding.PEM) + b"junk\n" + second.public_bytes(
        serialization.Encoding.PEM
    )
    certs = load_pem_certificates(pem)
    assert [c.der for c in certs] == [
        first.public_bytes(serialization.Encoding.DER),
        second.public_bytes(serialization.Encoding.DER),
    ]


def test_load_pem_text_without_certificates():
    assert load_pem_certificates("nothing here") == []


def test_read_pem_file(tmp_path):
    built = _make_cert()
    path = tmp_path / "cert.pem"
    path.write_bytes(built.public_bytes(serialization.Encoding.PEM))
    certs = read_pem_file(path)
    assert len(certs) == 1
    assert certs[0].serial == 4242


def test_read_missing_file(tmp_path):
    with pytest.raises(OSError):
        read_pem_file(tmp_path / "absent.pem")


def test_bad_der_raises():
    with pytest.raises(CertificateError):
        Certificate.from_der(b"\x30\x03\x02\x01\x01")


def test_bad_base64_raises():
    pem = b"-----BEGIN CERTIFICATE-----\n!!!!\n-----END CERTIFICATE-----\n"
    with pytest.raises(CertificateError):
        load_pem_certificates(pem)
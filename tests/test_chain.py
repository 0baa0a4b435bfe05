import base64
import datetime
import io

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from cryptography.x509.oid import NameOID

from ecparamcheck import chain


def _tlv(tag, content):
    n = len(content)
    if n < 0x80:
        head = bytes([n])
    else:
        raw = n.to_bytes((n.bit_length() + 7) // 8, "big")
        head = bytes([0x80 | len(raw)]) + raw
    return bytes([tag]) + head + content


def _seq(*parts):
    return _tlv(0x30, b"".join(parts))


def _int(value):
    return _tlv(0x02, value.to_bytes(value.bit_length() // 8 + 1, "big"))


EC_OID = _tlv(0x06, bytes.fromhex("2a8648ce3d0201"))
ECDSA_SHA256 = _tlv(0x06, bytes.fromhex("2a8648ce3d040302"))
PRIME_FIELD = _tlv(0x06, bytes.fromhex("2a8648ce3d0101"))
CN_OID = _tlv(0x06, bytes.fromhex("550403"))
EXPLICIT_PARAMS = _seq(
    _int(1),
    _seq(PRIME_FIELD, _int(23)),
    _seq(_tlv(0x04, b"\x01"), _tlv(0x04, b"\x01")),
    _tlv(0x04, b"\x04\x03\x0a"),
    _int(29),
    _int(1),
)


def _name(cn):
    return _seq(_tlv(0x31, _seq(CN_OID, _tlv(0x0C, cn.encode()))))


def _hand_pem(params):
    sig_alg = _seq(ECDSA_SHA256)
    spki = _seq(_seq(EC_OID, params), _tlv(0x03, b"\x00\x04\x03\x0a"))
    tbs = _seq(
        _tlv(0xA0, _int(2)),
        _int(7),
        sig_alg,
        _name("Issuer"),
        _seq(_tlv(0x17, b"000101000000Z"), _tlv(0x17, b"491231235959Z")),
        _name("Hand"),
        spki,
    )
    der = _seq(tbs, sig_alg, _tlv(0x03, b"\x00\x30\x00"))
    return (
        b"-----BEGIN CERTIFICATE-----\n"
        + base64.encodebytes(der)
        + b"-----END CERTIFICATE-----\n"
    )


def _built(key, sign_key, algorithm):
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "Built")])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key)
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .sign(sign_key, algorithm)
    )
    return cert.public_bytes(serialization.Encoding.PEM)


@pytest.fixture
def mixed_file(tmp_path):
    ec_key = ec.generate_private_key(ec.SECP384R1())
    ed_key = ed25519.Ed25519PrivateKey.generate()
    path = tmp_path / "chain.pem"
    path.write_bytes(
        _built(ec_key.public_key(), ec_key, hashes.SHA256())
        + _hand_pem(EXPLICIT_PARAMS)
        + _built(ed_key.public_key(), ed_key, None)
    )
    return path


def test_process_chain_reports_each_certificate(mixed_file):
    out = io.StringIO()
    assert chain.process_chain_file(mixed_file, out) == 3
    lines = out.getvalue().splitlines()
    assert lines[0] == f"Processing certificate chain from file: {mixed_file}"
    assert lines[1:] == [
        "",
        "Certificate #1:",
        "  -> EC key uses a named group.",
        "",
        "Certificate #2:",
        "  -> EC key uses explicit elliptic curve parameters.",
        "",
        "Certificate #3:",
        "  -> This certificate does not have an EC public key.",
    ]


def test_process_chain_empty_file(tmp_path):
    path = tmp_path / "empty.pem"
    path.write_text("")
    out = io.StringIO()
    assert chain.process_chain_file(path, out) == 0
    assert out.getvalue().endswith("No certificates found in the provided file.\n")


def test_process_chain_classification_error(tmp_path, capsys):
    path = tmp_path / "bad.pem"
    path.write_bytes(_hand_pem(_tlv(0x05, b"")))
    out = io.StringIO()
    assert chain.process_chain_file(path, out) == 1
    assert out.getvalue().endswith(chain.ERROR_MESSAGE + "\n")
    assert capsys.readouterr().err.startswith("Error: ")


def test_process_chain_missing_file(tmp_path):
    out = io.StringIO()
    with pytest.raises(OSError):
        chain.process_chain_file(tmp_path / "absent.pem", out)
    assert out.getvalue() == ""


def test_main_success(mixed_file, capsys):
    assert chain.main([str(mixed_file)]) == 0
    output = capsys.readouterr().out
    assert output.count("Certificate #") == 3
    assert chain.MESSAGES[chain.ParamKind.EXPLICIT] in output


def test_main_missing_file(tmp_path, capsys):
    assert chain.main([str(tmp_path / "absent.pem")]) == 0
    assert "Error opening certificate file" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [[], ["a", "b"]])
def test_main_usage(capsys, argv):
    assert chain.main(argv) == 1
    assert "Usage:" in capsys.readouterr().err
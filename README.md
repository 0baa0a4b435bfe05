# ecparamcheck

Finds X.509 certificates whose elliptic-curve public keys carry **explicit
curve parameters** rather than a reference to a **named curve**. Many modern
TLS stacks reject explicit parameters, so it pays to find certificates that
use them early.

The check works on the encoding of the key's parameters in the
certificate's SubjectPublicKeyInfo. An object identifier counts as a named
curve. A parameter SEQUENCE counts as explicit parameters.

## Installation

```
pip install .
```

## Commands

### Check one certificate

```
ecparamcheck-plain server.pem
```

This reads the first PEM certificate in the file and prints one of:

- `Certificate has EC key with a named group.`
- `Certificate has EC key with explicit parameters.`
- `Certificate does not have an EC public key.`
- `Error occurred while checking the certificate.`

If the file cannot be opened or holds no readable certificate, an error goes
to standard error. Once the arguments are valid, the command exits with
status 0.

### Check every certificate in a PEM bundle

```
ecparamcheck-chain fullchain.pem
```

Each certificate in the file is numbered and reported in turn. If the file
holds no certificates, the command says so. Once the arguments are valid,
the command exits with status 0.

### Build a chain against trusted CAs and check it

```
ecparamcheck-trust leaf.pem trusted-cas.pem
```

The first certificate in `leaf.pem` is linked by issuer name to the
certificates in `trusted-cas.pem` until it reaches a self-issued one. The
chain is then verified: each link's signature is checked, and so is each
certificate's validity period. A failure is written to standard error along
with its numeric code, for example
`Certificate verification failed: unable to get local issuer certificate (20)`.
Whatever chain was built, complete or partial, is still checked. Each
certificate is printed with its subject in RFC 2253 form and its EC result.

The command ends with an overall **VALID** or **INVALID** verdict. It exits
with status 1 in any of these cases:

- a certificate in the chain uses explicit parameters,
- a certificate's key could not be examined,
- either input file could not be read.

## Library use

```python
from ecparamcheck.certificate import read_pem_file
from ecparamcheck.classify import classify, ParamKind

for cert in read_pem_file("fullchain.pem"):
    if classify(cert) is ParamKind.EXPLICIT:
        print("explicit parameters found")
```

- `ecparamcheck.certificate` provides these:
  - `read_pem_file` and `load_pem_certificates` return `Certificate` objects.
  - `Certificate.from_der` parses a single DER certificate.
  - `format_name_rfc2253` formats a subject or issuer name.
  - Malformed input raises `CertificateError`.
- `ecparamcheck.classify.classify` returns `ParamKind.NAMED`,
  `ParamKind.EXPLICIT` or `ParamKind.NOT_EC`. It raises `ClassificationError`
  when an EC key's parameters cannot be understood.
- `ecparamcheck.trust` provides these:
  - `build_chain(cert, trusted)` returns a `ChainResult`. The result holds
    `chain`, with the leaf first, and `error`, a `VerifyError`. Its
    `verified` property says whether the chain verified.
  - `report_certificate` writes one certificate's report.
  - `verify_and_report` runs the whole check and writes to the streams you
    pass in.
- `ecparamcheck.der` is the small DER reader the other modules use. It
  provides `parse_one`, `Element` and `decode_oid`.

## What it does not do

- Intermediate certificates are taken only from the trusted CA file. Any
  further certificates in the end-entity file are ignored.
- Chain verification covers only the points listed above. It does not check:
  - extensions such as basic constraints or key usage,
  - revocation,
  - policies.
- The curve parameters themselves are not decoded or validated. Only the
  form they take is examined.

## Running the tests

```
pip install .[test]
pytest
```
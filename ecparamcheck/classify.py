"""Decide whether a certificate's EC key uses a named curve or explicit parameters."""

from __future__ import annotations

import enum

from . import der
from .certificate import Certificate
from .der import DerError

EC_PUBLIC_KEY_OID = "1.2.840.10045.2.1"


class ParamKind(enum.Enum):
    """How the public key's curve is given."""

    NAMED = "named"
    EXPLICIT = "explicit"
    NOT_EC = "not_ec"


class ClassificationError(ValueError):
    """Raised when an EC key's parameters cannot be understood."""


def classify(cert: Certificate) -> ParamKind:
    """Return how the certificate's public key defines its curve."""
    if cert is None:
        raise ClassificationError("no certificate provided")
    if cert.key_algorithm != EC_PUBLIC_KEY_OID:
        return ParamKind.NOT_EC
    params = cert.key_parameters
    if params is None:
        raise ClassificationError("EC key has no curve parameters")
    if not cert.public_key:
        raise ClassificationError("EC key has an empty public point")
    if params.tag == der.OBJECT_IDENTIFIER:
        try:
            der.decode_oid(params.content)
        except DerError as exc:
            raise ClassificationError(f"bad curve identifier: {exc}") from exc
        return ParamKind.NAMED
    if params.tag == der.SEQUENCE:
        try:
            parts = params.children()
        except DerError as exc:
            raise ClassificationError(f"bad explicit parameters: {exc}") from exc
        if len(parts) < 5 or parts[0].tag != der.INTEGER:
            raise ClassificationError("malformed explicit EC parameters")
        return ParamKind.EXPLICIT
    raise ClassificationError("could not determine EC parameter encoding")
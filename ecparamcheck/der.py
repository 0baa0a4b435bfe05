"""Minimal DER reader for the parts of X.509 that the checks need."""

from __future__ import annotations

from dataclasses import dataclass

INTEGER = 0x02
BIT_STRING = 0x03
OCTET_STRING = 0x04
NULL = 0x05
OBJECT_IDENTIFIER = 0x06
UTF8_STRING = 0x0C
PRINTABLE_STRING = 0x13
T61_STRING = 0x14
IA5_STRING = 0x16
UNIVERSAL_STRING = 0x1C
BMP_STRING = 0x1E
SEQUENCE = 0x30
SET = 0x31


class DerError(ValueError):
    """Raised when bytes are not well-formed DER."""


@dataclass(frozen=True)
class Element:
    """One DER tag-length-value element."""

    tag: int
    content: bytes
    encoded: bytes

    @property
    def constructed(self) -> bool:
        return bool(self.tag & 0x20)

    def children(self) -> list[Element]:
        """Parse the content of a constructed element into its elements."""
        if not self.constructed:
            raise DerError(f"tag 0x{self.tag:02x} is not constructed")
        items = []
        rest = self.content
        while rest:
            item, rest = parse_one(rest)
            items.append(item)
        return items


def parse_one(data: bytes) -> tuple[Element, bytes]:
    """Parse the first element of ``data``; return it and the bytes after it."""
    data = bytes(data)
    if len(data) < 2:
        raise DerError("truncated element header")
    tag = data[0]
    if tag & 0x1F == 0x1F:
        raise DerError("high tag numbers are not supported")
    first = data[1]
    pos = 2
    if first < 0x80:
        length = first
    elif first == 0x80:
        raise DerError("indefinite length is not allowed in DER")
    else:
        count = first & 0x7F
        if len(data) < pos + count:
            raise DerError("truncated length")
        length_bytes = data[pos:pos + count]
        if length_bytes[0] == 0:
            raise DerError("non-minimal length encoding")
        length = int.from_bytes(length_bytes, "big")
        if length < 0x80:
            raise DerError("non-minimal length encoding")
        pos += count
    end = pos + length
    if len(data) < end:
        raise DerError("content runs past end of data")
    return Element(tag, data[pos:end], data[:end]), data[end:]


def decode_oid(content: bytes) -> str:
    """Decode the content octets of an OBJECT IDENTIFIER to dotted form."""
    if not content:
        raise DerError("empty object identifier")
    if content[-1] & 0x80:
        raise DerError("truncated object identifier")
    arcs: list[int] = []
    value = 0
    for byte in content:
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            arcs.append(value)
            value = 0
    first = arcs[0]
    if first < 40:
        head = [0, first]
    elif first < 80:
        head = [1, first - 40]
    else:
        head = [2, first - 80]
    return ".".join(str(arc) for arc in head + arcs[1:])
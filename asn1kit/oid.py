"""Object identifiers, absolute and relative."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from asn1kit.objects import (
    Any,
    Class,
    Header,
    InvalidLengthError,
    Tag,
)

_U64_LIMIT = 1 << 64
_COMPONENT = re.compile(r"\+?[0-9]+")


class OidParseError(ValueError):
    """An object identifier could not be built from its components."""

    TOO_SHORT = "too short"
    FIRST_COMPONENTS_TOO_LARGE = "first components too large"
    PARSE_INT = "invalid integer component"

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


def encode_arcs(ids: Iterable[int]) -> bytes:
    """Encode arcs in base 128, high bit set on all but the last octet of each."""
    out = bytearray()
    for value in ids:
        if value < 0:
            raise ValueError("arcs must be non-negative")
        octets = max((value.bit_length() + 6) // 7, 1)
        for i in range(octets):
            flag = 0 if i == octets - 1 else 0x80
            out.append(((value >> (7 * (octets - 1 - i))) & 0x7F) | flag)
    return bytes(out)


@dataclass(frozen=True, repr=False)
class Oid:
    """An object identifier held in its encoded content form."""

    asn1: bytes
    relative: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "asn1", bytes(self.asn1))

    @classmethod
    def from_components(cls, components) -> "Oid":
        s = list(components)
        if len(s) < 2:
            if len(s) == 1 and s[0] == 0:
                return cls(b"\x00")
            raise OidParseError(OidParseError.TOO_SHORT)
        if s[0] >= 7 or s[1] >= 40:
            raise OidParseError(OidParseError.FIRST_COMPONENTS_TOO_LARGE)
        first = (s[0] * 40 + s[1]) & 0xFF
        return cls(bytes([first]) + encode_arcs(s[2:]))

    @classmethod
    def from_relative_components(cls, components) -> "Oid":
        s = list(components)
        if not s:
            raise OidParseError(OidParseError.TOO_SHORT)
        return cls(encode_arcs(s), relative=True)

    @classmethod
    def parse(cls, text: str) -> "Oid":
        """Build an absolute OID from dotted text such as "1.2.840.113549"."""
        components = []
        for part in text.split("."):
            if not _COMPONENT.fullmatch(part):
                raise OidParseError(OidParseError.PARSE_INT)
            value = int(part)
            if value >= _U64_LIMIT:
                raise OidParseError(OidParseError.PARSE_INT)
            components.append(value)
        return cls.from_components(components)

    def _arc_bytes(self) -> bytes:
        if self.relative:
            return self.asn1
        return self.asn1[1:]

    def _iter_arcs(self) -> Iterator[int]:
        data = self.asn1
        if not data:
            return
        pos = 0
        if not self.relative:
            yield data[0] // 40
            if data == b"\x00":
                return
            yield data[0] % 40
            pos = 1
        while pos < len(data):
            value = 0
            for octet in data[pos:]:
                pos += 1
                value = (value << 7) | (octet & 0x7F)
                if not octet & 0x80:
                    break
            yield value

    def arcs(self) -> Optional[List[int]]:
        """Return the arcs, or None if any arc may not fit in 64 bits."""
        max_bits = 0
        current = 0
        for octet in self._arc_bytes():
            current += 7
            if not octet & 0x80:
                max_bits = max(max_bits, current)
                current = 0
        if max_bits > 64:
            return None
        return list(self._iter_arcs())

    def iter_bigint(self) -> Iterator[int]:
        """Iterate over the arcs with no size limit."""
        return self._iter_arcs()

    def arc_count(self) -> int:
        data = self.asn1
        if self.relative:
            return sum(1 for octet in data if not octet & 0x80)
        if not data:
            return 0
        if len(data) == 1:
            return 1 if data[0] == 0 else 2
        return 2 + sum(1 for octet in data[2:] if not octet & 0x80)

    def to_id_string(self) -> str:
        """Dotted arcs, or hex octets when an arc does not fit in 64 bits."""
        arcs = self.arcs()
        if arcs is not None:
            return ".".join(str(arc) for arc in arcs)
        return " ".join(f"{octet:02x}" for octet in self.asn1)

    def __str__(self) -> str:
        prefix = "rel. " if self.relative else ""
        return prefix + self.to_id_string()

    def __repr__(self) -> str:
        return f"OID({self})"

    def __bytes__(self) -> bytes:
        return self.asn1

    @classmethod
    def from_any(cls, obj: Any) -> "Oid":
        return cls(obj.data)

    @classmethod
    def check_constraints(cls, obj: Any) -> None:
        obj.header.assert_primitive()
        if obj.header.length is None:
            raise InvalidLengthError("indefinite length is not allowed in DER")

    @classmethod
    def from_ber(cls, data: bytes) -> Tuple[bytes, "Oid"]:
        rest, obj = Any.from_ber(data)
        obj.header.assert_tag(Tag.OID)
        return rest, cls.from_any(obj)

    @classmethod
    def from_der(cls, data: bytes) -> Tuple[bytes, "Oid"]:
        rest, obj = Any.from_der(data)
        obj.header.assert_tag(Tag.OID)
        cls.check_constraints(obj)
        return rest, cls.from_any(obj)

    @classmethod
    def from_ber_relative(cls, data: bytes) -> Tuple[bytes, "Oid"]:
        rest, obj = Any.from_ber(data)
        obj.header.assert_primitive()
        obj.header.assert_tag(Tag.RELATIVE_OID)
        return rest, cls(obj.data, relative=True)

    @classmethod
    def from_der_relative(cls, data: bytes) -> Tuple[bytes, "Oid"]:
        rest, obj = Any.from_der(data)
        obj.header.assert_tag(Tag.RELATIVE_OID)
        cls.check_constraints(obj)
        return rest, cls(obj.data, relative=True)

    def to_der_len(self) -> int:
        header = Header(Class.UNIVERSAL, False, Tag.OID, len(self.asn1))
        return header.encoded_length() + len(self.asn1)

    def to_der(self) -> bytes:
        tag = Tag.RELATIVE_OID if self.relative else Tag.OID
        return Header(Class.UNIVERSAL, False, tag, len(self.asn1)).encode() + self.asn1
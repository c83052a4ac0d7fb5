"""Core ASN.1 building blocks: errors, tags, headers and raw objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any as _AnyType
from typing import Callable, Optional, Tuple, TypeVar

T = TypeVar("T")


class Asn1Error(Exception):
    """Base class for all ASN.1 parsing and encoding errors."""


class UnexpectedTagError(Asn1Error):
    """The object carries a different tag than the one expected."""

    def __init__(self, expected: Optional[int], actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"unexpected tag: expected {expected}, got {actual}")


class ConstructExpectedError(Asn1Error):
    """A constructed object was expected but a primitive one was found."""

    def __init__(self, message: str = "constructed object expected") -> None:
        super().__init__(message)


class PrimitiveExpectedError(Asn1Error):
    """A primitive object was expected but a constructed one was found."""

    def __init__(self, message: str = "primitive object expected") -> None:
        super().__init__(message)


class InvalidValueError(Asn1Error):
    """The content of an object is not valid for its type."""

    def __init__(self, tag: int, message: str) -> None:
        self.tag = tag
        self.message = message
        super().__init__(f"invalid value for tag {tag}: {message}")


class InvalidLengthError(Asn1Error):
    """The length of an object is invalid or not allowed here."""

    def __init__(self, message: str = "invalid length") -> None:
        super().__init__(message)


class IncompleteError(Asn1Error):
    """The input ends before the object is complete."""

    def __init__(self, needed: int = 1) -> None:
        self.needed = needed
        super().__init__(f"incomplete input: {needed} more byte(s) needed")


class StringInvalidCharsetError(Asn1Error):
    """A string holds characters outside the allowed character set."""

    def __init__(self, message: str = "invalid character set for string") -> None:
        super().__init__(message)


class Class(IntEnum):
    """The class of an ASN.1 tag."""

    UNIVERSAL = 0
    APPLICATION = 1
    CONTEXT_SPECIFIC = 2
    PRIVATE = 3


class Tag(IntEnum):
    """Universal tag numbers."""

    END_OF_CONTENT = 0
    BOOLEAN = 1
    INTEGER = 2
    BIT_STRING = 3
    OCTET_STRING = 4
    NULL = 5
    OID = 6
    OBJECT_DESCRIPTOR = 7
    EXTERNAL = 8
    REAL_TYPE = 9
    ENUMERATED = 10
    EMBEDDED_PDV = 11
    UTF8_STRING = 12
    RELATIVE_OID = 13
    SEQUENCE = 16
    SET = 17
    NUMERIC_STRING = 18
    PRINTABLE_STRING = 19
    TELETEX_STRING = 20
    VIDEOTEX_STRING = 21
    IA5_STRING = 22
    UTC_TIME = 23
    GENERALIZED_TIME = 24
    GRAPHIC_STRING = 25
    VISIBLE_STRING = 26
    GENERAL_STRING = 27
    UNIVERSAL_STRING = 28
    BMP_STRING = 30


class Encoding(Enum):
    """Encoding rules used to read an object."""

    BER = "ber"
    DER = "der"


def encode_length(length: int) -> bytes:
    """Encode a definite length in its shortest form."""
    if length < 0:
        raise InvalidLengthError("length cannot be negative")
    if length < 0x80:
        return bytes([length])
    body = length.to_bytes((length.bit_length() + 7) // 8, "big")
    if len(body) > 126:
        raise InvalidLengthError("length too large")
    return bytes([0x80 | len(body)]) + body


def _encode_tag_number(number: int) -> bytes:
    groups = [number & 0x7F]
    number >>= 7
    while number:
        groups.append((number & 0x7F) | 0x80)
        number >>= 7
    return bytes(reversed(groups))


@dataclass(frozen=True)
class Header:
    """Identifier and length of an encoded object; length None means indefinite."""

    tag_class: Class
    constructed: bool
    tag: int
    length: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "tag_class", Class(self.tag_class))
        object.__setattr__(self, "tag", int(self.tag))

    def encode(self) -> bytes:
        """Return the identifier and length octets."""
        first = (int(self.tag_class) << 6) | (0x20 if self.constructed else 0)
        if self.tag < 0x1F:
            ident = bytes([first | self.tag])
        else:
            ident = bytes([first | 0x1F]) + _encode_tag_number(self.tag)
        length = b"\x80" if self.length is None else encode_length(self.length)
        return ident + length

    def encoded_length(self) -> int:
        """Return the number of octets the header takes when encoded."""
        return len(self.encode())

    def assert_primitive(self) -> None:
        if self.constructed:
            raise PrimitiveExpectedError()

    def assert_constructed(self) -> None:
        if not self.constructed:
            raise ConstructExpectedError()

    def assert_tag(self, tag: int) -> None:
        if self.tag != int(tag):
            raise UnexpectedTagError(int(tag), self.tag)


def _parse_header(data: bytes) -> Tuple[Header, int]:
    if not data:
        raise IncompleteError(1)
    first = data[0]
    tag_class = Class(first >> 6)
    constructed = bool(first & 0x20)
    tag = first & 0x1F
    pos = 1
    if tag == 0x1F:
        tag = 0
        while True:
            if pos >= len(data):
                raise IncompleteError(1)
            octet = data[pos]
            pos += 1
            tag = (tag << 7) | (octet & 0x7F)
            if not octet & 0x80:
                break
    if pos >= len(data):
        raise IncompleteError(1)
    octet = data[pos]
    pos += 1
    length: Optional[int]
    if octet < 0x80:
        length = octet
    elif octet == 0x80:
        length = None
    elif octet == 0xFF:
        raise InvalidLengthError("reserved length octet")
    else:
        count = octet & 0x7F
        if pos + count > len(data):
            raise IncompleteError(pos + count - len(data))
        length = int.from_bytes(data[pos:pos + count], "big")
        pos += count
    return Header(tag_class, constructed, tag, length), pos


@dataclass(frozen=True)
class Any:
    """A raw encoded object: its header and its undecoded content."""

    header: Header
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))

    @property
    def tag(self) -> int:
        return self.header.tag

    @property
    def tag_class(self) -> Class:
        return self.header.tag_class

    @classmethod
    def from_ber(cls, data: bytes) -> Tuple[bytes, "Any"]:
        """Read one object using BER; return the remaining bytes and the object."""
        data = bytes(data)
        header, offset = _parse_header(data)
        if header.length is None:
            if not header.constructed:
                raise InvalidLengthError("indefinite length on a primitive object")
            end = _find_end_of_contents(data, offset)
            return data[end + 2:], cls(header, data[offset:end])
        end = offset + header.length
        if end > len(data):
            raise IncompleteError(end - len(data))
        return data[end:], cls(header, data[offset:end])

    @classmethod
    def from_der(cls, data: bytes) -> Tuple[bytes, "Any"]:
        """Read one object using DER; the header must be definite and minimal."""
        data = bytes(data)
        header, offset = _parse_header(data)
        if header.length is None:
            raise InvalidLengthError("indefinite length is not allowed in DER")
        if header.encode() != data[:offset]:
            raise Asn1Error("header is not in canonical DER form")
        end = offset + header.length
        if end > len(data):
            raise IncompleteError(end - len(data))
        return data[end:], cls(header, data[offset:end])

    def to_der(self) -> bytes:
        """Encode the object with a definite length."""
        header = Header(
            self.header.tag_class, self.header.constructed, self.header.tag, len(self.data)
        )
        return header.encode() + self.data


def _find_end_of_contents(data: bytes, pos: int) -> int:
    while True:
        if data[pos:pos + 2] == b"\x00\x00":
            return pos
        if pos >= len(data):
            raise IncompleteError(2)
        rest, _ = Any.from_ber(data[pos:])
        pos = len(data) - len(rest)


def encode_tlv(
    tag: int, constructed: bool, content: bytes, tag_class: Class = Class.UNIVERSAL
) -> bytes:
    """Encode a complete object from its tag, form and content."""
    content = bytes(content)
    return Header(tag_class, constructed, tag, len(content)).encode() + content


class TagKind(Enum):
    """How a tagged value is tagged."""

    EXPLICIT = "explicit"
    IMPLICIT = "implicit"


@dataclass
class TaggedValue:
    """A value wrapped with an outer tag, either explicit or implicit."""

    inner: _AnyType
    kind: TagKind
    tag_class: Class
    tag: int

    def __post_init__(self) -> None:
        self.tag_class = Class(self.tag_class)
        self.tag = int(self.tag)

    @classmethod
    def explicit(cls, inner, tag_class, tag) -> "TaggedValue":
        return cls(inner, TagKind.EXPLICIT, tag_class, tag)

    @classmethod
    def implicit(cls, inner, tag_class, tag) -> "TaggedValue":
        return cls(inner, TagKind.IMPLICIT, tag_class, tag)


def parse_optional(
    parser: Callable[[bytes], Tuple[bytes, T]], data: bytes
) -> Tuple[bytes, Optional[T]]:
    """Run a parser, yielding None when input is empty or the tag does not match."""
    if not data:
        return data, None
    try:
        return parser(data)
    except UnexpectedTagError:
        return data, None


def encode_optional(value) -> bytes:
    """Encode a value to DER, or nothing at all for None."""
    if value is None:
        return b""
    return value.to_der()
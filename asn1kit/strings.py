"""Restricted character string types and UTF-8 helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, ClassVar, Optional, Tuple, Type, TypeVar

from asn1kit.objects import (
    Any,
    Class,
    Header,
    StringInvalidCharsetError,
    Tag,
    encode_tlv,
)

S = TypeVar("S", bound="Asn1String")

_PRINTABLE_EXTRA = frozenset(b" '()+,-./:=?")


def _is_ascii(octet: int) -> bool:
    return octet < 0x80


def _is_numeric(octet: int) -> bool:
    return 0x30 <= octet <= 0x39 or octet == 0x20


def _is_printable(octet: int) -> bool:
    return (
        0x61 <= octet <= 0x7A
        or 0x41 <= octet <= 0x5A
        or 0x30 <= octet <= 0x39
        or octet in _PRINTABLE_EXTRA
    )


def _is_visible(octet: int) -> bool:
    return 0x20 <= octet <= 0x7F


def _decode_utf8(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise StringInvalidCharsetError("invalid UTF-8 content") from exc


@dataclass(frozen=True)
class Asn1String:
    """A string of one of the ASN.1 restricted character string types."""

    value: str

    TAG: ClassVar[Tag] = Tag.UTF8_STRING
    _allowed: ClassVar[Optional[Callable[[int], bool]]] = None

    def __str__(self) -> str:
        return self.value

    @classmethod
    def test_valid_charset(cls, data: bytes) -> None:
        """Raise StringInvalidCharsetError if the bytes are not valid for this type."""
        data = bytes(data)
        allowed = cls._allowed
        if allowed is None:
            _decode_utf8(data)
        elif not all(allowed(octet) for octet in data):
            raise StringInvalidCharsetError()

    @classmethod
    def from_any(cls: Type[S], obj: Any) -> S:
        obj.header.assert_tag(cls.TAG)
        cls.test_valid_charset(obj.data)
        return cls(_decode_utf8(obj.data))

    @classmethod
    def from_ber(cls: Type[S], data: bytes) -> Tuple[bytes, S]:
        rest, obj = Any.from_ber(data)
        return rest, cls.from_any(obj)

    @classmethod
    def from_der(cls: Type[S], data: bytes) -> Tuple[bytes, S]:
        rest, obj = Any.from_der(data)
        obj.header.assert_tag(cls.TAG)
        cls.check_constraints(obj)
        return rest, cls.from_any(obj)

    @classmethod
    def check_constraints(cls, obj: Any) -> None:
        obj.header.assert_primitive()

    def encode_content(self) -> bytes:
        """Return the content octets of the encoded string."""
        return self.value.encode("utf-8")

    def to_der_len(self) -> int:
        size = len(self.encode_content())
        return Header(Class.UNIVERSAL, False, self.TAG, size).encoded_length() + size

    def to_der(self) -> bytes:
        return encode_tlv(self.TAG, False, self.encode_content())


class Utf8String(Asn1String):
    TAG = Tag.UTF8_STRING


class NumericString(Asn1String):
    TAG = Tag.NUMERIC_STRING
    _allowed = staticmethod(_is_numeric)


class PrintableString(Asn1String):
    TAG = Tag.PRINTABLE_STRING
    _allowed = staticmethod(_is_printable)


class Ia5String(Asn1String):
    TAG = Tag.IA5_STRING
    _allowed = staticmethod(_is_ascii)


class VisibleString(Asn1String):
    TAG = Tag.VISIBLE_STRING
    _allowed = staticmethod(_is_visible)


class TeletexString(Asn1String):
    TAG = Tag.TELETEX_STRING
    _allowed = staticmethod(_is_visible)


class VideotexString(Asn1String):
    TAG = Tag.VIDEOTEX_STRING
    _allowed = staticmethod(_is_visible)


class GeneralString(Asn1String):
    TAG = Tag.GENERAL_STRING
    _allowed = staticmethod(_is_ascii)


class GraphicString(Asn1String):
    TAG = Tag.GRAPHIC_STRING
    _allowed = staticmethod(_is_ascii)


def _utf16_units(data: bytes):
    for i in range(0, len(data), 2):
        chunk = data[i:i + 2]
        yield (chunk[0] << 8) | chunk[1] if len(chunk) == 2 else chunk[0]


def _decode_utf16_units(units) -> str:
    raw = b"".join(unit.to_bytes(2, "big") for unit in units)
    try:
        return raw.decode("utf-16-be")
    except UnicodeDecodeError as exc:
        raise StringInvalidCharsetError("invalid UTF-16 content") from exc


class BmpString(Asn1String):
    """A string stored as big-endian UTF-16."""

    TAG = Tag.BMP_STRING

    @classmethod
    def test_valid_charset(cls, data: bytes) -> None:
        data = bytes(data)
        if len(data) % 2:
            raise StringInvalidCharsetError()
        _decode_utf16_units(_utf16_units(data))

    @classmethod
    def from_any(cls, obj: Any) -> "BmpString":
        obj.header.assert_tag(cls.TAG)
        return cls(_decode_utf16_units(_utf16_units(obj.data)))

    def encode_content(self) -> bytes:
        return self.value.encode("utf-16-be")


class UniversalString(Asn1String):
    """A string stored as big-endian UCS-4."""

    TAG = Tag.UNIVERSAL_STRING

    @classmethod
    def from_any(cls, obj: Any) -> "UniversalString":
        obj.header.assert_tag(cls.TAG)
        data = obj.data
        if len(data) % 4:
            raise StringInvalidCharsetError()
        chars = []
        for i in range(0, len(data), 4):
            code = int.from_bytes(data[i:i + 4], "big")
            if code > 0x10FFFF or 0xD800 <= code <= 0xDFFF:
                raise StringInvalidCharsetError()
            chars.append(chr(code))
        return cls("".join(chars))

    def encode_content(self) -> bytes:
        return b"".join(ord(ch).to_bytes(4, "big") for ch in self.value)


def str_from_any(obj: Any) -> str:
    """Read a UTF8String object as a plain str."""
    obj.header.assert_tag(Tag.UTF8_STRING)
    return Utf8String.from_any(obj).value


def str_to_der(value: str) -> bytes:
    """Encode a plain str as a UTF8String."""
    return Utf8String(value).to_der()
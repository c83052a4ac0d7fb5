"""The ASN.1 REAL type."""

from __future__ import annotations

import math
import re
import struct
import sys
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from asn1kit.objects import (
    Any,
    Class,
    Header,
    InvalidLengthError,
    InvalidValueError,
    StringInvalidCharsetError,
    Tag,
    encode_tlv,
)

_EPSILON = sys.float_info.epsilon
_UNSIGNED = re.compile(r"\+?[0-9]+")
_U32_LIMIT = 1 << 32
_U64_MAX = (1 << 64) - 1
_ENC_BASES = {0: 2, 1: 8, 2: 16}
_EXPONENT_FACTOR = {0: 1, 1: 3, 2: 4}


class RealKind(Enum):
    """The variants a REAL value can take."""

    BINARY = "binary"
    INFINITY = "infinity"
    NEG_INFINITY = "neg_infinity"
    ZERO = "zero"


def _powi(base: float, exponent: int) -> float:
    try:
        return float(base) ** exponent
    except (OverflowError, ZeroDivisionError):
        return math.inf


def _fract(value: float) -> float:
    return math.modf(value)[0]


def _format_float(value: float) -> str:
    """Format a float positionally, with no trailing ".0" on whole numbers."""
    text = format(Decimal(repr(value)), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _parse_float(text: str) -> Optional[float]:
    if not text or not text.isascii() or text != text.strip() or "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _drop_floating_point(m: float, b: int, e: int) -> Tuple[int, int, int, int]:
    ms = 1 if math.copysign(1.0, m) > 0 else -1
    es = 1 if e > 0 else -1
    m = abs(m)
    if b == 8:
        m *= _powi(2.0, (abs(e) // 3) * es)
        e = (abs(e) // 3) * es
    elif b == 16:
        m *= _powi(2.0, (abs(e) // 4) * es)
        e = (abs(e) // 4) * es
    while abs(m) > _EPSILON and _fract(m) != 0.0:
        m *= b
        e -= 1
    if math.isinf(m):
        mantissa = _U64_MAX
    else:
        mantissa = min(int(m), _U64_MAX)
    return ms, mantissa, b, e


@dataclass(frozen=True)
class Real:
    """An ASN.1 REAL value; only base 2 is supported for binary encoding."""

    kind: RealKind
    mantissa: float = 0.0
    base: int = 0
    exponent: int = 0
    enc_base: int = 0

    @classmethod
    def from_float(cls, value) -> "Real":
        """Build a REAL from a float, as a normalized base-10 value."""
        value = float(value)
        if math.isnan(value):
            raise ValueError("NaN cannot be represented as a REAL")
        if math.isinf(value):
            return cls(RealKind.INFINITY if value > 0 else RealKind.NEG_INFINITY)
        if value == 0.0:
            return cls(RealKind.ZERO)
        exponent = 0
        while _fract(value) != 0.0:
            value *= 10.0
            exponent -= 1
        return cls(RealKind.BINARY, value, 10, exponent, 10)._normalize_base10()

    @classmethod
    def binary(cls, mantissa, base, exponent) -> "Real":
        """Build a binary REAL encoded with base 2."""
        return cls(RealKind.BINARY, float(mantissa), int(base), int(exponent), 2)

    def with_enc_base(self, enc_base) -> "Real":
        """Return a copy using another encoding base (binary values only)."""
        if self.kind is RealKind.BINARY:
            return replace(self, enc_base=int(enc_base))
        return self

    def _normalize_base10(self) -> "Real":
        if self.kind is not RealKind.BINARY or self.base != 10:
            return self
        m = self.mantissa
        e = self.exponent
        while abs(m) > _EPSILON and abs(m % 10.0) < _EPSILON:
            m /= 10.0
            e += 1
        return replace(self, mantissa=m, exponent=e)

    def is_infinite(self) -> bool:
        return self.kind in (RealKind.INFINITY, RealKind.NEG_INFINITY)

    def is_finite(self) -> bool:
        return self.kind in (RealKind.ZERO, RealKind.BINARY)

    def to_float(self) -> float:
        """Return the value as a float, which may be infinite."""
        if self.kind is RealKind.BINARY:
            return self.mantissa * _powi(self.base, self.exponent)
        if self.kind is RealKind.ZERO:
            return 0.0
        if self.kind is RealKind.INFINITY:
            return math.inf
        return -math.inf

    def to_float32(self) -> float:
        """Return the value rounded to single precision."""
        value = self.to_float()
        try:
            return struct.unpack("f", struct.pack("f", value))[0]
        except OverflowError:
            return math.copysign(math.inf, value)

    def __float__(self) -> float:
        return self.to_float()

    @classmethod
    def from_any(cls, obj: Any) -> "Real":
        obj.header.assert_tag(Tag.REAL_TYPE)
        obj.header.assert_primitive()
        data = obj.data
        if not data:
            return cls(RealKind.ZERO)
        first = data[0]
        rem = data[1:]
        if first & 0x80:
            return cls._decode_binary(first, rem)
        if first & 0x40:
            if obj.header.length != 1:
                raise InvalidLengthError("special REAL values take one octet")
            if first == 0x40:
                return cls(RealKind.INFINITY)
            if first == 0x41:
                return cls(RealKind.NEG_INFINITY)
            raise InvalidValueError(Tag.REAL_TYPE, "Invalid float special value")
        return cls._decode_decimal(first, rem)

    @classmethod
    def _decode_binary(cls, first: int, rem: bytes) -> "Real":
        n = (first & 0x03) + 1
        if n >= len(rem):
            raise InvalidValueError(Tag.REAL_TYPE, "Invalid float value(exponent)")
        exponent = int.from_bytes(rem[:n], "big", signed=True)
        rem = rem[n:]
        base_bits = (first >> 4) & 0x03
        if base_bits not in _ENC_BASES:
            raise InvalidValueError(Tag.REAL_TYPE, "Illegal REAL encoding base")
        enc_base = _ENC_BASES[base_bits]
        exponent *= _EXPONENT_FACTOR[base_bits]
        if len(rem) > 8:
            raise InvalidValueError(Tag.REAL_TYPE, "Mantissa too large (REAL)")
        p = int.from_bytes(rem, "big")
        if p > (1 << 63) - 1:
            p -= 1 << 64
        if first & 0x40:
            p = -p
        scale = (first >> 2) & 0x03
        mantissa = float(p) * _powi(2.0, scale) if scale else float(p)
        return cls(RealKind.BINARY, mantissa, 2, exponent, enc_base)

    @classmethod
    def _decode_decimal(cls, first: int, rem: bytes) -> "Real":
        try:
            text = rem.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise StringInvalidCharsetError("invalid UTF-8 in REAL") from exc
        form = first & 0x03
        if form == 1:
            if not _UNSIGNED.fullmatch(text) or int(text) >= _U32_LIMIT:
                raise InvalidValueError(Tag.REAL_TYPE, "Invalid float string encoding")
            return cls.from_float(float(int(text)))
        if form in (2, 3):
            value = _parse_float(text)
            if value is None or math.isnan(value):
                raise InvalidValueError(Tag.REAL_TYPE, "Invalid float string encoding")
            return cls.from_float(value)
        raise InvalidValueError(Tag.REAL_TYPE, f"Invalid NR ({form})")

    @classmethod
    def from_ber(cls, data: bytes) -> Tuple[bytes, "Real"]:
        rest, obj = Any.from_ber(data)
        return rest, cls.from_any(obj)

    @classmethod
    def from_der(cls, data: bytes) -> Tuple[bytes, "Real"]:
        rest, obj = Any.from_der(data)
        obj.header.assert_tag(Tag.REAL_TYPE)
        cls.check_constraints(obj)
        return rest, cls.from_any(obj)

    @classmethod
    def check_constraints(cls, obj: Any) -> None:
        obj.header.assert_primitive()
        if obj.header.length is None:
            raise InvalidLengthError("indefinite length is not allowed in DER")

    def encode_content(self) -> bytes:
        """Return the content octets of the DER encoding."""
        if self.kind is RealKind.ZERO:
            return b""
        if self.kind is RealKind.INFINITY:
            return b"\x40"
        if self.kind is RealKind.NEG_INFINITY:
            return b"\x41"
        if self.base == 10:
            sign = "+" if self.exponent == 0 else ""
            text = f"\x03{_format_float(self.mantissa)}E{sign}{self.exponent}"
            return text.encode("ascii")
        if self.base != 2:
            raise InvalidValueError(Tag.REAL_TYPE, "Invalid base for REAL")
        return self._encode_binary()

    def _encode_binary(self) -> bytes:
        first = 0x80
        ms, m, enc_base, e = _drop_floating_point(self.mantissa, self.enc_base, self.exponent)
        if m == 0:
            raise InvalidValueError(Tag.REAL_TYPE, "REAL mantissa cannot be zero")
        if ms < 0:
            first |= 0x40
        if enc_base == 2:
            while not m & 0x1:
                m >>= 1
                e += 1
        elif enc_base == 8:
            while not m & 0x7:
                m >>= 3
                e += 1
            first |= 0x10
        else:
            while not m & 0xF:
                m >>= 4
                e += 1
            first |= 0x20
        scale = 0
        while not m & 0x1 and scale < 4:
            m >>= 1
            scale += 1
        first |= (scale << 2) & 0xFF
        magnitude = abs(e)
        if magnitude <= 0xFF:
            len_e = 1
        elif magnitude <= 0xFFFF:
            len_e = 2
        elif magnitude <= 0xFF_FFFF:
            len_e = 3
        else:
            len_e = 4
        first |= (len_e - 1) & 0x3
        out = bytearray([first])
        if len_e == 4:
            out.append(len_e & 0xFF)
        out += (e & 0xFFFFFFFF).to_bytes(4, "big")[4 - len_e:]
        out += m.to_bytes(8, "big").lstrip(b"\x00")
        return bytes(out)

    def to_der_len(self) -> int:
        """Return the length of the content octets."""
        if self.kind is RealKind.ZERO:
            return 0
        if self.is_infinite():
            return 1
        return len(self.encode_content())

    def to_der(self) -> bytes:
        return encode_tlv(Tag.REAL_TYPE, False, self.encode_content())

    def der_header(self) -> Header:
        """Return the DER header that precedes the content."""
        return Header(Class.UNIVERSAL, False, Tag.REAL_TYPE, self.to_der_len())


def float_from_any(obj: Any) -> float:
    """Read a REAL object as a float."""
    obj.header.assert_tag(Tag.REAL_TYPE)
    obj.header.assert_primitive()
    return Real.from_any(obj).to_float()


def float32_from_any(obj: Any) -> float:
    """Read a REAL object as a single-precision float."""
    obj.header.assert_tag(Tag.REAL_TYPE)
    obj.header.assert_primitive()
    return Real.from_any(obj).to_float32()
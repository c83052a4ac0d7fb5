import math

import pytest

from asn1kit.objects import (
    Any,
    Class,
    Header,
    InvalidLengthError,
    InvalidValueError,
    PrimitiveExpectedError,
    StringInvalidCharsetError,
    Tag,
    UnexpectedTagError,
    encode_tlv,
)
from asn1kit.real import Real, RealKind, float32_from_any, float_from_any

HALF_DER = b"\x09\x03\x80\xff\x01"


def _real_any(content: bytes, constructed: bool = False, tag=Tag.REAL_TYPE) -> Any:
    return Any(Header(Class.UNIVERSAL, constructed, tag, len(content)), content)


def test_binary_half_encoding():
    assert Real.binary(1.0, 2, -1).to_der() == HALF_DER


def test_binary_half_decoding():
    rest, value = Real.from_der(HALF_DER + b"\xaa")
    assert rest == b"\xaa"
    assert value == Real.binary(1.0, 2, -1)
    assert value.to_float() == 0.5


def test_decimal_encoding_of_hundred():
    assert Real.from_float(100.0).encode_content() == b"\x031E2"


@pytest.mark.parametrize("value", [1.5, -2.25, 100.0, 5.0])
def test_decimal_round_trip_exact(value):
    real = Real.from_float(value)
    rest, decoded = Real.from_der(real.to_der())
    assert rest == b""
    assert decoded == real
    assert decoded.to_float() == pytest.approx(value)


@pytest.mark.parametrize("value", [1e-5, 123456.789, 0.1, -7.75])
def test_decimal_round_trip_value(value):
    _, decoded = Real.from_der(Real.from_float(value).to_der())
    assert decoded.to_float() == pytest.approx(value)


@pytest.mark.parametrize(
    "mantissa, exponent", [(1.0, -1), (3.0, 5), (-5.0, 2), (0.75, 0), (12.0, -3)]
)
def test_binary_round_trip(mantissa, exponent):
    real = Real.binary(mantissa, 2, exponent)
    _, decoded = Real.from_der(real.to_der())
    assert decoded.base == 2
    assert decoded.to_float() == real.to_float()


@pytest.mark.parametrize("mantissa, enc_base", [(8.0, 8), (6.0, 8), (48.0, 16)])
def test_binary_round_trip_other_bases(mantissa, enc_base):
    real = Real.binary(mantissa, 2, 0).with_enc_base(enc_base)
    _, decoded = Real.from_der(real.to_der())
    assert decoded.enc_base == enc_base
    assert decoded.to_float() == mantissa


def test_with_enc_base_leaves_specials():
    inf = Real.from_float(math.inf)
    assert inf.with_enc_base(8) == inf


def test_zero():
    zero = Real.from_float(-0.0)
    assert zero.kind is RealKind.ZERO
    assert zero.to_der() == encode_tlv(Tag.REAL_TYPE, False, b"")
    assert zero.to_der_len() == 0
    _, decoded = Real.from_der(zero.to_der())
    assert decoded.kind is RealKind.ZERO
    assert decoded.to_float() == 0.0


@pytest.mark.parametrize(
    "value, kind", [(math.inf, RealKind.INFINITY), (-math.inf, RealKind.NEG_INFINITY)]
)
def test_infinities_round_trip(value, kind):
    real = Real.from_float(value)
    assert real.kind is kind
    assert real.is_infinite() and not real.is_finite()
    assert real.to_der_len() == 1
    _, decoded = Real.from_der(real.to_der())
    assert decoded.kind is kind
    assert decoded.to_float() == value


def test_finite_values():
    assert Real.from_float(2.5).is_finite()
    assert not Real.from_float(2.5).is_infinite()


def test_nan_rejected():
    with pytest.raises(ValueError):
        Real.from_float(math.nan)


def test_to_der_len_matches_content():
    real = Real.binary(-5.0, 2, 2)
    assert real.to_der_len() == len(real.encode_content())


def test_zero_mantissa_binary_rejected():
    with pytest.raises(InvalidValueError):
        Real.binary(0.0, 2, 0).encode_content()


def test_unsupported_base_rejected():
    with pytest.raises(InvalidValueError):
        Real.binary(1.0, 3, 1).encode_content()


def test_scale_factor_doubles_mantissa():
    plain = Real.from_any(_real_any(b"\x80\x00\x03")).to_float()
    scaled = Real.from_any(_real_any(b"\x84\x00\x03")).to_float()
    assert plain == 3.0
    assert scaled == 2 * plain


def test_missing_mantissa_rejected():
    with pytest.raises(InvalidValueError):
        Real.from_any(_real_any(b"\x80\x00"))


def test_illegal_base_rejected():
    with pytest.raises(InvalidValueError):
        Real.from_any(_real_any(b"\xb0\x00\x01"))


def test_mantissa_too_large_rejected():
    with pytest.raises(InvalidValueError):
        Real.from_any(_real_any(b"\x80\x00" + b"\x01" * 9))


def test_special_value_with_extra_octet_rejected():
    with pytest.raises(InvalidLengthError):
        Real.from_any(_real_any(b"\x40\x00"))


def test_unknown_special_value_rejected():
    with pytest.raises(InvalidValueError):
        Real.from_any(_real_any(b"\x42"))


def test_nr1_decoding():
    assert Real.from_any(_real_any(b"\x0112")).to_float() == 12.0


@pytest.mark.parametrize("text", [b"1.5", b"-3", b"", b" 1"])
def test_nr1_invalid(text):
    with pytest.raises(InvalidValueError):
        Real.from_any(_real_any(b"\x01" + text))


def test_nr2_decoding():
    assert Real.from_any(_real_any(b"\x022.5")).to_float() == pytest.approx(2.5)


@pytest.mark.parametrize("text", [b" 2.5", b"1_0", b"abc", b"nan"])
def test_nr3_invalid(text):
    with pytest.raises(InvalidValueError):
        Real.from_any(_real_any(b"\x03" + text))


def test_nr0_rejected():
    with pytest.raises(InvalidValueError):
        Real.from_any(_real_any(b"\x0012"))


def test_decimal_invalid_utf8_rejected():
    with pytest.raises(StringInvalidCharsetError):
        Real.from_any(_real_any(b"\x03\xff"))


def test_wrong_tag_rejected():
    with pytest.raises(UnexpectedTagError):
        Real.from_any(_real_any(b"\x40", tag=Tag.INTEGER))


def test_constructed_rejected():
    with pytest.raises(PrimitiveExpectedError):
        Real.from_any(_real_any(b"\x40", constructed=True))


def test_float_from_any():
    real = Real.binary(-5.0, 2, 2)
    _, obj = Any.from_der(real.to_der())
    assert float_from_any(obj) == real.to_float()
    assert float(real) == real.to_float()


def test_float_from_any_wrong_tag():
    with pytest.raises(UnexpectedTagError):
        float_from_any(_real_any(b"\x40", tag=Tag.OCTET_STRING))


def test_float32_from_any():
    real = Real.binary(1.0, 2, -1)
    _, obj = Any.from_der(real.to_der())
    assert float32_from_any(obj) == real.to_float()


def test_float32_overflow_is_infinite():
    assert Real.binary(1.0, 2, 200).to_float32() == math.inf
    assert Real.binary(-1.0, 2, 200).to_float32() == -math.inf
import pytest

from asn1kit.objects import (
    Any,
    Class,
    Header,
    PrimitiveExpectedError,
    StringInvalidCharsetError,
    Tag,
    UnexpectedTagError,
    encode_tlv,
)
from asn1kit.strings import (
    BmpString,
    GeneralString,
    GraphicString,
    Ia5String,
    NumericString,
    PrintableString,
    TeletexString,
    UniversalString,
    Utf8String,
    VideotexString,
    VisibleString,
    str_from_any,
    str_to_der,
)

ALL_TYPES = [
    Utf8String,
    NumericString,
    PrintableString,
    Ia5String,
    VisibleString,
    TeletexString,
    VideotexString,
    GeneralString,
    GraphicString,
    BmpString,
    UniversalString,
]


def test_charset_example_from_docs():
    with pytest.raises(StringInvalidCharsetError):
        PrintableString.test_valid_charset(b"abcd*4")
    VisibleString.test_valid_charset(b"abcd*4")
    assert VisibleString.from_any(Any(Header(Class.UNIVERSAL, False, Tag.VISIBLE_STRING, 6), b"abcd*4")).value == "abcd*4"


def test_printable_wire_bytes():
    assert PrintableString("abc").to_der() == b"\x13\x03abc"


@pytest.mark.parametrize("cls", ALL_TYPES)
def test_round_trip_ber_and_der(cls):
    value = cls("12 34")
    encoded = value.to_der()
    rest, obj = Any.from_der(encoded)
    assert rest == b""
    assert obj.tag == cls.TAG
    assert encoded[0] == int(cls.TAG)
    assert cls.from_ber(encoded + b"\x05\x00") == (b"\x05\x00", value)
    assert cls.from_der(encoded) == (b"", value)
    assert value.to_der_len() == len(encoded)


def test_long_string_length():
    value = Utf8String("x" * 300)
    encoded = value.to_der()
    assert value.to_der_len() == len(encoded)
    assert Utf8String.from_der(encoded)[1] == value


def test_numeric_charset():
    NumericString.test_valid_charset(b"0123 45")
    with pytest.raises(StringInvalidCharsetError):
        NumericString.test_valid_charset(b"12a")


def test_ia5_rejects_non_ascii():
    with pytest.raises(StringInvalidCharsetError):
        Ia5String.from_any(Any(Header(Class.UNIVERSAL, False, Tag.IA5_STRING, 1), b"\x80"))


def test_visible_rejects_control():
    with pytest.raises(StringInvalidCharsetError):
        TeletexString.test_valid_charset(b"a\x1fb")


def test_utf8_invalid_bytes():
    with pytest.raises(StringInvalidCharsetError):
        Utf8String.from_der(encode_tlv(Tag.UTF8_STRING, False, b"\xff\xfe"))


def test_wrong_tag():
    with pytest.raises(UnexpectedTagError):
        PrintableString.from_ber(Utf8String("abc").to_der())


def test_der_requires_primitive():
    data = encode_tlv(Tag.UTF8_STRING, True, b"abc")
    with pytest.raises(PrimitiveExpectedError):
        Utf8String.from_der(data)


def test_bmp_encoding():
    assert BmpString("ab").to_der() == b"\x1e\x04\x00a\x00b"
    text = "h\u00e9\U0001f600"
    assert BmpString.from_der(BmpString(text).to_der())[1].value == text


def test_bmp_charset():
    with pytest.raises(StringInvalidCharsetError):
        BmpString.test_valid_charset(b"\x00a\x00")
    with pytest.raises(StringInvalidCharsetError):
        BmpString.test_valid_charset(b"\xd8\x00")
    with pytest.raises(StringInvalidCharsetError):
        BmpString.from_any(Any(Header(Class.UNIVERSAL, False, Tag.BMP_STRING, 2), b"\xd8\x00"))


def test_universal_encoding():
    assert UniversalString("a").encode_content() == b"\x00\x00\x00a"
    text = "\u00e9\U0001f600"
    assert UniversalString.from_der(UniversalString(text).to_der())[1].value == text


def test_universal_errors():
    with pytest.raises(StringInvalidCharsetError):
        UniversalString.from_ber(encode_tlv(Tag.UNIVERSAL_STRING, False, b"\x00\x00\x00"))
    with pytest.raises(StringInvalidCharsetError):
        UniversalString.from_ber(encode_tlv(Tag.UNIVERSAL_STRING, False, b"\x00\x11\x00\x00"))


def test_str_helpers():
    encoded = str_to_der("hello")
    assert encoded == Utf8String("hello").to_der()
    _, obj = Any.from_der(encoded)
    assert str_from_any(obj) == "hello"
    _, other = Any.from_der(PrintableString("hello").to_der())
    with pytest.raises(UnexpectedTagError):
        str_from_any(other)


def test_str_and_equality():
    assert str(Ia5String("abc")) == "abc"
    assert Ia5String("abc") != VisibleString("abc")
    assert Ia5String("abc") == Ia5String("abc")
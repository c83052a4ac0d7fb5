# asn1kit

A small library with no dependencies for reading BER/DER encoded ASN.1 data
and writing DER.

## What it covers

- `asn1kit.objects` – the building blocks: `Header`, `Any` (a raw
  tag/length/value object with `Any.from_ber`, `Any.from_der` and
  `Any.to_der`), the `Class` and `Tag` enums, `encode_length`, `encode_tlv`,
  `parse_optional` / `encode_optional` for optional values, `TaggedValue`,
  and the error classes, all derived from `Asn1Error`
  (`UnexpectedTagError`, `ConstructExpectedError`, `PrimitiveExpectedError`,
  `InvalidValueError`, `InvalidLengthError`, `IncompleteError`,
  `StringInvalidCharsetError`).
- `asn1kit.oid` – `Oid`, absolute and relative object identifiers, built from
  components (`Oid.from_components`, `Oid.from_relative_components`) or dotted
  text (`Oid.parse`). Invalid input raises `OidParseError`.
- `asn1kit.real` – `Real`, the ASN.1 `REAL` type (binary, decimal and special
  encodings), plus `float_from_any` and `float32_from_any`.
- `asn1kit.strings` – restricted character strings: `Utf8String`,
  `PrintableString`, `Ia5String`, `NumericString`, `VisibleString`,
  `TeletexString`, `VideotexString`, `GeneralString`, `GraphicString`,
  `BmpString` (UTF-16) and `UniversalString` (UCS-4), plus `str_from_any` and
  `str_to_der` for plain `str` values.
- `asn1kit.iterator` – `SequenceIterator` and `SetIterator`, which parse
  consecutive items of one type from the content of a container.
- `asn1kit.sequence` – `Sequence` (content kept in encoded form), `SequenceOf`,
  and `encode_sequence_of`, `decode_sequence_of`, `check_sequence_of`.
- `asn1kit.set` – `Set`, `SetOf`, and `encode_set_of`, `decode_set_of`,
  `decode_sorted_set_of`, `check_set_of`.

Parsing functions take `bytes` and return a pair `(remaining, value)`.

## Installation

```
pip install asn1kit
```

## Examples

Object identifiers:

```python
from asn1kit.oid import Oid

oid = Oid.parse("1.2.840.113549.1.1.1")
der = oid.to_der()
rest, decoded = Oid.from_der(der)
assert decoded == oid
assert decoded.to_id_string() == "1.2.840.113549.1.1.1"
assert rest == b""
```

Strings:

```python
from asn1kit.strings import PrintableString

rest, s = PrintableString.from_der(PrintableString("hello").to_der())
assert str(s) == "hello"
```

Sequences of items of one type:

```python
from asn1kit.sequence import Sequence
from asn1kit.strings import Utf8String

seq = Sequence.from_iter_to_der([Utf8String("a"), Utf8String("b")])
items = seq.der_sequence_of(Utf8String)
assert [str(item) for item in items] == ["a", "b"]
```

REAL values:

```python
from asn1kit.real import Real

value = Real.from_float(1.5)
rest, decoded = Real.from_der(value.to_der())
assert decoded == value
print(decoded.to_float())
```

## What it does not do

- There are no types for `INTEGER`, `BOOLEAN`, `NULL`, `BIT STRING`,
  `OCTET STRING` or the time types; such objects can only be read as raw
  `Any` values.
- `TaggedValue` only holds a value together with its tag class, tag number and
  `TagKind`; it has no parsing or encoding of its own.
- Binary `REAL` values are only supported with base 2.
- There is no command-line tool.

## Running the tests

```
pip install -e ".[test]"
pytest
```
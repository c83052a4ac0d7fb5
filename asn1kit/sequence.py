"""The SEQUENCE and SEQUENCE OF types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, List, Tuple, TypeVar

from asn1kit.iterator import SequenceIterator
from asn1kit.objects import (
    Any,
    Class,
    ConstructExpectedError,
    Encoding,
    Header,
    Tag,
    encode_tlv,
)
from asn1kit.strings import str_to_der

T = TypeVar("T")
U = TypeVar("U")


def _item_to_der(item) -> bytes:
    if isinstance(item, str):
        return str_to_der(item)
    try:
        encode = item.to_der
    except AttributeError:
        raise TypeError(f"cannot encode {type(item).__name__!r} to DER") from None
    return encode()


def _encoded_size(content_length: int) -> int:
    header = Header(Class.UNIVERSAL, True, Tag.SEQUENCE, content_length)
    return header.encoded_length() + content_length


@dataclass(frozen=True)
class Sequence:
    """An ordered list of objects of any type, kept in encoded form."""

    content: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "content", bytes(self.content))

    def __bytes__(self) -> bytes:
        return self.content

    @classmethod
    def from_any(cls, obj: Any) -> "Sequence":
        obj.header.assert_tag(Tag.SEQUENCE)
        obj.header.assert_constructed()
        return cls(obj.data)

    @classmethod
    def from_ber(cls, data: bytes) -> Tuple[bytes, "Sequence"]:
        rest, obj = Any.from_ber(data)
        return rest, cls.from_any(obj)

    @classmethod
    def from_der(cls, data: bytes) -> Tuple[bytes, "Sequence"]:
        rest, obj = Any.from_der(data)
        obj.header.assert_tag(Tag.SEQUENCE)
        return rest, cls.from_any(obj)

    @classmethod
    def from_ber_and_then(
        cls, data: bytes, op: Callable[[bytes], Tuple[bytes, U]]
    ) -> Tuple[bytes, U]:
        """Read a BER sequence and apply ``op`` to its content."""
        rest, seq = cls.from_ber(data)
        _, result = op(seq.content)
        return rest, result

    @classmethod
    def from_der_and_then(
        cls, data: bytes, op: Callable[[bytes], Tuple[bytes, U]]
    ) -> Tuple[bytes, U]:
        """Read a DER sequence and apply ``op`` to its content."""
        rest, seq = cls.from_der(data)
        _, result = op(seq.content)
        return rest, result

    @classmethod
    def from_iter_to_der(cls, items: Iterable) -> "Sequence":
        """Build a sequence whose content is the DER encoding of each item."""
        return cls(b"".join(_item_to_der(item) for item in items))

    def parse(self, func: Callable[[bytes], U]) -> U:
        """Apply a parsing function to the content."""
        return func(self.content)

    def ber_iter(self, item_type) -> SequenceIterator:
        return SequenceIterator(self.content, item_type, Encoding.BER)

    def der_iter(self, item_type) -> SequenceIterator:
        return SequenceIterator(self.content, item_type, Encoding.DER)

    def ber_sequence_of(self, item_type) -> list:
        return list(self.ber_iter(item_type))

    def der_sequence_of(self, item_type) -> list:
        return list(self.der_iter(item_type))

    def to_der_len(self) -> int:
        return _encoded_size(len(self.content))

    def to_der(self) -> bytes:
        return encode_tlv(Tag.SEQUENCE, True, self.content)


def encode_sequence_of(items: Iterable) -> bytes:
    """Encode items as a SEQUENCE OF."""
    return encode_tlv(Tag.SEQUENCE, True, b"".join(_item_to_der(item) for item in items))


def decode_sequence_of(data: bytes, item_type) -> Tuple[bytes, list]:
    """Read a DER SEQUENCE OF ``item_type``; return the rest and the items."""
    rest, obj = Any.from_der(data)
    obj.header.assert_tag(Tag.SEQUENCE)
    items = list(SequenceIterator(obj.data, item_type, Encoding.DER))
    return rest, items


def check_sequence_of(obj: Any, item_type) -> None:
    """Check the DER constraints of a SEQUENCE OF and of each of its items."""
    obj.header.assert_tag(Tag.SEQUENCE)
    obj.header.assert_constructed()
    for item in SequenceIterator(obj.data, Any, Encoding.DER):
        item_type.check_constraints(item)


@dataclass
class SequenceOf:
    """An ordered list of objects of one type."""

    items: List = field(default_factory=list)

    def __post_init__(self) -> None:
        self.items = list(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator:
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]

    @classmethod
    def from_any(cls, obj: Any, item_type) -> "SequenceOf":
        obj.header.assert_tag(Tag.SEQUENCE)
        if not obj.header.constructed:
            raise ConstructExpectedError()
        return cls(list(SequenceIterator(obj.data, item_type, Encoding.BER)))

    @classmethod
    def from_ber(cls, data: bytes, item_type) -> Tuple[bytes, "SequenceOf"]:
        rest, obj = Any.from_ber(data)
        return rest, cls.from_any(obj, item_type)

    @classmethod
    def from_der(cls, data: bytes, item_type) -> Tuple[bytes, "SequenceOf"]:
        rest, obj = Any.from_der(data)
        check_sequence_of(obj, item_type)
        return rest, cls.from_any(obj, item_type)

    def to_der_len(self) -> int:
        return len(self.to_der())

    def to_der(self) -> bytes:
        return encode_sequence_of(self.items)
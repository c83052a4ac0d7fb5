"""The SET and SET OF types."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, List, Set as _SetType, Tuple, TypeVar

from asn1kit.iterator import SetIterator
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
    header = Header(Class.UNIVERSAL, True, Tag.SET, content_length)
    return header.encoded_length() + content_length


@dataclass(frozen=True)
class Set:
    """An unordered collection of objects of any type, kept in encoded form."""

    content: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "content", bytes(self.content))

    def __bytes__(self) -> bytes:
        return self.content

    @classmethod
    def from_any(cls, obj: Any) -> "Set":
        obj.header.assert_tag(Tag.SET)
        obj.header.assert_constructed()
        return cls(obj.data)

    @classmethod
    def from_ber(cls, data: bytes) -> Tuple[bytes, "Set"]:
        rest, obj = Any.from_ber(data)
        return rest, cls.from_any(obj)

    @classmethod
    def from_der(cls, data: bytes) -> Tuple[bytes, "Set"]:
        rest, obj = Any.from_der(data)
        obj.header.assert_tag(Tag.SET)
        return rest, cls.from_any(obj)

    @classmethod
    def from_ber_and_then(
        cls, data: bytes, op: Callable[[bytes], Tuple[bytes, U]]
    ) -> Tuple[bytes, U]:
        """Read a BER set and apply ``op`` to its content."""
        rest, set_obj = cls.from_ber(data)
        _, result = op(set_obj.content)
        return rest, result

    @classmethod
    def from_der_and_then(
        cls, data: bytes, op: Callable[[bytes], Tuple[bytes, U]]
    ) -> Tuple[bytes, U]:
        """Read a DER set and apply ``op`` to its content."""
        rest, set_obj = cls.from_der(data)
        _, result = op(set_obj.content)
        return rest, result

    @classmethod
    def from_iter_to_der(cls, items: Iterable) -> "Set":
        """Build a set whose content is the DER encoding of each item."""
        return cls(b"".join(_item_to_der(item) for item in items))

    def parse(self, func: Callable[[bytes], U]) -> U:
        """Apply a parsing function to the content."""
        return func(self.content)

    def ber_iter(self, item_type) -> SetIterator:
        return SetIterator(self.content, item_type, Encoding.BER)

    def der_iter(self, item_type) -> SetIterator:
        return SetIterator(self.content, item_type, Encoding.DER)

    def ber_set_of(self, item_type) -> list:
        return list(self.ber_iter(item_type))

    def der_set_of(self, item_type) -> list:
        return list(self.der_iter(item_type))

    def to_der_len(self) -> int:
        return _encoded_size(len(self.content))

    def to_der(self) -> bytes:
        return encode_tlv(Tag.SET, True, self.content)


def encode_set_of(items: Iterable) -> bytes:
    """Encode items as a SET OF, in the order given."""
    return encode_tlv(Tag.SET, True, b"".join(_item_to_der(item) for item in items))


def _read_set_items(data: bytes, item_type) -> Tuple[bytes, list]:
    rest, obj = Any.from_der(data)
    obj.header.assert_tag(Tag.SET)
    obj.header.assert_constructed()
    return rest, list(SetIterator(obj.data, item_type, Encoding.DER))


def decode_set_of(data: bytes, item_type) -> Tuple[bytes, _SetType]:
    """Read a DER SET OF ``item_type`` into a set; return the rest and the set."""
    rest, items = _read_set_items(data, item_type)
    return rest, set(items)


def decode_sorted_set_of(data: bytes, item_type) -> Tuple[bytes, list]:
    """Read a DER SET OF ``item_type`` into a sorted list of distinct items."""
    rest, items = _read_set_items(data, item_type)
    return rest, sorted(set(items))


def check_set_of(obj: Any, item_type) -> None:
    """Check the DER constraints of a SET OF and of each of its items."""
    obj.header.assert_tag(Tag.SET)
    obj.header.assert_constructed()
    for item in SetIterator(obj.data, Any, Encoding.DER):
        item_type.check_constraints(item)


@dataclass
class SetOf:
    """An unordered collection of objects of one type."""

    items: List = field(default_factory=list)

    def __post_init__(self) -> None:
        self.items = list(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator:
        return iter(self.items)

    @classmethod
    def from_any(cls, obj: Any, item_type) -> "SetOf":
        obj.header.assert_tag(Tag.SET)
        if not obj.header.constructed:
            raise ConstructExpectedError()
        return cls(list(SetIterator(obj.data, item_type, Encoding.BER)))

    @classmethod
    def from_ber(cls, data: bytes, item_type) -> Tuple[bytes, "SetOf"]:
        rest, obj = Any.from_ber(data)
        return rest, cls.from_any(obj, item_type)

    @classmethod
    def from_der(cls, data: bytes, item_type) -> Tuple[bytes, "SetOf"]:
        rest, obj = Any.from_der(data)
        check_set_of(obj, item_type)
        return rest, cls.from_any(obj, item_type)

    def to_der_len(self) -> int:
        return len(self.to_der())

    def to_der(self) -> bytes:
        return encode_set_of(self.items)
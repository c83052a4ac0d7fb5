"""Iterators over the content of SEQUENCE OF and SET OF objects."""

from __future__ import annotations

from typing import Generic, TypeVar

from asn1kit.objects import Encoding

T = TypeVar("T")


class SequenceIterator(Generic[T]):
    """Parse consecutive objects of one type from SEQUENCE OF content.

    The data must be the contents, not the enclosing object. ``item_type``
    provides ``from_ber`` and ``from_der`` class methods returning
    ``(rest, item)``. A parsing error is raised once; after that the
    iterator is exhausted.
    """

    def __init__(self, data: bytes, item_type, encoding: Encoding = Encoding.DER) -> None:
        self.data = bytes(data)
        self.item_type = item_type
        self.encoding = Encoding(encoding)
        self._failed = False

    def __iter__(self) -> "SequenceIterator[T]":
        return self

    def __next__(self) -> T:
        if self._failed or not self.data:
            raise StopIteration
        if self.encoding is Encoding.BER:
            parse = self.item_type.from_ber
        else:
            parse = self.item_type.from_der
        try:
            rest, item = parse(self.data)
        except Exception:
            self._failed = True
            raise
        self.data = rest
        return item


class SetIterator(SequenceIterator[T]):
    """Parse consecutive objects of one type from SET OF content."""
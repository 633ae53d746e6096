"""In-memory memo collection with flat-string (de)serialization."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date

from memo import Memo
from memo_codec import DEFAULT_CODEC, MemoCodec


class MemoStore:
    """Memos in insertion order.

    Any number of memos may share a date. Callers that want one memo per day
    call ``remove_by_date`` before ``add``. The store never touches external
    storage itself; ``serialize``/``deserialize`` hand the string in and out.
    """

    def __init__(self, memos: list[Memo] | None = None, *, codec: MemoCodec | None = None):
        self.codec = codec or DEFAULT_CODEC
        self._memos: list[Memo] = []
        for memo in memos or []:
            self.add(memo)

    def __len__(self) -> int:
        return len(self._memos)

    def __iter__(self) -> Iterator[Memo]:
        return iter(list(self._memos))

    def all(self) -> list[Memo]:
        return list(self._memos)

    def add(self, memo: Memo) -> None:
        """Append *memo*. Raises ``MemoEncodeError`` if the codec cannot store it."""
        self.codec.check(memo)
        self._memos.append(memo)

    def remove_by_date(self, d: date) -> int:
        """Remove every memo on *d*. Returns how many were removed."""
        kept = [m for m in self._memos if m.date != d]
        removed = len(self._memos) - len(kept)
        self._memos = kept
        return removed

    def remove(self, memo: Memo) -> bool:
        """Remove the first memo equal to *memo*; no-op if there is none."""
        try:
            self._memos.remove(memo)
        except ValueError:
            return False
        return True

    def memos_on(self, d: date) -> list[Memo]:
        return [m for m in self._memos if m.date == d]

    def serialize(self) -> str:
        return self.codec.encode(self._memos)

    @classmethod
    def deserialize(cls, raw: str | None, *, codec: MemoCodec | None = None) -> MemoStore:
        """Build a store from *raw*, skipping records that fail to parse."""
        codec = codec or DEFAULT_CODEC
        store = cls(codec=codec)
        store._memos = codec.decode(raw)
        return store

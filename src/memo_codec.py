"""Flat-string codecs for persisting memos under a single key.

Two record layouts exist and are not interchangeable:

* ``pipe`` (canonical): ``date|time|content`` where *time* is ``HH:MM``
  (``HH:MM:SS`` when seconds are set) or the literal ``null``.
* ``colon`` (legacy): ``date:content``; it cannot carry a reminder time.

Records are joined with ``;``. Nothing is escaped, so content holding a
delimiter is refused on encode. Decoding skips records it cannot parse.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from memo import Memo, format_time, parse_date, parse_time

logger = logging.getLogger(__name__)

RECORD_SEPARATOR = ";"
NULL_TIME = "null"


class MemoEncodeError(ValueError):
    """A memo cannot be written in the codec's format without corrupting it."""


class MemoCodec:
    """Base for the `;`-joined record formats."""

    name = ""
    field_separator = ""
    field_count = 0

    def check(self, memo: Memo) -> None:
        """Raise ``MemoEncodeError`` if *memo* cannot be encoded."""
        for sep in (RECORD_SEPARATOR, self.field_separator):
            if sep in memo.content:
                raise MemoEncodeError(
                    f"Memo content may not contain {sep!r} in the {self.name} format"
                )

    def encode(self, memos: Iterable[Memo]) -> str:
        records = []
        for memo in memos:
            self.check(memo)
            records.append(self.field_separator.join(self._fields(memo)))
        return RECORD_SEPARATOR.join(records)

    def decode(self, raw: str | None) -> list[Memo]:
        if not raw:
            return []
        memos: list[Memo] = []
        for record in raw.split(RECORD_SEPARATOR):
            if not record:
                continue
            fields = record.split(self.field_separator)
            if len(fields) != self.field_count:
                logger.debug("Skipping memo record with %d fields: %r", len(fields), record)
                continue
            try:
                memos.append(self._memo(fields))
            except ValueError as exc:
                logger.debug("Skipping unparseable memo record %r: %s", record, exc)
        return memos

    def _fields(self, memo: Memo) -> list[str]:
        raise NotImplementedError

    def _memo(self, fields: list[str]) -> Memo:
        raise NotImplementedError


class PipeCodec(MemoCodec):
    """``date|time|content`` records."""

    name = "pipe"
    field_separator = "|"
    field_count = 3

    def _fields(self, memo: Memo) -> list[str]:
        t = format_time(memo.time) if memo.time is not None else NULL_TIME
        return [memo.date.isoformat(), t, memo.content]

    def _memo(self, fields: list[str]) -> Memo:
        raw_date, raw_time, content = fields
        t = None if raw_time == NULL_TIME else parse_time(raw_time)
        return Memo(date=parse_date(raw_date), time=t, content=content)


class ColonCodec(MemoCodec):
    """Legacy ``date:content`` records."""

    name = "colon"
    field_separator = ":"
    field_count = 2

    def check(self, memo: Memo) -> None:
        if memo.time is not None:
            raise MemoEncodeError("The colon format cannot store a reminder time")
        super().check(memo)

    def _fields(self, memo: Memo) -> list[str]:
        return [memo.date.isoformat(), memo.content]

    def _memo(self, fields: list[str]) -> Memo:
        raw_date, content = fields
        return Memo(date=parse_date(raw_date), time=None, content=content)


CODECS: dict[str, MemoCodec] = {
    PipeCodec.name: PipeCodec(),
    ColonCodec.name: ColonCodec(),
}

DEFAULT_CODEC = CODECS[PipeCodec.name]


def codec_for(name: str | None) -> MemoCodec:
    """Look up a codec by name; ``None`` or empty gives the canonical one."""
    if not name:
        return DEFAULT_CODEC
    try:
        return CODECS[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown memo format {name!r}; expected one of {sorted(CODECS)}") from None

from __future__ import annotations

import re
from dataclasses import dataclass

from relay_core.errors import RangeNotSatisfiableError

_RANGE_RE = re.compile(r"bytes=(\d+)-(\d*)")


@dataclass(frozen=True)
class ByteRange:
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self, size: int) -> str:
        return f"bytes {self.start}-{self.end}/{size}"


def parse_range_header(header: str | None, size: int) -> ByteRange | None:
    """Parse a single ``bytes=<start>-[<end>]`` range against a blob of ``size`` bytes.

    Returns ``None`` when no usable range was requested (absent header, other
    units, suffix or multi-range forms), which means the whole body is served.
    Well-formed ranges that fall outside ``[0, size - 1]`` or run backwards
    raise :class:`RangeNotSatisfiableError`; nothing is clamped.
    """
    if not header:
        return None
    match = _RANGE_RE.fullmatch(header.strip())
    if match is None:
        return None

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else size - 1

    if start > end or start < 0 or start > size - 1 or end > size - 1:
        raise RangeNotSatisfiableError(size, header)
    return ByteRange(start=start, end=end)


def unsatisfiable_content_range(size: int) -> str:
    return f"bytes */{size}"

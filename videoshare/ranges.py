from dataclasses import dataclass

from videoshare.errors import RangeNotSatisfiable


@dataclass(frozen=True)
class ByteRange:
    start: int
    end: int
    total_size: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def content_range(self) -> str:
        return f"bytes {self.start}-{self.end}/{self.total_size}"


def _parse_position(token: str, total_size: int) -> int:
    token = token.strip()
    if not (token.isascii() and token.isdigit()):
        raise RangeNotSatisfiable(total_size, "Invalid Range header")
    try:
        return int(token)
    except ValueError:
        raise RangeNotSatisfiable(total_size, "Invalid Range header") from None


def parse_range(header: str | None, total_size: int) -> ByteRange | None:
    """
    Parse a header like: Range: bytes=start-end
    Return None when absent, otherwise an inclusive ByteRange.
    """
    if header is None or not header.strip():
        return None

    unit, sep, spec = header.strip().partition("=")
    if not sep or unit.strip().lower() != "bytes":
        raise RangeNotSatisfiable(total_size, "Invalid Range header")
    if "," in spec:
        raise RangeNotSatisfiable(total_size, "Multiple ranges are not supported")

    start_str, sep, end_str = spec.partition("-")
    if not sep:
        raise RangeNotSatisfiable(total_size, "Invalid Range header")

    if not start_str.strip():
        # suffix range: last N bytes
        suffix = _parse_position(end_str, total_size)
        if suffix == 0 or total_size == 0:
            raise RangeNotSatisfiable(total_size)
        return ByteRange(max(total_size - suffix, 0), total_size - 1, total_size)

    start = _parse_position(start_str, total_size)
    end = _parse_position(end_str, total_size) if end_str.strip() else total_size - 1

    if start >= total_size or start > end:
        raise RangeNotSatisfiable(total_size)

    return ByteRange(start, min(end, total_size - 1), total_size)

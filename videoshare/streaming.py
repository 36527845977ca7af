import asyncio
import logging
from collections.abc import AsyncIterator
from pathlib import Path

import aiofiles
from fastapi import Response
from fastapi.responses import StreamingResponse

from videoshare.config import Settings
from videoshare.errors import RangeNotSatisfiable, VideoNotFound
from videoshare.ranges import ByteRange, parse_range

logger = logging.getLogger(__name__)


async def iter_file(path: Path, start: int, end: int, chunk_size: int) -> AsyncIterator[bytes]:
    remaining = end - start + 1
    try:
        async with aiofiles.open(path, "rb") as f:
            await f.seek(start)
            while remaining > 0:
                data = await f.read(min(chunk_size, remaining))
                if not data:
                    break
                remaining -= len(data)
                yield data
    except (asyncio.CancelledError, GeneratorExit):
        logger.debug("Client went away while streaming %s, %d bytes unsent", path.name, remaining)
        raise
    logger.debug("Finished streaming %s", path.name)


def _file_size(path: Path) -> int:
    try:
        return path.stat().st_size
    except FileNotFoundError as exc:
        raise VideoNotFound() from exc


def _resolve(path: Path, range_header: str | None) -> tuple[int, ByteRange | None, dict[str, str]]:
    total_size = _file_size(path)
    try:
        byte_range = parse_range(range_header, total_size)
    except RangeNotSatisfiable:
        logger.warning("Unsatisfiable range %r for %s (%d bytes)", range_header, path.name, total_size)
        raise

    if byte_range is None:
        return 200, None, {"Accept-Ranges": "bytes", "Content-Length": str(total_size)}

    headers = {
        "Content-Range": byte_range.content_range,
        "Accept-Ranges": "bytes",
        "Content-Length": str(byte_range.length),
    }
    return 206, byte_range, headers


def stream_response(path: Path, range_header: str | None, settings: Settings) -> StreamingResponse:
    status_code, byte_range, headers = _resolve(path, range_header)
    if byte_range is None:
        start, end = 0, int(headers["Content-Length"]) - 1
    else:
        start, end = byte_range.start, byte_range.end

    logger.debug("Streaming %s bytes %d-%d", path.name, start, end)
    return StreamingResponse(
        iter_file(path, start, end, settings.chunk_size),
        status_code=status_code,
        headers=headers,
        media_type=settings.stream_media_type,
    )


def head_response(path: Path, range_header: str | None, settings: Settings) -> Response:
    status_code, _, headers = _resolve(path, range_header)
    headers["Content-Type"] = settings.stream_media_type
    return Response(status_code=status_code, headers=headers)

import asyncio
from contextlib import asynccontextmanager

import aiofiles
import pytest

from videoshare import streaming
from videoshare.streaming import iter_file


@pytest.fixture
def file_events(monkeypatch):
    events = []
    handles = []
    real_open = aiofiles.open

    @asynccontextmanager
    async def tracking_open(*args, **kwargs):
        try:
            async with real_open(*args, **kwargs) as handle:
                events.append("open")
                handles.append(handle)
                yield handle
        finally:
            events.append("close")

    monkeypatch.setattr(streaming.aiofiles, "open", tracking_open)
    return events, handles


async def collect(path, start, end, chunk_size):
    return [chunk async for chunk in iter_file(path, start, end, chunk_size)]


def test_iter_file_reads_bounded_chunks(tmp_path):
    path = tmp_path / "clip.mp4"
    path.write_bytes(bytes(range(100)))

    chunks = asyncio.run(collect(path, 10, 49, 16))

    assert [len(chunk) for chunk in chunks] == [16, 16, 8]
    assert b"".join(chunks) == bytes(range(10, 50))


def test_iter_file_releases_handle_when_client_goes_away(tmp_path, file_events):
    events, handles = file_events
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"x" * 100)

    async def read_one_then_close():
        stream = iter_file(path, 0, 99, 10)
        first = await stream.__anext__()
        assert events == ["open"]
        await stream.aclose()
        return first

    assert asyncio.run(read_one_then_close()) == b"x" * 10
    assert events == ["open", "close"]
    assert handles[0].closed


def test_iter_file_releases_handle_after_full_read(tmp_path, file_events):
    events, handles = file_events
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"x" * 100)

    asyncio.run(collect(path, 0, 99, 30))

    assert events == ["open", "close"]
    assert handles[0].closed


def test_iter_file_empty_interval(tmp_path):
    path = tmp_path / "empty.mp4"
    path.write_bytes(b"")

    assert asyncio.run(collect(path, 0, -1, 16)) == []

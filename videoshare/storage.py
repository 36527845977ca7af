import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO

from videoshare.errors import UploadRejected, UploadTooLarge, VideoNotFound

logger = logging.getLogger(__name__)

UPLOAD_CHUNK_SIZE = 1024 * 1024
GENERIC_CONTENT_TYPES = {"application/octet-stream"}


@dataclass(frozen=True)
class StoredVideo:
    name: str
    size: int
    created_at: datetime


def format_file_size(size: int) -> str:
    if size == 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(units) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {units[unit]}"


def _created_at(path: Path) -> datetime:
    stat = path.stat()
    created = getattr(stat, "st_birthtime", None) or stat.st_mtime
    return datetime.fromtimestamp(created, tz=timezone.utc)


class VideoStore:

    def __init__(self, root_dir: str, allowed_extensions: list[str]):
        self.root = Path(root_dir)
        self.allowed_extensions = {ext.lower().lstrip(".") for ext in allowed_extensions}

    def init(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)

    def resolve(self, name: str) -> Path:
        if not name or name in {".", ".."} or Path(name).name != name or "\\" in name:
            raise VideoNotFound()
        path = self.root / name
        if not path.is_file():
            raise VideoNotFound()
        return path

    def list_videos(self) -> list[StoredVideo]:
        videos = []
        for path in self.root.iterdir():
            if not path.is_file():
                continue
            try:
                videos.append(
                    StoredVideo(name=path.name, size=path.stat().st_size, created_at=_created_at(path))
                )
            except FileNotFoundError:
                # removed between iterdir and stat
                continue
        return sorted(videos, key=lambda video: video.created_at, reverse=True)

    def is_allowed(self, filename: str, content_type: str | None) -> bool:
        ext = Path(filename).suffix.lower().lstrip(".")
        if ext not in self.allowed_extensions:
            return False
        content_type = (content_type or "").split(";")[0].strip().lower()
        return content_type.startswith("video/") or content_type in GENERIC_CONTENT_TYPES

    def save_upload(
        self,
        *,
        filename: str,
        content_type: str | None,
        source: BinaryIO,
        max_size_bytes: int,
    ) -> tuple[str, int]:
        original = Path(filename).name
        if not self.is_allowed(original, content_type):
            raise UploadRejected()

        suffix = Path(original).suffix
        stem = Path(original).stem
        stored_name = f"{stem}_{int(time.time() * 1000)}{suffix}"
        target = self.root / stored_name

        try:
            f = target.open("xb")
        except FileExistsError as exc:
            raise UploadRejected(f"A video named {stored_name} already exists, retry the upload") from exc

        total = 0
        with f:
            while True:
                chunk = source.read(UPLOAD_CHUNK_SIZE)
                if not chunk:
                    break
                total += len(chunk)
                if total > max_size_bytes:
                    f.close()
                    target.unlink(missing_ok=True)
                    raise UploadTooLarge(f"File too large. Maximum size is {format_file_size(max_size_bytes)}.")
                f.write(chunk)
        logger.info("Saved upload %s (%d bytes)", stored_name, total)
        return stored_name, total

    def delete(self, name: str) -> None:
        path = self.resolve(name)
        try:
            path.unlink()
        except FileNotFoundError as exc:
            raise VideoNotFound() from exc
        logger.info("Deleted video %s", name)

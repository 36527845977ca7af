import logging
from contextlib import asynccontextmanager
from urllib.parse import quote

from fastapi import FastAPI, File, Header, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from videoshare.config import Settings, configure_logging, get_settings
from videoshare.errors import UploadRejected, VideoShareError
from videoshare.models import MessageResponse, UploadResponse, VideoRecord
from videoshare.storage import VideoStore, format_file_size
from videoshare.streaming import head_response, stream_response

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    store = VideoStore(settings.storage_dir, settings.allowed_extensions)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        store.init()
        logger.info("Uploads directory: %s", store.root.resolve())
        yield

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Range", "Accept-Ranges", "Content-Length"],
    )

    def error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(_: Request, exc: RequestValidationError):
        missing_fields = [
            ".".join(str(item) for item in error["loc"] if item != "body")
            for error in exc.errors()
            if error.get("type") == "missing"
        ]
        if missing_fields:
            message = f"missing parameters: {', '.join(missing_fields)}"
        else:
            message = "invalid request parameters"
        return error_response(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_: Request, exc: StarletteHTTPException):
        message = str(exc.detail) if exc.detail else "request failed"
        return error_response(exc.status_code, message, getattr(exc, "headers", None))

    @app.exception_handler(VideoShareError)
    async def video_share_exception_handler(_: Request, exc: VideoShareError):
        return error_response(exc.status_code, exc.message, exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(500, "Internal server error")

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "environment": settings.app_env}

    @app.get("/api/videos", response_model=list[VideoRecord])
    def list_videos():
        return [
            VideoRecord(
                name=video.name,
                size=video.size,
                size_formatted=format_file_size(video.size),
                upload_date=video.created_at,
                path=f"/api/stream/{quote(video.name, safe='')}",
            )
            for video in store.list_videos()
        ]

    @app.post("/api/upload", response_model=UploadResponse)
    def upload_video(video: UploadFile = File(...)):
        if not video.filename:
            raise UploadRejected("No video file uploaded")

        try:
            filename, size = store.save_upload(
                filename=video.filename,
                content_type=video.content_type,
                source=video.file,
                max_size_bytes=settings.max_upload_size_bytes,
            )
        except UploadRejected as exc:
            logger.warning("Rejected upload %r (%s): %s", video.filename, video.content_type, exc.message)
            raise

        return UploadResponse(message="Video uploaded successfully", filename=filename, size=size)

    @app.get("/api/stream/{filename}")
    def stream_video(filename: str, range: str | None = Header(None)):
        return stream_response(store.resolve(filename), range, settings)

    @app.head("/api/stream/{filename}")
    def probe_video(filename: str, range: str | None = Header(None)):
        return head_response(store.resolve(filename), range, settings)

    @app.delete("/api/videos/{filename}", response_model=MessageResponse)
    def delete_video(filename: str):
        store.delete(filename)
        return MessageResponse(message="Video deleted successfully")

    return app


app = create_app()

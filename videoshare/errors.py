class VideoShareError(Exception):
    status_code = 500
    message = "request failed"

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class VideoNotFound(VideoShareError):
    status_code = 404
    message = "Video not found"


class RangeNotSatisfiable(VideoShareError):
    status_code = 416
    message = "Requested range not satisfiable"

    def __init__(self, total_size: int, message: str | None = None):
        self.total_size = total_size
        super().__init__(message)

    @property
    def headers(self) -> dict[str, str]:
        return {"Content-Range": f"bytes */{self.total_size}"}


class UploadRejected(VideoShareError):
    status_code = 400
    message = "Only video files are allowed!"


class UploadTooLarge(UploadRejected):
    status_code = 413
    message = "File too large"

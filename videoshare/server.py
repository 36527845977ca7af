import argparse
import logging
import socket

import uvicorn

from videoshare.config import configure_logging, get_settings
from videoshare.main import create_app

logger = logging.getLogger(__name__)


def get_local_ip() -> str:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("10.255.255.255", 1))
            address = sock.getsockname()[0]
    except OSError:
        return "localhost"
    return "localhost" if address.startswith("127.") else address


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Local video sharing server")
    parser.add_argument("--host", type=str, default=settings.host, help="Host to bind to")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    parser.add_argument("--storage-dir", type=str, default=settings.storage_dir, help="Uploads directory")
    parser.add_argument("--log-level", type=str, default=settings.log_level, help="Logging level")
    args = parser.parse_args(argv)

    settings = settings.model_copy(
        update={
            "host": args.host,
            "port": args.port,
            "storage_dir": args.storage_dir,
            "log_level": args.log_level,
        }
    )
    configure_logging(settings.log_level)

    app = create_app(settings)
    logger.info("Local: http://localhost:%d", settings.port)
    logger.info("Network: http://%s:%d", get_local_ip(), settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()

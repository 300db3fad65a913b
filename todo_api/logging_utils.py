import logging
import sys
from typing import TextIO

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "multipart")


def setup_logging(level: str = "INFO", *, stream: TextIO | None = None) -> None:
    """Configure logging for the API server and the CLI.

    Format: time level logger message k=v ...
    The server logs to stdout; the CLI passes stderr so stdout only carries its output.
    """
    level = level.upper()
    noisy_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

    root = logging.getLogger()
    if root.handlers:
        # Respect existing (e.g., uvicorn, pytest) but align level
        root.setLevel(level)
        return

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S"
    )
    handler.setFormatter(formatter)

    root.addHandler(handler)
    root.setLevel(level)

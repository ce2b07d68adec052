from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Final, Optional

_ROOT_NAME: Final[str] = "fdc"
_FORMAT: Final[str] = "[%(asctime)s] %(levelname)s %(message)s"
_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"


def get_logger(component: str) -> logging.Logger:
    """Return the shared ``fdc.<component>`` logger, attaching a console handler once."""

    logger = logging.getLogger(f"{_ROOT_NAME}.{component}")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT, _DATE_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


def attach_log_file(path: Path, components: tuple[str, ...]) -> None:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(_FORMAT, _DATE_FORMAT))
    for component in components:
        get_logger(component).addHandler(handler)


def compose_log(logger: logging.Logger, log_callback: Optional[Callable[[str], None]]) -> Callable[[str], None]:
    def _log(message: str) -> None:
        text = str(message)
        if log_callback is not None:
            try:
                log_callback(text)
            except Exception:
                logger.exception("Workflow log callback raised an error.")
        logger.info(text)

    return _log

import logging
import sys
from typing import Optional, TextIO


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> logging.Logger:
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    fmt = "%(asctime)s | %(levelname)-5s | %(name)-24s | %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    root = logging.getLogger()
    root.setLevel(log_level)

    # reconfiguring replaces our handler instead of stacking another one
    for h in list(root.handlers):
        if getattr(h, "_ns_container", False):
            root.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(fmt, datefmt))
    handler._ns_container = True
    root.addHandler(handler)

    # aiohttp access log is noisy at INFO
    logging.getLogger("aiohttp.access").setLevel(max(log_level, logging.WARNING))
    return root

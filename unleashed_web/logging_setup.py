"""Logging configuration for the Unleashed web-admin client."""

import logging

try:
    import colorlog
    _COLORLOG_AVAILABLE = True
except ImportError:
    _COLORLOG_AVAILABLE = False

log = logging.getLogger("unleashed-web")

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_COLOR_FORMAT = "%(log_color)s%(asctime)s [%(levelname)s]%(reset)s %(name)s: %(message)s"
_DATEFMT = "%H:%M:%S"
_LOG_COLORS = {
    "DEBUG":    "cyan",
    "INFO":     "green",
    "WARNING":  "yellow",
    "ERROR":    "red",
    "CRITICAL": "bold_red",
}


def _make_handler() -> logging.Handler:
    if _COLORLOG_AVAILABLE:
        handler = colorlog.StreamHandler()
        handler.setFormatter(colorlog.ColoredFormatter(
            _COLOR_FORMAT, datefmt=_DATEFMT, log_colors=_LOG_COLORS,
        ))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
    return handler


def setup_logging(debug: bool = False) -> logging.Handler:
    """
    Send the client's log output to stderr.

    Library code only ever logs through ``log``; applications call this once
    at start-up.  With *debug* the urllib3 connection log shares the same
    handler, so envelope bodies and the connections carrying them interleave.
    Calling it again replaces the handler rather than adding a second one.
    """
    level = logging.DEBUG if debug else logging.INFO
    handler = _make_handler()

    targets = [log, logging.getLogger("urllib3")] if debug else [log]
    for logger in targets:
        logger.setLevel(level)
        logger.handlers.clear()
        logger.addHandler(handler)
    return handler

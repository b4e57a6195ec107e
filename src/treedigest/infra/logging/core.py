from __future__ import annotations

"""
Logging Core Orchestrator.

Maintains the idempotent lifecycle of the logging subsystem. Records are
pushed through a QueueHandler so that hashing workers never block on
console or file I/O; a QueueListener thread drains the queue into the real
handlers.

Library code only ever calls get_logger(). configure_logging() is reserved
for entry points such as the CLI.
"""

import atexit
import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from treedigest.infra.logging.config import _LEVEL_MAP, LoggingConfig
from treedigest.infra.logging.handlers import (
    _create_rotating_file_handler,
    _is_our_handler,
    _tag_handler,
)

# Attributes stored on the root logger
_CONFIGURED_FLAG_ATTR: str = "_treedigest_configured"
_QUEUE_LISTENER_ATTR: str = "_treedigest_queue_listener"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Configure the root logger with queue-based, non-blocking handlers.

    Repeated calls are no-ops unless force is set, in which case the handlers
    installed by a previous call are removed and replaced.

    Args:
        cfg: Levels, destinations and formats to install.
        force: Replace a previous configuration instead of keeping it.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()

    already_configured = bool(getattr(root, _CONFIGURED_FLAG_ATTR, False))
    if already_configured and not force:
        return root

    try:
        level_int = _parse_level(cfg.level)
        root.setLevel(level_int)

        _remove_our_handlers(root)
        _stop_existing_listener(root)

        handlers_list: List[logging.Handler] = []

        if cfg.console:
            sh = logging.StreamHandler(sys.stderr)
            sh.setLevel(level_int)
            sh.setFormatter(logging.Formatter(cfg.console_fmt))
            _tag_handler(sh)
            handlers_list.append(sh)

        if cfg.log_file:
            fh = _create_rotating_file_handler(
                cfg.log_file,
                level_int,
                logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt),
                cfg.max_bytes,
                cfg.backup_count
            )
            if fh:
                handlers_list.append(fh)

        if not handlers_list:
            return root

        log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)

        queue_handler = QueueHandler(log_queue)
        _tag_handler(queue_handler)

        listener = QueueListener(log_queue, *handlers_list, respect_handler_level=True)
        listener.start()

        root.addHandler(queue_handler)

        setattr(root, _QUEUE_LISTENER_ATTR, listener)
        setattr(root, _CONFIGURED_FLAG_ATTR, True)

        # Flush pending records on interpreter shutdown
        atexit.register(_safe_stop_listener, listener)

        return root

    except (OSError, ValueError, TypeError) as e:
        # Emergency console so a broken logging setup never hides build output
        _remove_our_handlers(root)
        _stop_existing_listener(root)

        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(logging.Formatter("CRITICAL FALLBACK | %(levelname)s | %(message)s"))
        _tag_handler(sh)
        root.addHandler(sh)
        root.setLevel(logging.INFO)

        root.warning(f"Logging setup failed ({e}). Switched to emergency console.")
        return root


def get_logger(name: str) -> logging.Logger:
    """
    Acquire a named logger instance.

    Args:
        name: Dotted logger name, normally the calling module.

    Returns:
        logging.Logger: The named logger.
    """
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Stop the queue listener and detach every handler installed by this module."""
    root = logging.getLogger()
    _stop_existing_listener(root)
    _remove_our_handlers(root)
    setattr(root, _CONFIGURED_FLAG_ATTR, False)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _parse_level(level: str) -> int:
    """Map a level name to its numeric value, defaulting to INFO."""
    if not level:
        return logging.INFO
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.INFO)


def _remove_our_handlers(root: logging.Logger) -> None:
    """Detach and close every tagged handler of the root logger."""
    for h in list(root.handlers):
        if _is_our_handler(h):
            root.removeHandler(h)
            h.close()


def _stop_existing_listener(root: logging.Logger) -> None:
    """Stop the listener left by a previous configure_logging call."""
    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if listener:
        _safe_stop_listener(listener)
        setattr(root, _QUEUE_LISTENER_ATTR, None)


def _safe_stop_listener(listener: Optional[QueueListener]) -> None:
    """
    Stop a QueueListener, tolerating listeners that were already stopped.

    QueueListener.stop() fails on a listener whose thread has been joined,
    which happens when atexit runs after an explicit shutdown.
    """
    if listener is None:
        return
    if getattr(listener, "_thread", None) is not None:
        listener.stop()

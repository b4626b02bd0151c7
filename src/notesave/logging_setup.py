# src/notesave/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "notesave.log"

# INFO from these repeats text the REPL already prints as a reply.
_ECHOED_LOGGERS = ("notesave.core.actions", "notesave.cli.commands")

# Third-party libraries that share the event loop with the app; their
# warnings (sync retries, dropped connections) matter to the operator.
_LOOP_LIBRARIES = ("nio",)


def _under(name: str, prefixes: tuple[str, ...]) -> bool:
    return any(name == p or name.startswith(p + ".") for p in prefixes)


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable while the REPL is in use.

    notesave records pass, except INFO from modules whose messages are
    already shown as command replies (toasts). Warnings always pass, so a
    failed snapshot write is never hidden. Matrix client warnings pass;
    everything else third-party needs ERROR.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name == "notesave" or name.startswith("notesave."):
            if _under(name, _ECHOED_LOGGERS):
                return record.levelno >= logging.WARNING
            return True

        if _under(name, _LOOP_LIBRARIES):
            return record.levelno >= logging.WARNING

        # Includes 'py.warnings' from captureWarnings.
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/notesave",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 2_000_000,
    backup_count: int = 3,
) -> Path:
    """
    Console gets short filtered lines; the rotating file keeps everything
    at file_level with timestamps. Returns the log file path.

    Call once, before the first log record.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(min(console_level, file_level))

    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(fh)

    logging.captureWarnings(True)

    # The file keeps their warnings; request/response chatter stays out.
    for lib in ("nio", "httpx", "httpcore", "openai"):
        logging.getLogger(lib).setLevel(logging.WARNING)

    return log_file

# src/tasklist/logging_setup.py

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from pathlib import Path

# Loggers whose INFO/DEBUG chatter (paths, counts, every save) belongs in the file only.
REPL_QUIET_LOGGERS = (
    "tasklist.storage",
    "tasklist.tasks.task_store",
    "tasklist.connectors",
)


class _ReplFilter(logging.Filter):
    """
    Console policy while the task prompt is on screen:
    - quiet tasklist loggers: WARNING+ only (failed saves still surface)
    - other tasklist loggers: whatever the handler level lets through
    - everything else, captured py.warnings included: ERROR+ only
    """

    def __init__(self, quiet: Iterable[str] = REPL_QUIET_LOGGERS) -> None:
        super().__init__()
        self._quiet = tuple(quiet)

    def _is_quiet(self, name: str) -> bool:
        return any(name == q or name.startswith(q + ".") for q in self._quiet)

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name != "tasklist" and not name.startswith("tasklist."):
            return record.levelno >= logging.ERROR
        if self._is_quiet(name):
            return record.levelno >= logging.WARNING
        return True


def setup_logging(
    *,
    log_dir: str | Path = ".local/tasklist",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Console gets short filtered lines that fit between prompts;
    tasklist.log gets everything with timestamps.

    Call once, before the first log call. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "tasklist.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    ch.addFilter(_ReplFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(fh)

    logging.captureWarnings(True)
    return log_file

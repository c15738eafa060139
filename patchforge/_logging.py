"""
Opt-in diagnostics for the patch engine.

Public entry points take `logger=None, log=False` and call `resolve_logger`
once at the top; the result is handed down to helpers as `logger=`. Without
either argument every record is dropped by a `NoopLogger`, so the engine is
silent inside host applications and never touches global logging config.

    log = resolve_logger(logger=logger, enabled=log, name=__name__)
    if debug_enabled(log):
        log.debug(f"ranked {len(cands)} starts: {cands[:5]}")
"""
from __future__ import annotations

import logging
from typing import Union

_ROOT_NAME = "patchforge"


class NoopLogger:
    """Accepts the `logging.Logger` call surface and discards everything."""

    def log(self, level: int, msg, *args, **kwargs) -> None:  # type: ignore[no-untyped-def]
        return None

    def debug(self, msg, *args, **kwargs) -> None:  # type: ignore[no-untyped-def]
        return None

    info = warning = error = exception = critical = debug

    def isEnabledFor(self, level: int) -> bool:  # noqa: N802 - mirrors logging.Logger
        return False


LoggerLike = Union[logging.Logger, logging.LoggerAdapter, NoopLogger]


def resolve_logger(
    logger: LoggerLike | None = None,
    *,
    enabled: bool = False,
    name: str | None = None,
    level: int = logging.INFO,
) -> LoggerLike:
    """
    Pick the logger an engine call should write to.

    A caller-supplied `logger` always wins and is returned untouched. With
    `enabled=True` the named logger under the `patchforge` hierarchy is set to
    `level` and left propagating, so records reach whatever handlers the host
    (or pytest's caplog) installed on the root. Otherwise records are dropped.
    """
    if logger is not None:
        return logger
    if not enabled:
        return NoopLogger()
    lg = logging.getLogger(name or _ROOT_NAME)
    lg.setLevel(level)
    lg.propagate = True
    return lg


def debug_enabled(lg: LoggerLike) -> bool:
    """True if a debug record from `lg` would be emitted; use to skip costly formatting."""
    return lg.isEnabledFor(logging.DEBUG)

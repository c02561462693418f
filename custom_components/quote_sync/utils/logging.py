from __future__ import annotations

import logging
import time

_LAST: dict[str, float] = {}
_MAX_CODES = 256


def warn_once(logger: logging.Logger, code: str, message: str, *args: object, window: float = 300.0) -> bool:
    """Log a warning for ``code`` at most once per ``window`` seconds.

    Lower-level repeats are still written at debug level. Returns ``True``
    when the warning was emitted.
    """
    now = time.monotonic()
    last = _LAST.get(code)
    if last is not None and now - last <= window:
        logger.debug(message, *args)
        return False
    if len(_LAST) >= _MAX_CODES:
        oldest = min(_LAST, key=_LAST.__getitem__)
        _LAST.pop(oldest, None)
    _LAST[code] = now
    logger.warning(message, *args)
    return True


def clear_warning(code: str) -> None:
    """Forget ``code`` so the next failure warns immediately again."""
    _LAST.pop(code, None)


__all__ = ["clear_warning", "warn_once"]

# logging_decorators.py
from __future__ import annotations

import functools
import inspect
import time
from typing import Any, Callable, Dict, Iterable, Optional

from loguru import logger

SECRET_KEYS = frozenset({"api_key", "x-api-key", "authorization", "password", "secret", "token"})
MASK = "******"


def _scrub(value: Any, secrets: frozenset, max_len: int, max_items: int) -> Any:
    """Mask secret keys and shorten long strings / sequences before they reach the log."""
    if isinstance(value, dict):
        return {
            k: MASK if str(k).lower() in secrets else _scrub(v, secrets, max_len, max_items)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        head = [_scrub(v, secrets, max_len, max_items) for v in value[:max_items]]
        if len(value) > max_items:
            head.append(f"... (+{len(value) - max_items} more)")
        return head
    if isinstance(value, str) and len(value) > max_len:
        return f"{value[:max_len]}...(+{len(value) - max_len} chars)"
    return value


def summarize_text(ret: Any) -> Dict[str, Any]:
    if isinstance(ret, str):
        return {"chars": len(ret), "lines": ret.count("\n") + 1 if ret else 0}
    return {"type": type(ret).__name__}


def log_call(
    name: Optional[str] = None,
    *,
    level: str = "INFO",
    slow_ms: int = 800,
    redact: Iterable[str] = SECRET_KEYS,
    arg_max_len: int = 200,
    arg_max_items: int = 20,
    summarize: Optional[Callable[[Any], Dict[str, Any]]] = None,
):
    """
    Log entry (scrubbed args), exit (duration + result summary) and failures.
    Exceptions are re-raised unchanged; calls slower than `slow_ms` log at WARNING.
    """
    secrets = frozenset(str(k).lower() for k in redact)
    summary_of = summarize or summarize_text

    def decorator(fn: Callable):
        if getattr(fn, "__logged__", False):
            return fn
        label = name or fn.__name__
        sig = inspect.signature(fn)

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                bound = sig.bind_partial(*args, **kwargs).arguments
                shown = _scrub({k: v for k, v in bound.items() if k not in ("self", "cls")},
                               secrets, arg_max_len, arg_max_items)
            except TypeError:
                shown = "<unbindable>"
            log = logger.opt(depth=1)
            log.log(level, "→ {} args={}", label, shown)

            started = time.perf_counter()
            try:
                ret = fn(*args, **kwargs)
            except Exception as e:
                log.error("✗ {} failed in {:.0f}ms: {}: {}", label,
                          (time.perf_counter() - started) * 1000.0, type(e).__name__, e)
                raise
            elapsed = (time.perf_counter() - started) * 1000.0
            if elapsed >= slow_ms:
                log.warning("✓ {} done in {:.0f}ms (SLOW) summary={}", label, elapsed, summary_of(ret))
            else:
                log.log(level, "✓ {} done in {:.0f}ms summary={}", label, elapsed, summary_of(ret))
            return ret

        wrapper.__logged__ = True
        return wrapper

    return decorator

"""Wall-clock timers around pipeline stages."""
import logging
import time
from contextlib import contextmanager
from functools import wraps


@contextmanager
def section_timer(name: str, logger: logging.Logger, level: int = logging.INFO):
    """Log ``TIMER <name> took <s> s`` when the block exits, even on error."""
    started = time.perf_counter()
    try:
        yield
    finally:
        logger.log(level, "TIMER %s took %.3f s", name, time.perf_counter() - started)


def timeit(logger: logging.Logger, name: str | None = None):
    """Decorator that runs the function inside a section_timer."""
    def decorate(fn):
        label = name or fn.__qualname__

        @wraps(fn)
        def timed(*args, **kwargs):
            with section_timer(label, logger):
                return fn(*args, **kwargs)
        return timed
    return decorate

"""
Logging for the on-call roster scheduler.

Every module logs through a child of the ``roster`` logger, e.g.
``get_logger('backtracking')`` -> ``roster.backtracking``. Timings go to
``roster.perf``.
"""

import logging
import os
import time
import functools
from contextlib import contextmanager
from datetime import datetime

ROOT_LOGGER = 'roster'
PERF_LOGGER = 'perf'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LOG_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "logs")


def _log_file_path() -> str:
    return os.path.join(LOG_DIR, f"roster_{datetime.now():%Y%m%d}.log")


def setup_logging(level=logging.INFO, log_to_file=False):
    """
    Configure the ``roster`` logger with a console handler and, on request,
    a dated file under ``logs/``.

    The scheduling core never writes files itself; only the CLI turns file
    logging on. Calling this again replaces the previous handlers.
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    handlers = [logging.StreamHandler()]
    if log_to_file:
        os.makedirs(LOG_DIR, exist_ok=True)
        handlers.append(logging.FileHandler(_log_file_path(), encoding='utf-8'))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def get_logger(name=None):
    """Return ``roster.<name>``, or the package logger itself."""
    return logging.getLogger(f'{ROOT_LOGGER}.{name}' if name else ROOT_LOGGER)


@contextmanager
def log_timing(operation_name: str, logger_instance=None):
    """
    Log how long the ``with`` block took.

        with log_timing("strict search"):
            solve_roster(ctx, STRICT, rng)
    """
    log = logger_instance or get_logger(PERF_LOGGER)
    start = time.perf_counter()
    try:
        yield
    finally:
        log.info(f"{operation_name}: {time.perf_counter() - start:.4f}s")


def timed(func=None, *, name=None):
    """Decorator form of :func:`log_timing`; usable bare or as ``@timed(name=...)``."""
    def decorator(fn):
        op_name = name or fn.__qualname__

        @functools.wraps(fn)
        def wrapper(*args, **kwargs):
            log = get_logger(PERF_LOGGER)
            start = time.perf_counter()
            try:
                result = fn(*args, **kwargs)
            except Exception as e:
                log.error(f"{op_name}: {time.perf_counter() - start:.4f}s (failed with {type(e).__name__})")
                raise
            log.info(f"{op_name}: {time.perf_counter() - start:.4f}s")
            return result

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


# Initialize logging when module is imported
logger = setup_logging()

import logging
import os
import time
from contextlib import contextmanager

logger = logging.getLogger("orm.sql")
if not logger.handlers:  # prevent duplicate handlers on re-import
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
    logger.addHandler(handler)
logger.setLevel(logging.DEBUG)

LOGGED_METHODS = ("execute", "select_one", "select_all", "insert")


def debug_enabled() -> bool:
    return os.getenv("ORM_DEBUG", "false").lower() == "true"


def log_lifecycle(message: str):
    """Trace record lifecycle transitions (prepare, load, insert, update) when ORM_DEBUG=true."""
    if debug_enabled():
        logger.debug(message)


@contextmanager
def query_logging(model_or_db):
    """
    Context manager that logs every statement executed inside its block.
    Accepts either an ActiveRecord class (with a bound connection) or a Database instance.
    """
    db = getattr(model_or_db, "__connection__", None) or model_or_db
    originals = {name: getattr(db, name) for name in LOGGED_METHODS if hasattr(db, name)}

    def wrap(name, original):
        def logged(sql, params=(), *args, **kwargs):
            start = time.perf_counter()
            result = original(sql, params, *args, **kwargs)
            elapsed = (time.perf_counter() - start) * 1000
            logger.debug("[%s] %s\n[Params] %s\n[Took] %.2f ms", name.upper(), sql, list(params), elapsed)
            return result

        return logged

    for name, original in originals.items():
        setattr(db, name, wrap(name, original))

    try:
        yield db
    finally:
        for name, original in originals.items():
            setattr(db, name, original)

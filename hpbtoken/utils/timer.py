import contextlib
import time

from hpbtoken import my_logging


@contextlib.contextmanager
def time_measure(key):
    start = time.time()
    try:
        yield
    finally:
        elapsed = time.time() - start
        my_logging.data("time_" + key, elapsed)

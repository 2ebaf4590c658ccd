# tests/conftest.py
import os
import logging
import pytest

from valuedispatch.core import log
from valuedispatch.core import metrics
from valuedispatch.core.metrics import start_exporter, stop_exporter
from valuedispatch.core.multimethod import defmethod, defmulti

@pytest.fixture(scope="session", autouse=True)
def _bootstrap_logging_and_metrics():
    # Setup logging (reads LOG_LEVEL / LOG_JSON / .env if available)
    log.setup()

    interval = float(os.getenv("METRICS_INTERVAL_TEST", "1.0"))
    json_mode = (os.getenv("LOG_JSON", "0") == "1")
    start_exporter(interval_sec=interval, json_mode=json_mode,
                   logger=logging.getLogger("metrics"))
    yield
    stop_exporter()


@pytest.fixture
def clean_metrics():
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def greet():
    """The greeting multimethod: dispatch on record["kind"]."""
    g = defmulti(lambda p: p["kind"], name="greet")
    defmethod(g, "foo", lambda p: "Hello " + p["name"])
    defmethod(g, "bar", lambda p: "Goodbye " + p["name"])
    return g

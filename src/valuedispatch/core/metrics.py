
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional, Tuple

# Series a multimethod writes:
#   dispatch_total{multimethod, outcome}   counter, outcome is "hit" or "miss"
#   multimethod_methods{multimethod}       gauge, distinct dispatch values registered

COUNTER = "counter"
GAUGE = "gauge"

Labels = Tuple[Tuple[str, str], ...]
SeriesKey = Tuple[str, str, Labels]  # (kind, name, labels)


def _labels(labels: Dict[str, Any]) -> Labels:
    return tuple(sorted((str(k), str(v)) for k, v in labels.items()))


def render(name: str, labels: Labels, value: float) -> str:
    """``dispatch_total{multimethod=greet,outcome=hit} 3``"""
    inner = ",".join(f"{k}={v}" for k, v in labels)
    return f"{name}{{{inner}}} {value:g}"


class _Store:
    """Every counter and gauge series, behind one lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._series: Dict[SeriesKey, float] = {}

    def add(self, name: str, n: float, labels: Dict[str, Any]) -> None:
        key = (COUNTER, name, _labels(labels))
        with self._lock:
            self._series[key] = self._series.get(key, 0.0) + n

    def set(self, name: str, v: float, labels: Dict[str, Any]) -> None:
        with self._lock:
            self._series[(GAUGE, name, _labels(labels))] = float(v)

    def peek(self, kind: str, name: str, labels: Dict[str, Any]) -> float:
        with self._lock:
            return self._series.get((kind, name, _labels(labels)), 0.0)

    def items(self) -> List[Tuple[SeriesKey, float]]:
        with self._lock:
            return sorted(self._series.items())

    def clear(self) -> None:
        with self._lock:
            self._series.clear()


_STORE = _Store()


def inc(name: str, n: float = 1.0, **labels: Any) -> None:
    _STORE.add(name, n, labels)


def gauge_set(name: str, v: float, **labels: Any) -> None:
    _STORE.set(name, v, labels)


def counter_value(name: str, **labels: Any) -> float:
    """Current value of one counter series; 0.0 if it was never written. Does not create it."""
    return _STORE.peek(COUNTER, name, labels)


def gauge_value(name: str, **labels: Any) -> float:
    return _STORE.peek(GAUGE, name, labels)


def reset() -> None:
    """Drop every series (tests start from a clean store)."""
    _STORE.clear()


def snapshot_all() -> dict:
    out: dict = {"counters": [], "gauges": []}
    for (kind, name, labels), v in _STORE.items():
        out["counters" if kind == COUNTER else "gauges"].append(
            {"name": name, "labels": dict(labels), "value": v})
    return out


def force_emit(logger: Optional[logging.Logger] = None, json_mode: bool = False) -> None:
    """Log every series once, one record per series."""
    lg = logger or logging.getLogger("metrics")
    for (kind, name, labels), v in _STORE.items():
        if json_mode:
            lg.info({"type": kind, "name": name, "labels": dict(labels), "value": v})
        else:
            lg.info("[%s] %s", kind, render(name, labels, v))


# ---------------- Exporter (log every N seconds) ----------------

class _Exporter(threading.Thread):
    def __init__(self, interval_sec: float, json_mode: bool, logger: logging.Logger):
        super().__init__(name="metrics-exporter", daemon=True)
        self.interval = float(interval_sec)
        if self.interval <= 0:
            raise ValueError("interval_sec must be > 0")
        self.json_mode = json_mode
        self.log = logger
        self._stop_evt = threading.Event()

    def run(self) -> None:
        while not self._stop_evt.wait(self.interval):
            force_emit(self.log, self.json_mode)

    def stop(self, timeout: float) -> None:
        self._stop_evt.set()
        self.join(timeout=timeout)


_EXPORTER: Optional[_Exporter] = None


def start_exporter(interval_sec: float = 5.0, json_mode: bool = False, logger: Optional[logging.Logger] = None) -> None:
    global _EXPORTER
    if _EXPORTER is not None:
        return
    _EXPORTER = _Exporter(interval_sec, json_mode, logger or logging.getLogger("metrics"))
    _EXPORTER.start()


def stop_exporter(timeout: float = 1.0) -> None:
    global _EXPORTER
    if _EXPORTER is not None:
        _EXPORTER.stop(timeout)
        _EXPORTER = None

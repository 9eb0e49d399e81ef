"""In-process latency timers for map queries, imports and exports."""
import threading
import time
from collections import defaultdict, deque
from contextlib import contextmanager
from typing import Any, Deque, Dict

# Samples kept per timer; older ones are dropped
MAX_SAMPLES = 1000

_lock = threading.Lock()
_timers: Dict[str, Deque[float]] = defaultdict(lambda: deque(maxlen=MAX_SAMPLES))
_counts: Dict[str, int] = defaultdict(int)


@contextmanager
def record_latency(name: str):
    """Time the enclosed block under ``name``, in milliseconds."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        with _lock:
            _timers[name].append(elapsed_ms)
            _counts[name] += 1


def _percentile(samples, fraction: float) -> float:
    ordered = sorted(samples)
    return ordered[max(int(len(ordered) * fraction) - 1, 0)]


def get_metrics_snapshot() -> Dict[str, Dict[str, Any]]:
    """Count, mean and tail latency per timer; the mean covers retained samples only."""
    with _lock:
        timers = {name: list(samples) for name, samples in _timers.items()}
        counts = dict(_counts)

    return {
        name: {
            "count": counts[name],
            "avg_ms": sum(samples) / len(samples) if samples else 0.0,
            "p50_ms": _percentile(samples, 0.50) if samples else 0.0,
            "p95_ms": _percentile(samples, 0.95) if samples else 0.0,
            "max_ms": max(samples) if samples else 0.0,
        }
        for name, samples in timers.items()
    }


def reset_metrics() -> None:
    with _lock:
        _timers.clear()
        _counts.clear()

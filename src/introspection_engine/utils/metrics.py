"""
Metrics Collection Module for the Introspection Engine
Provides metrics collection and export for introspection runs
"""
from __future__ import annotations

import threading
from collections import defaultdict
from typing import Any, Dict, List, Optional
import statistics


class MetricsCollector:
    """Thread-safe metrics collector"""

    _instance: Optional["MetricsCollector"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "MetricsCollector":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._counters: Dict[str, float] = defaultdict(float)
        self._gauges: Dict[str, float] = {}
        self._timers: Dict[str, List[float]] = defaultdict(list)
        self._data_lock = threading.Lock()
        self._enabled = True
        self._initialized = True

    def enable(self) -> None:
        """Enable metrics collection"""
        self._enabled = True

    def disable(self) -> None:
        """Disable metrics collection"""
        self._enabled = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    def counter(self, name: str, value: float = 1.0, labels: Optional[Dict[str, str]] = None) -> None:
        """Increment a counter"""
        if not self._enabled:
            return

        key = self._make_key(name, labels)
        with self._data_lock:
            self._counters[key] += value

    def gauge(self, name: str, value: float, labels: Optional[Dict[str, str]] = None) -> None:
        """Set a gauge value"""
        if not self._enabled:
            return

        key = self._make_key(name, labels)
        with self._data_lock:
            self._gauges[key] = value

    def timer(self, name: str, duration: float, labels: Optional[Dict[str, str]] = None) -> None:
        """Record a timer value"""
        if not self._enabled:
            return

        key = self._make_key(name, labels)
        with self._data_lock:
            self._timers[key].append(duration)

    def _make_key(self, name: str, labels: Optional[Dict[str, str]] = None) -> str:
        """Create a unique key for metric with labels"""
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in sorted(labels.items()))
        return f"{name}{{{label_str}}}"

    def get_metrics(self) -> Dict[str, Any]:
        """Get all collected metrics"""
        with self._data_lock:
            metrics = {
                "counters": dict(self._counters),
                "gauges": dict(self._gauges),
                "timers": {},
            }

            for key, values in self._timers.items():
                if values:
                    metrics["timers"][key] = {
                        "count": len(values),
                        "sum": sum(values),
                        "min": min(values),
                        "max": max(values),
                        "mean": statistics.mean(values),
                        "median": statistics.median(values),
                    }

            return metrics

    def reset(self) -> None:
        """Reset all metrics"""
        with self._data_lock:
            self._counters.clear()
            self._gauges.clear()
            self._timers.clear()


def get_metrics_collector() -> MetricsCollector:
    """Get the global metrics collector instance"""
    return MetricsCollector()


def counter(name: str, value: float = 1.0, labels: Optional[Dict[str, str]] = None) -> None:
    """Increment a counter"""
    get_metrics_collector().counter(name, value, labels)


def gauge(name: str, value: float, labels: Optional[Dict[str, str]] = None) -> None:
    """Set a gauge value"""
    get_metrics_collector().gauge(name, value, labels)


def timer(name: str, duration: float, labels: Optional[Dict[str, str]] = None) -> None:
    """Record a timer value"""
    get_metrics_collector().timer(name, duration, labels)


class IntrospectionMetrics:
    """Introspection specific metrics helper"""

    @staticmethod
    def record_run(duration: float, success: bool, db_type: str) -> None:
        """Record one introspection run"""
        labels = {"db_type": db_type, "success": str(success).lower()}
        timer("introspection_duration", duration, labels)
        counter("introspection_runs_total", 1.0, labels)

    @staticmethod
    def record_datamodel(models: int, enums: int, relation_fields: int, db_type: str) -> None:
        """Record the size of a computed data model"""
        labels = {"db_type": db_type}
        gauge("datamodel_models", float(models), labels)
        gauge("datamodel_enums", float(enums), labels)
        gauge("datamodel_relation_fields", float(relation_fields), labels)

    @staticmethod
    def record_synthesized_fields(backrelations: int, many_to_many: int) -> None:
        """Record fields invented during whole-graph synthesis"""
        counter("backrelation_fields_total", float(backrelations))
        counter("many_to_many_fields_total", float(many_to_many))

    @staticmethod
    def record_warnings(code: int, count: int) -> None:
        """Record guardrail warnings by code"""
        counter("guardrail_warnings_total", float(count), {"code": str(code)})

    @staticmethod
    def record_error(error_type: str, category: str) -> None:
        """Record error metrics"""
        counter("errors_total", 1.0, {"error_type": error_type, "category": category})

"""
Metric constructors that tolerate the module being imported twice.

uvicorn --reload and repeated imports in tests would otherwise fail with
"Duplicated timeseries in CollectorRegistry".
"""

from prometheus_client import REGISTRY, Counter, Gauge


def _get_or_create(metric_cls, name: str, doc: str, labels: list[str] | None):
    try:
        return metric_cls(name, doc, labels or [])
    except ValueError:
        return REGISTRY._names_to_collectors[name]


def _get_or_create_counter(
    name: str, doc: str, labels: list[str] | None = None
) -> Counter:
    return _get_or_create(Counter, name, doc, labels)


def _get_or_create_gauge(
    name: str, doc: str, labels: list[str] | None = None
) -> Gauge:
    return _get_or_create(Gauge, name, doc, labels)

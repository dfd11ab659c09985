"""Metrics source factory.

Provides get_metrics_source() / set_metrics_source() so deployments can plug
in the real read models. Defaults to the in-memory source.
"""

from reporting.metrics.fake_adapter import InMemoryMetricsSource
from reporting.metrics.port import MetricsSource

_current_source: MetricsSource | None = None


def get_metrics_source() -> MetricsSource:
    global _current_source
    if _current_source is None:
        _current_source = InMemoryMetricsSource()
    return _current_source


def set_metrics_source(source: MetricsSource) -> None:
    global _current_source
    _current_source = source


def reset_metrics_source() -> None:
    global _current_source
    _current_source = None

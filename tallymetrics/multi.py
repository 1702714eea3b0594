"""Reporters that fan every metric out to several underlying reporters."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Iterable, Mapping, Sequence


@dataclass(frozen=True)
class Capabilities:
    """What a reporter supports."""

    reporting: bool = True
    tagging: bool = True


def _combined_capabilities(reporters: Iterable[Any]) -> Capabilities:
    reporting = True
    tagging = True
    for reporter in reporters:
        caps = reporter.capabilities()
        reporting = reporting and caps.reporting
        tagging = tagging and caps.tagging
    return Capabilities(reporting=reporting, tagging=tagging)


def _flush_all(reporters: Iterable[Any]) -> None:
    for reporter in reporters:
        reporter.flush()


class MultiReporter:
    """Stats reporter that forwards every report to each of its reporters."""

    def __init__(self, *reporters: Any) -> None:
        self._reporters = tuple(reporters)

    def report_counter(self, name: str, tags: Mapping[str, str], value: int) -> None:
        for reporter in self._reporters:
            reporter.report_counter(name, tags, value)

    def report_gauge(self, name: str, tags: Mapping[str, str], value: float) -> None:
        for reporter in self._reporters:
            reporter.report_gauge(name, tags, value)

    def report_timer(
        self, name: str, tags: Mapping[str, str], interval: timedelta
    ) -> None:
        for reporter in self._reporters:
            reporter.report_timer(name, tags, interval)

    def report_histogram_value_samples(
        self,
        name: str,
        tags: Mapping[str, str],
        buckets: Sequence[Any],
        bucket_lower_bound: float,
        bucket_upper_bound: float,
        samples: int,
    ) -> None:
        for reporter in self._reporters:
            reporter.report_histogram_value_samples(
                name, tags, buckets, bucket_lower_bound, bucket_upper_bound, samples
            )

    def report_histogram_duration_samples(
        self,
        name: str,
        tags: Mapping[str, str],
        buckets: Sequence[Any],
        bucket_lower_bound: timedelta,
        bucket_upper_bound: timedelta,
        samples: int,
    ) -> None:
        for reporter in self._reporters:
            reporter.report_histogram_duration_samples(
                name, tags, buckets, bucket_lower_bound, bucket_upper_bound, samples
            )

    def capabilities(self) -> Capabilities:
        return _combined_capabilities(self._reporters)

    def flush(self) -> None:
        _flush_all(self._reporters)


class MultiCachedReporter:
    """Cached stats reporter whose allocated metrics fan out to each reporter."""

    def __init__(self, *reporters: Any) -> None:
        self._reporters = tuple(reporters)

    def allocate_counter(self, name: str, tags: Mapping[str, str]) -> MultiMetric:
        return MultiMetric(
            counters=tuple(r.allocate_counter(name, tags) for r in self._reporters)
        )

    def allocate_gauge(self, name: str, tags: Mapping[str, str]) -> MultiMetric:
        return MultiMetric(
            gauges=tuple(r.allocate_gauge(name, tags) for r in self._reporters)
        )

    def allocate_timer(self, name: str, tags: Mapping[str, str]) -> MultiMetric:
        return MultiMetric(
            timers=tuple(r.allocate_timer(name, tags) for r in self._reporters)
        )

    def allocate_histogram(
        self, name: str, tags: Mapping[str, str], buckets: Sequence[Any]
    ) -> MultiMetric:
        return MultiMetric(
            histograms=tuple(
                r.allocate_histogram(name, tags, buckets) for r in self._reporters
            )
        )

    def capabilities(self) -> Capabilities:
        return _combined_capabilities(self._reporters)

    def flush(self) -> None:
        _flush_all(self._reporters)


@dataclass(frozen=True)
class MultiHistogramBucket:
    """Histogram bucket that reports samples to every underlying bucket."""

    buckets: tuple[Any, ...] = ()

    def report_samples(self, value: int) -> None:
        for bucket in self.buckets:
            bucket.report_samples(value)


@dataclass(frozen=True)
class MultiMetric:
    """Cached metric that forwards each report to all underlying metrics."""

    counters: tuple[Any, ...] = ()
    gauges: tuple[Any, ...] = ()
    timers: tuple[Any, ...] = ()
    histograms: tuple[Any, ...] = ()

    def report_count(self, value: int) -> None:
        for counter in self.counters:
            counter.report_count(value)

    def report_gauge(self, value: float) -> None:
        for gauge in self.gauges:
            gauge.report_gauge(value)

    def report_timer(self, interval: timedelta) -> None:
        for timer in self.timers:
            timer.report_timer(interval)

    def value_bucket(
        self, bucket_lower_bound: float, bucket_upper_bound: float
    ) -> MultiHistogramBucket:
        return MultiHistogramBucket(
            tuple(
                h.value_bucket(bucket_lower_bound, bucket_upper_bound)
                for h in self.histograms
            )
        )

    def duration_bucket(
        self, bucket_lower_bound: timedelta, bucket_upper_bound: timedelta
    ) -> MultiHistogramBucket:
        return MultiHistogramBucket(
            tuple(
                h.duration_bucket(bucket_lower_bound, bucket_upper_bound)
                for h in self.histograms
            )
        )
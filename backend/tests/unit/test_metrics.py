from types import SimpleNamespace

from foodserver.core.metrics import Histogram, MetricsRegistry, route_label


def test_counter_is_shared_per_name_and_tags():
    registry = MetricsRegistry()
    registry.counter("hits", route="/meals", method="GET").inc()
    registry.counter("hits", method="GET", route="/meals").inc(2)
    registry.counter("hits", route="/summary", method="GET").inc()

    values = {c["tags"]["route"]: c["value"] for c in registry.snapshot()["counters"]}
    assert values == {"/meals": 3, "/summary": 1}


def test_histogram_snapshot_stats():
    registry = MetricsRegistry()
    hist = registry.histogram("latency", route="/meals")
    for value in (4.0, 1.0, 2.0, 3.0):
        hist.observe(value)

    (snap,) = registry.snapshot()["histograms"]
    assert snap["count"] == 4
    assert snap["avg"] == 2.5
    assert (snap["min"], snap["max"]) == (1.0, 4.0)


def test_empty_histogram_snapshot_is_zeroed():
    assert Histogram("latency", {}).snapshot() == {"count": 0, "avg": 0.0, "p95": 0.0, "min": 0.0, "max": 0.0}


def test_histogram_keeps_a_sliding_window():
    hist = Histogram("latency", {}, _max_samples=3)
    for value in (100.0, 1.0, 2.0, 3.0):
        hist.observe(value)
    snap = hist.snapshot()
    assert snap["count"] == 3
    assert snap["max"] == 3.0


def test_route_label_uses_template_or_unmatched():
    assert route_label({"route": SimpleNamespace(path="/meal/{name}")}) == "/meal/{name}"
    assert route_label({}) == "<unmatched>"

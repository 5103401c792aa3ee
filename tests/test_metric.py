"""Tests for metric aggregation."""

from plugin_agent.binding import Metric, MetricOptions


def feed(metric, values):
    for value in values:
        metric.aggregate(Metric.valued(metric.name, value))


class TestMetricValued:
    """Tests for building transient metrics."""

    def test_single_sample(self):
        """A plain sample counts once with itself as min, max and square."""
        m = Metric.valued("m", 4.0)
        assert m.count == 1
        assert m.min == 4.0
        assert m.max == 4.0
        assert m.sum_of_squares == 16.0

    def test_options_override(self):
        """Pre-aggregated options replace the derived statistics."""
        m = Metric.valued("m", 30.0, MetricOptions(3, 5.0, 15.0, 350.0))
        assert m.value == 30.0
        assert m.count == 3
        assert m.min == 5.0
        assert m.max == 15.0
        assert m.sum_of_squares == 350.0


class TestMetricAggregate:
    """Tests for Metric.aggregate."""

    def test_sequence_statistics(self):
        values = [3.0, 7.0, 1.0, 5.0]
        m = Metric("m")
        feed(m, values)

        assert m.count == 4
        assert m.value == sum(values)
        assert m.min == min(values)
        assert m.sum_of_squares == sum(v * v for v in values)

    def test_max_uses_updated_min(self):
        """max is recomputed from the new min and the incoming max."""
        m = Metric("m")
        feed(m, [10.0, 20.0, 5.0])

        # 10 -> max(10, 10); 20 -> max(10, 20); 5 -> max(5, 5)
        assert m.min == 5.0
        assert m.max == 5.0

    def test_max_follows_formula_step_by_step(self):
        m = Metric("m")
        expected_min = None
        for value in [8.0, 2.0, 9.0, 4.0]:
            incoming = Metric.valued("m", value)
            was_empty = m.count == 0
            m.aggregate(incoming)
            expected_min = value if was_empty else min(expected_min, incoming.min)
            assert m.min == expected_min
            assert m.max == max(expected_min, incoming.max)

    def test_first_sample_sets_min_from_value(self):
        """On an empty metric min comes from the incoming value, not its min."""
        m = Metric("m")
        m.aggregate(Metric.valued("m", 30.0, MetricOptions(3, 5.0, 15.0, 350.0)))
        assert m.min == 30.0
        assert m.count == 3
        assert m.max == 30.0

    def test_returns_previous_marker(self):
        m = Metric("m")
        assert m.aggregate(Metric.valued("m", 10.0)) == 0.0
        assert m.prev == 10.0
        assert m.aggregate(Metric.valued("m", 20.0)) == 10.0
        assert m.prev == 20.0


class TestMetricReset:
    """Tests for Metric.reset."""

    def test_reset_zeroes_statistics(self):
        m = Metric("m")
        feed(m, [1.0, 2.0])
        m.reset()

        assert m.value == 0.0
        assert m.count == 0
        assert m.min == 0.0
        assert m.max == 0.0
        assert m.sum_of_squares == 0.0

    def test_reset_keeps_prev(self):
        m = Metric("m")
        feed(m, [1.0, 2.0])
        m.reset()
        assert m.prev == 2.0

    def test_reset_then_aggregate_matches_fresh(self):
        """After reset the metric behaves like a new one, apart from prev."""
        used = Metric("m")
        feed(used, [100.0, -3.0])
        used.reset()
        fresh = Metric("m")

        assert used.aggregate(Metric.valued("m", 6.0)) == -3.0
        assert fresh.aggregate(Metric.valued("m", 6.0)) == 0.0
        feed(used, [2.0])
        feed(fresh, [2.0])

        assert used.to_payload() == fresh.to_payload()


def test_to_payload_layout():
    m = Metric("m")
    feed(m, [10.0, 20.0])
    name, values = m.to_payload()
    assert name == "m"
    assert values == [30.0, 2, 10.0, 20.0, 500.0]


def test_to_payload_sends_non_finite_as_none():
    m = Metric("m")
    feed(m, [float("nan")])
    assert m.to_payload() == ("m", [None, 1, None, None, None])

    m.reset()
    feed(m, [float("inf")])
    assert m.to_payload()[1] == [None, 1, None, None, None]

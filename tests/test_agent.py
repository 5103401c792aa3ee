"""Tests for the agent cycle driver."""

import math
from unittest.mock import MagicMock, patch

import pytest

from plugin_agent import Agent, AgentConfig, DeliveryStatus, ForbiddenError, PlatformSender, SendResult


def make_agent(deliver_cycle=60, poll_cycle=20):
    sender = MagicMock(spec=PlatformSender)
    sender.send.return_value = SendResult(DeliveryStatus.OK, 200)
    config = AgentConfig(deliver_cycle=deliver_cycle, poll_cycle=poll_cycle)
    agent = Agent("license", "1.0.0", "host-1", 1234, config=config, sender=sender)

    component = agent.create_component("Test", "g1")
    agent.create_metric(component, "m")
    agent.register_component(component)
    return agent, component


class TestAgentSetup:
    """Tests for component creation and reporting."""

    def test_created_component_uses_config_cycle(self):
        agent, component = make_agent(deliver_cycle=120)
        assert component.duration() == 120

    def test_report_metric_returns_previous(self):
        agent, component = make_agent()
        assert agent.report_metric("g1", "m", 10.0) == 0.0
        assert agent.report_metric("g1", "m", 20.0) == 10.0
        assert component.get_metric("m").count == 2

    def test_state_round_trip(self):
        agent, _ = make_agent()
        assert agent.get_state() is None
        agent.set_state({"prev_file_size": 2000})
        assert agent.get_state() == {"prev_file_size": 2000}

    def test_default_sender_from_config(self):
        config = AgentConfig(endpoint="https://example.com/metrics", timeout=5)
        agent = Agent("license", "1.0.0", "host", 1, config=config)
        assert agent.sender.endpoint == "https://example.com/metrics"
        assert agent.sender.timeout == 5


class TestAgentCycle:
    """Tests for finish_cycle and run_cycle."""

    def test_context_duration_infinite_before_first_delivery(self):
        agent, _ = make_agent()
        assert agent.context_duration() == math.inf

    def test_first_cycle_delivers(self):
        agent, component = make_agent()
        agent.run_cycle(lambda a: a.report_metric("g1", "m", 10.0))

        agent.sender.send.assert_called_once()
        assert component.get_metric("m").count == 0

    def test_waits_for_deliver_cycle(self):
        agent, component = make_agent(deliver_cycle=60)

        with patch("time.time", return_value=1000.0):
            assert agent.finish_cycle() is not None

        with patch("time.time", return_value=1059.0):
            agent.report_metric("g1", "m", 1.0)
            assert agent.finish_cycle() is None

        with patch("time.time", return_value=1060.0):
            assert agent.finish_cycle() is not None

        assert agent.sender.send.call_count == 2

    def test_failed_delivery_waits_full_cycle(self):
        agent, component = make_agent(deliver_cycle=60)
        agent.sender.send.return_value = SendResult(DeliveryStatus.FAILED, 500, "boom")
        agent.report_metric("g1", "m", 10.0)

        with patch("time.time", return_value=1000.0):
            result = agent.finish_cycle()
        assert result.failed

        with patch("time.time", return_value=1030.0):
            assert agent.finish_cycle() is None

        assert component.get_metric("m").count == 1

    def test_end_to_end_accumulate_then_deliver(self):
        agent, component = make_agent()
        agent.report_metric("g1", "m", 10.0)
        agent.report_metric("g1", "m", 20.0)

        metric = component.get_metric("m")
        assert (metric.value, metric.count, metric.min, metric.sum_of_squares) == (30.0, 2, 10.0, 500.0)

        payload = agent.context.build_payload()
        assert payload["components"][0]["metrics"]["m"][:2] == [30.0, 2]

        agent.finish_cycle()
        assert metric.value == 0.0
        assert metric.count == 0


class TestAgentRun:
    """Tests for the run loop."""

    def test_runs_requested_cycles_and_sleeps(self):
        agent, _ = make_agent(poll_cycle=20)
        cycle_fn = MagicMock()

        with patch("plugin_agent.agent.time.sleep") as mock_sleep:
            agent.run(cycle_fn, cycles=3)

        assert cycle_fn.call_count == 3
        cycle_fn.assert_called_with(agent)
        assert mock_sleep.call_count == 3
        mock_sleep.assert_called_with(20)

    def test_state_threads_across_cycles(self):
        agent, _ = make_agent()

        def cycle(a):
            count = a.get_state() or 0
            a.set_state(count + 1)

        with patch("plugin_agent.agent.time.sleep"):
            agent.run(cycle, cycles=4)

        assert agent.get_state() == 4

    def test_forbidden_stops_loop(self):
        agent, _ = make_agent()
        agent.sender.send.side_effect = ForbiddenError("denied")
        cycle_fn = MagicMock()

        with patch("plugin_agent.agent.time.sleep") as mock_sleep:
            with pytest.raises(ForbiddenError):
                agent.run(cycle_fn, cycles=5)

        assert cycle_fn.call_count == 1
        mock_sleep.assert_not_called()

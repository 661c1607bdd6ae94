"""Unit tests for the diagnostics sink."""
import logging

from src.config_resolver.config.diagnostics import TRACE, DiagnosticsSink


def test_records_events_without_forwarding(caplog):
    caplog.set_level(TRACE)
    sink = DiagnosticsSink(forward=False)

    sink.trace("Skipped missing config x", location="x")
    sink.debug("Loaded config file y", location="y")

    assert sink.messages == ["Skipped missing config x", "Loaded config file y"]
    assert [event.level_name for event in sink.events] == ["TRACE", "DEBUG"]
    assert sink.events_at(TRACE)[0].fields == {"location": "x"}
    assert caplog.records == []


def test_forwards_to_logger(caplog):
    caplog.set_level(logging.DEBUG)
    sink = DiagnosticsSink(logging.getLogger("tests.diagnostics"))

    sink.trace("hidden")
    sink.warning("shown", location="z")

    assert [record.getMessage() for record in caplog.records] == ["shown"]
    assert caplog.records[0].diagnostics == {"location": "z"}
    assert len(sink.events) == 2


def test_replay_respects_target_level(caplog):
    caplog.set_level(logging.INFO)
    sink = DiagnosticsSink(forward=False)
    sink.trace("t")
    sink.info("i")
    sink.warning("w")

    emitted = sink.replay(logging.getLogger("tests.replay"))

    assert emitted == 2
    assert [record.getMessage() for record in caplog.records] == ["i", "w"]


def test_clear():
    sink = DiagnosticsSink(forward=False)
    sink.info("x")

    sink.clear()

    assert sink.events == []

"""Tests for the quad sink and its listener channels."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import logging

import pytest
from rdfa_quads.errors import QuadConstructionError, RDFaError
from rdfa_quads.sink import QuadSink
from rdfa_quads.terms import DefaultTermFactory
from rdfa_quads.types import Literal, NamedNode, Quad


S = NamedNode("http://ex.org/s")
P = NamedNode("http://ex.org/p")
O = Literal("o")


class _RejectingFactory(DefaultTermFactory):
    def quad(self, subject, predicate, obj, graph=None):
        raise TypeError("no quads today")


class TestEmit:
    def test_buffers_and_announces(self):
        sink = QuadSink(DefaultTermFactory())
        seen = []
        sink.on("data", seen.append)
        quad = sink.emit(S, P, O)
        assert quad == Quad(S, P, O)
        assert sink.quads == [quad]
        assert seen == [quad]

    def test_incomplete_statement_dropped(self):
        sink = QuadSink(DefaultTermFactory())
        assert sink.emit(None, P, O) is None
        assert sink.emit(S, None, O) is None
        assert sink.emit(S, P, None) is None
        assert sink.quads == []

    def test_factory_failure_reported(self):
        sink = QuadSink(_RejectingFactory())
        errors = []
        sink.on("error", errors.append)
        assert sink.emit(S, P, O) is None
        assert sink.quads == []
        assert len(errors) == 1
        assert isinstance(errors[0], QuadConstructionError)
        assert isinstance(errors[0].cause, TypeError)
        assert errors[0].components == (S, P, O)
        assert sink.errors == errors


class TestListeners:
    def test_unknown_event(self):
        with pytest.raises(ValueError, match="Unknown event"):
            QuadSink(DefaultTermFactory()).on("quad", print)

    def test_on_chains(self):
        sink = QuadSink(DefaultTermFactory())
        assert sink.on("end", lambda: None) is sink

    def test_failing_listener_is_contained(self, caplog):
        sink = QuadSink(DefaultTermFactory())
        seen = []

        def broken(quad):
            raise RuntimeError("listener bug")

        sink.on("data", broken)
        sink.on("data", seen.append)
        with caplog.at_level(logging.ERROR, logger="rdfa_quads.sink"):
            sink.emit(S, P, O)
        assert len(seen) == 1
        assert "Listener for 'data' event failed" in caplog.text

    def test_end(self):
        sink = QuadSink(DefaultTermFactory())
        calls = []
        sink.on("end", lambda: calls.append("end"))
        sink.end()
        assert calls == ["end"]

    def test_error_recorded(self):
        sink = QuadSink(DefaultTermFactory())
        err = RDFaError("boom")
        sink.error(err)
        assert sink.errors == [err]

"""Quad sink — the append-only output of an evaluation run.

Quads are buffered in emission order and announced one at a time to ``data``
listeners. ``error`` listeners receive ``RDFaError`` instances, ``end``
listeners are called once with no arguments. A listener that raises is logged
and otherwise ignored.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from .errors import QuadConstructionError, RDFaError

logger = logging.getLogger(__name__)

EVENTS = ("data", "error", "end")


class QuadSink:
    """Buffered quad output plus a small listener registry."""

    def __init__(self, factory):
        self.factory = factory
        self.quads: list[Any] = []
        self.errors: list[RDFaError] = []
        self._listeners: dict[str, list[Callable]] = {event: [] for event in EVENTS}

    def on(self, event: str, callback: Callable) -> QuadSink:
        """Subscribe ``callback`` to ``event``."""
        if event not in self._listeners:
            raise ValueError(f"Unknown event '{event}' (expected one of {EVENTS})")
        self._listeners[event].append(callback)
        return self

    def emit(self, subject, predicate, obj, graph=None):
        """Build and publish a quad; incomplete statements are dropped silently."""
        if subject is None or predicate is None or obj is None:
            return None
        try:
            if graph is None:
                quad = self.factory.quad(subject, predicate, obj)
            else:
                quad = self.factory.quad(subject, predicate, obj, graph)
        except Exception as e:
            self.error(QuadConstructionError(e, (subject, predicate, obj)))
            return None
        self.quads.append(quad)
        self._dispatch("data", quad)
        return quad

    def error(self, err: RDFaError) -> None:
        logger.warning("%s", err)
        self.errors.append(err)
        self._dispatch("error", err)

    def end(self) -> None:
        self._dispatch("end")

    def _dispatch(self, event: str, *args) -> None:
        for callback in list(self._listeners[event]):
            try:
                callback(*args)
            except Exception:
                logger.exception("Listener for '%s' event failed", event)

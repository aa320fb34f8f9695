"""Term factory — the pluggable constructor for RDF terms and quads.

The evaluator never instantiates terms directly; it asks a factory, so an
application can receive its own term representation (see
``rdfa_quads.rdflib_bridge.RdflibTermFactory``).
"""

from __future__ import annotations

from typing import Any, Protocol

from .types import (
    BlankNode,
    DefaultGraph,
    Literal,
    NamedNode,
    Quad,
    XSD_STRING,
)


class TermFactory(Protocol):
    """What the evaluator needs from a term factory."""

    def named_node(self, iri: str) -> Any: ...

    def blank_node(self, label: str | None = None) -> Any: ...

    def literal(self, value: str, language_or_datatype: Any = None) -> Any: ...

    def quad(self, subject: Any, predicate: Any, obj: Any, graph: Any = None) -> Any: ...

    def default_graph(self) -> Any: ...


class DefaultTermFactory:
    """Builds the frozen dataclass terms from ``rdfa_quads.types``.

    Generated blank node labels are ``b0``, ``b1``, ...; a label that was
    already handed out explicitly (``_:b3`` in a document) is never
    generated afterwards.
    """

    def __init__(self, prefix: str = "b"):
        self.prefix = prefix
        self._counter = 0
        self._issued: set[str] = set()

    def named_node(self, iri: str) -> NamedNode:
        return NamedNode(iri)

    def blank_node(self, label: str | None = None) -> BlankNode:
        if label is None:
            label = f"{self.prefix}{self._counter}"
            self._counter += 1
            while label in self._issued:
                label = f"{self.prefix}{self._counter}"
                self._counter += 1
        self._issued.add(label)
        return BlankNode(label)

    def literal(self, value: str, language_or_datatype: Any = None) -> Literal:
        """Language tag when given a string, datatype when given a NamedNode."""
        if isinstance(language_or_datatype, str):
            return Literal(value, language=language_or_datatype)
        if language_or_datatype is None:
            return Literal(value, datatype=NamedNode(XSD_STRING))
        return Literal(value, datatype=language_or_datatype)

    def quad(self, subject, predicate, obj, graph=None) -> Quad:
        return Quad(subject, predicate, obj, graph if graph is not None else self.default_graph())

    def default_graph(self) -> DefaultGraph:
        return DefaultGraph()

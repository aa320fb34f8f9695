"""rdflib bridge — RDFa output as rdflib terms and datasets.

Two ways in:
  1. ``RdflibTermFactory`` makes the evaluator build rdflib terms directly;
     quads come out as ``(s, p, o, graph_id)`` tuples.
  2. ``quads_to_dataset`` converts already collected quads (rdflib tuples or
     the package's own dataclass terms) into an ``rdflib.Dataset``.

``parse_into_dataset(html, **options)`` does both in one call.
"""

from __future__ import annotations

from rdflib import BNode, Dataset, Literal, URIRef
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID
from rdflib.term import Identifier

from .parser import RDFaParser
from .types import (
    XSD_STRING,
    BlankNode,
    DefaultGraph,
    NamedNode,
    Quad,
)
from .types import Literal as RDFaLiteral


# ---------------------------------------------------------------------------
# Term factory
# ---------------------------------------------------------------------------

class RdflibTermFactory:
    """Term factory producing rdflib ``URIRef``/``BNode``/``Literal`` terms."""

    def named_node(self, iri: str) -> URIRef:
        return URIRef(iri)

    def blank_node(self, label: str | None = None) -> BNode:
        return BNode(label) if label else BNode()

    def literal(self, value: str, language_or_datatype=None) -> Literal:
        if isinstance(language_or_datatype, str):
            return Literal(value, lang=language_or_datatype)
        if language_or_datatype is None:
            return Literal(value)
        return Literal(value, datatype=language_or_datatype)

    def quad(self, subject, predicate, obj, graph=None) -> tuple:
        return (subject, predicate, obj, graph if graph is not None else self.default_graph())

    def default_graph(self) -> URIRef:
        return DATASET_DEFAULT_GRAPH_ID


# ---------------------------------------------------------------------------
# Quads → Dataset
# ---------------------------------------------------------------------------

def to_rdflib(term) -> Identifier:
    """Convert one of the package's dataclass terms to its rdflib equivalent.

    rdflib terms pass through unchanged. A plain xsd:string literal becomes
    an rdflib literal without datatype, which RDF 1.1 treats as the same
    value.
    """
    if isinstance(term, Identifier):
        return term
    if isinstance(term, NamedNode):
        return URIRef(term.value)
    if isinstance(term, BlankNode):
        return BNode(term.value)
    if isinstance(term, RDFaLiteral):
        if term.language:
            return Literal(term.value, lang=term.language)
        if term.datatype.value == XSD_STRING:
            return Literal(term.value)
        return Literal(term.value, datatype=URIRef(term.datatype.value))
    if isinstance(term, DefaultGraph):
        return DATASET_DEFAULT_GRAPH_ID
    raise TypeError(f"Cannot convert {term!r} to an rdflib term")


def quads_to_dataset(quads, dataset: Dataset | None = None) -> Dataset:
    """Add ``quads`` to ``dataset`` (a new one by default) and return it."""
    ds = dataset if dataset is not None else Dataset()
    for quad in quads:
        if isinstance(quad, Quad):
            s, p, o, g = quad.subject, quad.predicate, quad.object, quad.graph
        else:
            s, p, o, g = quad
        ds.add((to_rdflib(s), to_rdflib(p), to_rdflib(o), to_rdflib(g)))
    return ds


def parse_into_dataset(html: str, **options) -> Dataset:
    """Parse ``html`` with rdflib terms and return the resulting dataset."""
    options.setdefault("term_factory", RdflibTermFactory())
    parser = RDFaParser(**options)
    parser.feed(html)
    return quads_to_dataset(parser.finish())

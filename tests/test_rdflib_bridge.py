"""Tests for the rdflib bridge.

Shows that parser output can be produced directly as rdflib terms, converted
after the fact, and loaded into an rdflib Dataset where RDF lists read back
as collections.
"""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from rdflib import RDF, BNode, Dataset, Literal, URIRef
from rdflib.collection import Collection
from rdflib.graph import DATASET_DEFAULT_GRAPH_ID
from rdflib.namespace import XSD

from rdfa_quads.parser import parse_rdfa
from rdfa_quads.rdflib_bridge import (
    RdflibTermFactory,
    parse_into_dataset,
    quads_to_dataset,
    to_rdflib,
)
from rdfa_quads.types import BlankNode, DefaultGraph, NamedNode, XSD_NS
from rdfa_quads.types import Literal as RDFaLiteral


EX = "http://example.org/"
SCHEMA = "http://schema.org/"
DC = "http://purl.org/dc/terms/"

PERSON_PAGE = (
    '<div vocab="http://schema.org/" about="#jane" typeof="Person">'
    '<span property="name">Jane Doe</span>'
    '<span property="age" datatype="xsd:integer">42</span>'
    '<span property="nickname" lang="de">Hanni</span>'
    '</div>'
)


def _default_graph(ds):
    return ds.graph(DATASET_DEFAULT_GRAPH_ID)


# ---------------------------------------------------------------------------
# Term factory
# ---------------------------------------------------------------------------

class TestRdflibTermFactory:
    def test_quads_are_rdflib_tuples(self):
        quads = parse_rdfa(PERSON_PAGE, base_iri=EX, term_factory=RdflibTermFactory())
        jane = URIRef(f"{EX}#jane")
        assert quads[0] == (jane, RDF.type, URIRef(f"{SCHEMA}Person"), DATASET_DEFAULT_GRAPH_ID)
        assert quads[1] == (jane, URIRef(f"{SCHEMA}name"), Literal("Jane Doe"), DATASET_DEFAULT_GRAPH_ID)

    def test_typed_and_language_literals(self):
        quads = parse_rdfa(PERSON_PAGE, base_iri=EX, term_factory=RdflibTermFactory())
        objects = [q[2] for q in quads]
        assert Literal("42", datatype=XSD.integer) in objects
        assert Literal("Hanni", lang="de") in objects

    def test_blank_nodes(self):
        factory = RdflibTermFactory()
        assert factory.blank_node("x") == BNode("x")
        assert factory.blank_node() != factory.blank_node()

    def test_document_labels_map_to_one_node(self):
        quads = parse_rdfa(
            f'<div><p about="_:x" property="{EX}p">a</p><p about="[_:x]" property="{EX}q">b</p></div>',
            base_iri=EX, term_factory=RdflibTermFactory(),
        )
        assert quads[0][0] == quads[1][0]
        assert isinstance(quads[0][0], BNode)

    def test_explicit_graph(self):
        factory = RdflibTermFactory()
        g = URIRef(f"{EX}graph")
        s, p, o = URIRef(f"{EX}s"), URIRef(f"{EX}p"), Literal("o")
        assert factory.quad(s, p, o, g) == (s, p, o, g)


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------

class TestToRdflib:
    def test_named_node(self):
        assert to_rdflib(NamedNode(f"{EX}a")) == URIRef(f"{EX}a")

    def test_blank_node_keeps_label(self):
        assert to_rdflib(BlankNode("b3")) == BNode("b3")

    def test_plain_literal_has_no_datatype(self):
        converted = to_rdflib(RDFaLiteral("hello"))
        assert converted == Literal("hello")
        assert converted.datatype is None

    def test_language_literal(self):
        assert to_rdflib(RDFaLiteral("hallo", language="de")) == Literal("hallo", lang="de")

    def test_typed_literal(self):
        lit = RDFaLiteral("7", datatype=NamedNode(f"{XSD_NS}integer"))
        assert to_rdflib(lit) == Literal("7", datatype=XSD.integer)

    def test_default_graph(self):
        assert to_rdflib(DefaultGraph()) == DATASET_DEFAULT_GRAPH_ID

    def test_rdflib_terms_pass_through(self):
        node = URIRef(f"{EX}a")
        assert to_rdflib(node) is node

    def test_unknown_term(self):
        with pytest.raises(TypeError, match="Cannot convert"):
            to_rdflib("http://example.org/a")


# ---------------------------------------------------------------------------
# Dataset loading
# ---------------------------------------------------------------------------

class TestQuadsToDataset:
    def test_dataclass_quads(self):
        quads = parse_rdfa(PERSON_PAGE, base_iri=EX)
        graph = _default_graph(quads_to_dataset(quads))
        assert len(graph) == len(quads)
        jane = URIRef(f"{EX}#jane")
        assert (jane, RDF.type, URIRef(f"{SCHEMA}Person")) in graph
        assert graph.value(jane, URIRef(f"{SCHEMA}age")) == Literal("42", datatype=XSD.integer)

    def test_adds_to_given_dataset(self):
        ds = Dataset()
        result = quads_to_dataset(parse_rdfa(PERSON_PAGE, base_iri=EX), ds)
        assert result is ds

    def test_factory_and_dataclass_paths_agree(self):
        from_dataclasses = quads_to_dataset(parse_rdfa(PERSON_PAGE, base_iri=EX))
        from_factory = quads_to_dataset(
            parse_rdfa(PERSON_PAGE, base_iri=EX, term_factory=RdflibTermFactory()))
        assert set(_default_graph(from_dataclasses)) == set(_default_graph(from_factory))


class TestParseIntoDataset:
    def test_list_reads_back_as_collection(self):
        ds = parse_into_dataset(
            '<div about="#book" rel="dc:creator" inlist>'
            '<span about="#author1"></span><span about="#author2"></span></div>',
            base_iri=EX,
        )
        graph = _default_graph(ds)
        head = graph.value(URIRef(f"{EX}#book"), URIRef(f"{DC}creator"))
        assert isinstance(head, BNode)
        assert list(Collection(graph, head)) == [URIRef(f"{EX}#author1"), URIRef(f"{EX}#author2")]

    def test_typed_resource_chain(self):
        ds = parse_into_dataset(
            '<div about="#jane" rel="foaf:knows" vocab="http://schema.org/">'
            '<div typeof="Person"><span property="name">Bob</span></div></div>',
            base_iri=EX,
        )
        graph = _default_graph(ds)
        bob = graph.value(URIRef(f"{EX}#jane"), URIRef("http://xmlns.com/foaf/0.1/knows"))
        assert (bob, RDF.type, URIRef(f"{SCHEMA}Person")) in graph
        assert graph.value(bob, URIRef(f"{SCHEMA}name")) == Literal("Bob")

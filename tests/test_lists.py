"""Tests for RDF collection construction from @inlist values."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from rdfa_quads.lists import ListRegistry
from rdfa_quads.terms import DefaultTermFactory
from rdfa_quads.types import RDF_FIRST, RDF_NIL, RDF_REST, BlankNode, Literal, NamedNode


FIRST = NamedNode(RDF_FIRST)
REST = NamedNode(RDF_REST)
NIL = NamedNode(RDF_NIL)
S = NamedNode("http://ex.org/book")
P = NamedNode("http://purl.org/dc/terms/creator")


def _registry():
    emitted = []
    registry = ListRegistry(DefaultTermFactory(), lambda s, p, o: emitted.append((s, p, o)))
    return registry, emitted


class TestAdd:
    def test_first_item_links_subject(self):
        registry, emitted = _registry()
        node = registry.add(S, P, Literal("a"))
        assert node == BlankNode("b0")
        assert emitted == [(node, FIRST, Literal("a")), (S, P, node)]

    def test_second_item_extends_tail(self):
        registry, emitted = _registry()
        n0 = registry.add(S, P, Literal("a"))
        n1 = registry.add(S, P, Literal("b"))
        assert emitted[2:] == [(n1, FIRST, Literal("b")), (n0, REST, n1)]
        mapping = registry.get(S, P)
        assert mapping.head == n0
        assert mapping.tail == n1

    def test_missing_component(self):
        registry, emitted = _registry()
        assert registry.add(None, P, Literal("a")) is None
        assert registry.add(S, P, None) is None
        assert emitted == []
        assert len(registry) == 0

    def test_keys_compare_by_value(self):
        registry, _ = _registry()
        registry.add(NamedNode("http://ex.org/book"), P, Literal("a"))
        registry.add(NamedNode("http://ex.org/book"), P, Literal("b"))
        assert len(registry) == 1
        assert (S, P) in registry

    def test_separate_predicates_separate_lists(self):
        registry, _ = _registry()
        registry.add(S, P, Literal("a"))
        registry.add(S, NamedNode("http://ex.org/other"), Literal("b"))
        assert len(registry) == 2


class TestFinalize:
    def test_terminates_tail_only(self):
        registry, emitted = _registry()
        registry.add(S, P, Literal("a"))
        n1 = registry.add(S, P, Literal("b"))
        assert registry.finalize() == 1
        assert emitted[-1] == (n1, REST, NIL)
        nil_links = [t for t in emitted if t[2] == NIL]
        assert nil_links == [(n1, REST, NIL)]

    def test_idempotent(self):
        registry, emitted = _registry()
        registry.add(S, P, Literal("a"))
        registry.finalize()
        count = len(emitted)
        assert registry.finalize() == 0
        assert len(emitted) == count

    def test_empty_registry_emits_nothing(self):
        registry, emitted = _registry()
        assert registry.finalize() == 0
        assert emitted == []

    def test_lists_closed_in_creation_order(self):
        registry, emitted = _registry()
        a = registry.add(S, P, Literal("a"))
        b = registry.add(S, NamedNode("http://ex.org/other"), Literal("b"))
        registry.finalize()
        assert emitted[-2:] == [(a, REST, NIL), (b, REST, NIL)]

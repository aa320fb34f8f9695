"""RDF collections built from @inlist values.

Items for one (subject, predicate) pair can arrive from unrelated subtrees,
so the registry lives with the evaluator rather than on any element frame.
Each list is linked eagerly as items arrive and terminated with rdf:nil once,
at the end of the document.
"""

from __future__ import annotations

from typing import Callable

from .types import RDF_FIRST, RDF_NIL, RDF_REST, ListMapping


class ListRegistry:
    """Keyed table of collections under construction.

    Keys are ``(subject, predicate)`` terms compared by value, so two equal
    blank nodes or IRIs share one list.
    """

    def __init__(self, terms, emit: Callable[[object, object, object], object]):
        self._terms = terms
        self._emit = emit
        self._lists: dict[tuple, ListMapping] = {}
        self._first = terms.named_node(RDF_FIRST)
        self._rest = terms.named_node(RDF_REST)
        self._nil = terms.named_node(RDF_NIL)

    def add(self, subject, predicate, value):
        """Append ``value`` to the (subject, predicate) list.

        Returns the new list node, or None when a component is missing.
        """
        if subject is None or predicate is None or value is None:
            return None
        mapping = self._lists.setdefault((subject, predicate), ListMapping())
        node = self._terms.blank_node()
        self._emit(node, self._first, value)
        if mapping.head is None:
            mapping.head = mapping.tail = node
            self._emit(subject, predicate, node)
        else:
            self._emit(mapping.tail, self._rest, node)
            mapping.tail = node
        mapping.finalized = False
        return node

    def finalize(self) -> int:
        """Terminate every open list with rdf:nil. Returns how many were closed."""
        closed = 0
        for mapping in self._lists.values():
            if mapping.tail is None or mapping.finalized:
                continue
            self._emit(mapping.tail, self._rest, self._nil)
            mapping.finalized = True
            closed += 1
        return closed

    def get(self, subject, predicate) -> ListMapping | None:
        return self._lists.get((subject, predicate))

    def __len__(self) -> int:
        return len(self._lists)

    def __contains__(self, key) -> bool:
        return key in self._lists

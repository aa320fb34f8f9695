"""Core types for RDFa evaluation — RDF terms, quads and evaluator records.

The term model follows the RDF/JS data model: every term carries a
``term_type`` tag and a lexical ``value``.

  Term = NamedNode | BlankNode | Literal | DefaultGraph
  Quad = (subject, predicate, object, graph)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


# ---------------------------------------------------------------------------
# Vocabulary IRIs used by the evaluator
# ---------------------------------------------------------------------------

RDF_NS = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
XSD_NS = "http://www.w3.org/2001/XMLSchema#"

RDF_TYPE = f"{RDF_NS}type"
RDF_FIRST = f"{RDF_NS}first"
RDF_REST = f"{RDF_NS}rest"
RDF_NIL = f"{RDF_NS}nil"
RDF_LANG_STRING = f"{RDF_NS}langString"
RDF_XML_LITERAL = f"{RDF_NS}XMLLiteral"
RDF_HTML = f"{RDF_NS}HTML"

XSD_STRING = f"{XSD_NS}string"
XSD_DATE_TIME = f"{XSD_NS}dateTime"


# ---------------------------------------------------------------------------
# ABSENT: attribute not present on the element (distinct from "")
# ---------------------------------------------------------------------------

class _AbsentType:
    """Sentinel for an attribute that does not appear on an element.

    ``@about=""``, ``@vocab=""`` and ``@datatype=""`` all mean something
    different from the attribute being missing, so absence can't be
    represented by an empty string or by ``None``.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _AbsentType)

    def __hash__(self) -> int:
        return hash("ABSENT")


ABSENT = _AbsentType()


# ---------------------------------------------------------------------------
# Terms
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NamedNode:
    """An IRI reference."""
    value: str
    term_type: str = field(default="NamedNode", init=False)

    def __repr__(self) -> str:
        return f"<{self.value}>"


@dataclass(frozen=True)
class BlankNode:
    """A blank node, scoped to one evaluation run."""
    value: str
    term_type: str = field(default="BlankNode", init=False)

    def __repr__(self) -> str:
        return f"_:{self.value}"


@dataclass(frozen=True)
class Literal:
    """An RDF literal.

    A non-empty ``language`` fixes the datatype to rdf:langString; without a
    language the datatype defaults to xsd:string.
    """
    value: str
    language: str = ""
    datatype: NamedNode = NamedNode(XSD_STRING)
    term_type: str = field(default="Literal", init=False)

    def __post_init__(self) -> None:
        if self.language:
            if self.datatype.value == XSD_STRING:
                object.__setattr__(self, "datatype", NamedNode(RDF_LANG_STRING))
            elif self.datatype.value != RDF_LANG_STRING:
                raise ValueError(
                    f"Literal '{self.value}' cannot carry both language "
                    f"'{self.language}' and datatype {self.datatype!r}"
                )

    def __repr__(self) -> str:
        if self.language:
            return f'"{self.value}"@{self.language}'
        if self.datatype.value != XSD_STRING:
            return f'"{self.value}"^^{self.datatype!r}'
        return f'"{self.value}"'


@dataclass(frozen=True)
class DefaultGraph:
    """The default graph of a dataset."""
    value: str = ""
    term_type: str = field(default="DefaultGraph", init=False)

    def __repr__(self) -> str:
        return "DefaultGraph"


Subject = NamedNode | BlankNode
Term = NamedNode | BlankNode | Literal | DefaultGraph


@dataclass(frozen=True)
class Quad:
    """A statement in a graph."""
    subject: Subject
    predicate: NamedNode
    object: Term
    graph: Term = DefaultGraph()

    def __repr__(self) -> str:
        return f"Quad({self.subject!r} {self.predicate!r} {self.object!r})"


# ---------------------------------------------------------------------------
# Incomplete-triple ledger entries
# ---------------------------------------------------------------------------

class Direction(Enum):
    """Orientation of a deferred relation."""
    FORWARD = "forward"    # @rel: subject -> predicate -> object
    REVERSE = "reverse"    # @rev: object -> predicate -> subject


@dataclass
class PendingRelation:
    """A @rel/@rev relation waiting for a descendant to supply its object.

    ``pending_object`` is allocated when the relation is recorded, so that a
    @typeof descendant can adopt it as its own subject instead of minting a
    second blank node.
    """
    predicate: object
    direction: Direction
    subject: object
    pending_object: object
    inlist: bool = False
    completed: bool = False

    def __repr__(self) -> str:
        arrow = "->" if self.direction == Direction.FORWARD else "<-"
        state = "done" if self.completed else "open"
        return f"Pending({self.subject!r} {arrow}{self.predicate!r}, {state})"


# ---------------------------------------------------------------------------
# RDF collection under construction
# ---------------------------------------------------------------------------

@dataclass
class ListMapping:
    """Head/tail bookkeeping for one (subject, predicate) collection."""
    head: object = None
    tail: object = None
    finalized: bool = False

"""RDFa evaluator — the element-open / text / element-close state machine.

One ``ElementFrame`` is pushed per open element and popped on its close tag.
A frame is only ever written by its own open/close handlers; descendants read
their ancestors' frames but never change them. The one exception is the
incomplete-triple ledger: a descendant that supplies a resource marks an
ancestor's pending relations as completed.

Quad emission order for one element:

  on open:   completions of ancestor relations
             property linking the parent subject to a new typed resource
             @rel / @rev triples (or list items)
             rdf:type triples
  on close:  @property triples (or list items)

Relations whose object is still unknown on open are emitted later, at the
moment a descendant completes them. Lists are terminated in ``finish()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from html import escape

from .attributes import AttributeView
from .config import RDFaConfig
from .context import EvaluationContext, derive_child, root_context
from .errors import QuadConstructionError
from .lists import ListRegistry
from .resolution import (
    resolve_iri,
    resolve_safe_curie_or_iri,
    resolve_term,
    resolve_token_list,
)
from .sink import QuadSink
from .terms import DefaultTermFactory, TermFactory
from .tokenizer import VOID_ELEMENTS
from .types import (
    ABSENT,
    RDF_HTML,
    RDF_TYPE,
    RDF_XML_LITERAL,
    Direction,
    PendingRelation,
)

logger = logging.getLogger(__name__)

# Datatypes whose lexical form is the element's inner markup, not its text
MARKUP_DATATYPES = frozenset({RDF_XML_LITERAL, RDF_HTML})


# ---------------------------------------------------------------------------
# Element frame
# ---------------------------------------------------------------------------

@dataclass
class ElementFrame:
    """Per-element evaluation state, owned by the frame stack.

    ``subject`` is what descendants inherit (unless ``current_object`` is
    set); ``relation_subject`` is the subject of this element's own @rel,
    @rev and @property statements. The two differ only for an element with
    @typeof and no @about that also relates its parent to the new typed
    resource.
    """
    name: str
    attrs: AttributeView
    context: EvaluationContext
    subject: object = None
    relation_subject: object = None
    current_object: object = None
    typed_resource: object = None
    incomplete: list[PendingRelation] = field(default_factory=list)
    text: list[str] = field(default_factory=list)
    markup: list[str] = field(default_factory=list)
    inlist: bool = False
    implicit_datatype: str | None = None
    skip: bool = False
    property_done: bool = False
    subject_from_base: bool = False
    explicit: object = None
    links_parent: bool = False

    def __repr__(self) -> str:
        return f"Frame(<{self.name}> subject={self.subject!r})"


class _DocumentTerms:
    """Term factory wrapper that gives each document blank node label one node.

    ``_:a`` written twice in a document must name the same node, and a bare
    ``_:`` names one generated node for the whole document. Document labels
    and generated nodes never share a node: a document label that collides
    with a generated one is given a fresh node instead, and generation skips
    nodes already taken by document labels.
    """

    def __init__(self, factory: TermFactory):
        self.factory = factory
        self._labelled: dict[str, object] = {}
        self._documented: set = set()
        self._generated: set = set()

    def named_node(self, iri):
        return self.factory.named_node(iri)

    def blank_node(self, label=None):
        if label is None:
            return self._generate()
        node = self._labelled.get(label)
        if node is not None:
            return node
        if label:
            node = self.factory.blank_node(label)
            if node in self._generated:
                logger.debug("Blank node label '_:%s' was already generated, renaming", label)
                node = self._generate()
        else:
            node = self._generate()
        self._labelled[label] = node
        self._documented.add(node)
        return node

    def _generate(self):
        node = self.factory.blank_node()
        while node in self._documented:
            node = self.factory.blank_node()
        self._generated.add(node)
        return node

    def literal(self, value, language_or_datatype=None):
        return self.factory.literal(value, language_or_datatype)


def _start_tag(name: str, attrs: AttributeView) -> str:
    parts = [name]
    for attr, value in attrs.items():
        parts.append(f'{attr}="{escape(value, quote=True)}"')
    return f"<{' '.join(parts)}>"


# ---------------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------------

class RDFaEvaluator:
    """Consumes element events in document order and emits quads to a sink."""

    def __init__(self, config: RDFaConfig | None = None, sink: QuadSink | None = None):
        self.config = config or RDFaConfig()
        self.profile = self.config.profile
        factory = self.config.term_factory or DefaultTermFactory()
        self.sink = sink if sink is not None else QuadSink(factory)
        self.terms = _DocumentTerms(factory)
        self.lists = ListRegistry(self.terms, self.sink.emit)
        self.stack: list[ElementFrame] = []
        self.document_base = self.config.base_iri
        self._root = root_context(
            self.config.base_iri,
            self.config.initial_prefixes(),
            vocab=self.config.vocab,
            language=self.config.language,
        )
        self._rdf_type = self.terms.named_node(RDF_TYPE)
        self.finished = False

    # --- events ---

    def open_element(self, name: str, attrs) -> ElementFrame | None:
        if self.finished:
            logger.debug("Ignoring <%s> after finish()", name)
            return None
        if not isinstance(attrs, AttributeView):
            attrs = AttributeView(attrs)
        name = name.lower()

        if self.profile.base_element and name == "base" and attrs.has("href"):
            self._rebase(attrs.get("href"))

        parent = self.stack[-1] if self.stack else None
        context = derive_child(parent.context if parent else self._root, attrs, self.profile)
        frame = ElementFrame(
            name=name,
            attrs=attrs,
            context=context,
            inlist=attrs.has("inlist"),
            skip=not attrs.is_rdfa,
        )
        if attrs.get("datatype") is ABSENT:
            frame.implicit_datatype = self.profile.implicit_datatypes.get(name)
        if parent is not None:
            parent.markup.append(_start_tag(name, attrs))

        self._establish_subject(frame, parent)
        self._emit_on_open(frame, parent)

        self.stack.append(frame)
        return frame

    def text(self, chunk: str) -> None:
        if not self.stack:
            return
        frame = self.stack[-1]
        frame.text.append(chunk)
        frame.markup.append(escape(chunk, quote=False))

    def close_element(self, name: str) -> None:
        name = name.lower()
        for index in range(len(self.stack) - 1, -1, -1):
            if self.stack[index].name == name:
                break
        else:
            logger.debug("Ignoring stray close tag </%s>", name)
            return
        while len(self.stack) > index + 1:
            logger.debug("Implicitly closing <%s> at </%s>", self.stack[-1].name, name)
            self._close_top()
        self._close_top()

    def finish(self) -> int:
        """Close any open elements and terminate the lists.

        Returns the number of lists terminated; a second call does nothing.
        """
        if self.finished:
            return 0
        while self.stack:
            self._close_top()
        closed = self.lists.finalize()
        self.finished = True
        logger.debug("Evaluation finished: %d quads, %d lists", len(self.sink.quads), closed)
        return closed

    # --- subject and object resolution ---

    def _explicit_resource(self, attrs: AttributeView, context: EvaluationContext):
        """@resource, else @href, else @src; an unresolvable one falls through."""
        if attrs.has("resource"):
            node = resolve_safe_curie_or_iri(attrs.get("resource"), context, self.terms)
            if node is not None:
                return node
        for name in ("href", "src"):
            if attrs.has(name):
                iri = resolve_iri(attrs.get(name), context.base)
                if iri:
                    return self.terms.named_node(iri)
        return None

    def _reusable_pending_object(self):
        """The pending node of the nearest hanging ancestor, if it may be adopted."""
        for ancestor in reversed(self.stack):
            if ancestor.incomplete:
                relations = ancestor.incomplete
                if any(r.inlist for r in relations) or all(r.completed for r in relations):
                    return None
                return relations[0].pending_object
            if not ancestor.skip:
                return None
        return None

    def _establish_subject(self, frame: ElementFrame, parent: ElementFrame | None) -> None:
        attrs = frame.attrs
        context = frame.context
        typed = attrs.has("typeof")
        has_rel = attrs.has_any("rel", "rev")
        has_property = attrs.has("property")

        about = None
        if attrs.has("about"):
            about = resolve_safe_curie_or_iri(attrs.get("about"), context, self.terms)
            if about is None:
                logger.debug("Unresolvable @about '%s' on <%s>", attrs.get("about"), frame.name)

        explicit = self._explicit_resource(attrs, context)
        inherited = None
        if parent is not None:
            inherited = parent.current_object if parent.current_object is not None else parent.subject

        frame.explicit = explicit
        relation_subject = None
        links_parent = False

        if about is not None:
            subject = about
        elif parent is None:
            subject = self.terms.named_node(context.base) if context.base else None
            frame.subject_from_base = True
        elif typed:
            pending = None
            if not has_rel and not attrs.has_any("resource", "href", "src"):
                pending = self._reusable_pending_object()
            if pending is not None:
                subject = pending
            else:
                subject = explicit if explicit is not None else self.terms.blank_node()
                if has_rel or has_property:
                    # the new typed node is the object of the parent's statement
                    relation_subject = inherited
                    links_parent = True
        else:
            subject = inherited
            frame.subject_from_base = parent.subject_from_base and parent.current_object is None

        frame.subject = subject
        frame.relation_subject = relation_subject if links_parent else subject
        frame.links_parent = links_parent
        if typed:
            frame.typed_resource = subject

    def _anchor(self, frame: ElementFrame):
        """The resource this element offers to complete ancestor relations."""
        attrs = frame.attrs
        bare = not attrs.has_any("about", "typeof", "rel", "rev", "property")
        if bare and frame.explicit is not None:
            return frame.explicit
        return frame.relation_subject

    # --- emission ---

    def _emit_on_open(self, frame: ElementFrame, parent: ElementFrame | None) -> None:
        attrs = frame.attrs
        context = frame.context

        if not frame.skip and parent is not None:
            anchor = self._anchor(frame)
            if anchor is not None:
                self._complete_ancestors(anchor)

        if (frame.links_parent and not attrs.has_any("rel", "rev")
                and attrs.get("content") is ABSENT and attrs.get("datatype") is ABSENT):
            for predicate in resolve_token_list(attrs.get("property"), context, self.terms, predicates=True):
                self._emit_or_append(frame, frame.relation_subject, predicate, frame.subject)
            frame.property_done = True

        if attrs.has_any("rel", "rev"):
            self._emit_relations(frame)
        elif frame.links_parent:
            frame.current_object = frame.subject
        elif not attrs.has_any("about", "typeof", "property"):
            frame.current_object = frame.explicit

        if frame.typed_resource is not None:
            for rdf_class in resolve_token_list(attrs.get("typeof"), context, self.terms):
                self.sink.emit(frame.typed_resource, self._rdf_type, rdf_class)

    def _emit_relations(self, frame: ElementFrame) -> None:
        attrs = frame.attrs
        context = frame.context
        rels = resolve_token_list(attrs.get("rel"), context, self.terms, predicates=True)
        revs = resolve_token_list(attrs.get("rev"), context, self.terms, predicates=True)
        subject = frame.relation_subject
        obj = frame.subject if frame.links_parent else frame.explicit

        if obj is not None:
            for predicate in rels:
                self._emit_or_append(frame, subject, predicate, obj)
            for predicate in revs:
                self.sink.emit(obj, predicate, subject)
            frame.current_object = obj
            return

        if subject is None or not (rels or revs):
            return
        pending = self.terms.blank_node()
        for predicate in rels:
            frame.incomplete.append(
                PendingRelation(predicate, Direction.FORWARD, subject, pending, inlist=frame.inlist))
        for predicate in revs:
            frame.incomplete.append(PendingRelation(predicate, Direction.REVERSE, subject, pending))
        frame.current_object = pending

    def _emit_or_append(self, frame: ElementFrame, subject, predicate, obj) -> None:
        if frame.inlist:
            self.lists.add(subject, predicate, obj)
        else:
            self.sink.emit(subject, predicate, obj)

    def _complete_ancestors(self, value) -> None:
        """Complete the nearest hanging ancestor, looking through pass-through elements."""
        for ancestor in reversed(self.stack):
            if ancestor.incomplete:
                self._complete(ancestor, value)
                return
            if not ancestor.skip:
                return

    def _complete(self, frame: ElementFrame, value) -> None:
        for relation in frame.incomplete:
            if relation.completed:
                continue
            if relation.direction is Direction.REVERSE:
                self.sink.emit(value, relation.predicate, relation.subject)
                relation.completed = True
            elif relation.inlist:
                # list relations take one item per completing descendant
                self.lists.add(relation.subject, relation.predicate, value)
            else:
                self.sink.emit(relation.subject, relation.predicate, value)
                relation.completed = True

    # --- close ---

    def _close_top(self) -> None:
        frame = self.stack.pop()
        has_property = frame.attrs.has("property")
        if has_property and not frame.property_done:
            self._emit_property(frame)
        if self.stack:
            parent = self.stack[-1]
            if not has_property:
                parent.text.extend(frame.text)
            parent.markup.extend(frame.markup)
            if frame.name not in VOID_ELEMENTS:
                parent.markup.append(f"</{frame.name}>")

    def _emit_property(self, frame: ElementFrame) -> None:
        predicates = resolve_token_list(
            frame.attrs.get("property"), frame.context, self.terms, predicates=True)
        if not predicates or frame.relation_subject is None:
            return
        value = self._property_value(frame)
        if value is None:
            return
        for predicate in predicates:
            self._emit_or_append(frame, frame.relation_subject, predicate, value)

    def _property_value(self, frame: ElementFrame):
        attrs = frame.attrs
        resource = self._explicit_resource(attrs, frame.context)
        if resource is not None:
            return resource
        if attrs.has_any("rel", "rev") and not frame.incomplete and frame.current_object is not None:
            return frame.current_object
        return self._literal(frame)

    def _literal(self, frame: ElementFrame):
        attrs = frame.attrs
        content = attrs.get("content")
        if content is ABSENT and frame.name in self.profile.datetime_attribute:
            content = attrs.get("datetime")

        datatype_attr = attrs.get("datatype")
        datatype = None
        if datatype_attr:
            datatype = resolve_term(datatype_attr, frame.context)
            if datatype is None:
                logger.debug("Unresolvable @datatype '%s', using a plain literal", datatype_attr)

        if content is ABSENT:
            if datatype in MARKUP_DATATYPES:
                content = "".join(frame.markup)
            else:
                content = "".join(frame.text).strip()
                if not content and datatype_attr is ABSENT:
                    return None

        try:
            if datatype is not None:
                return self.terms.literal(content, self.terms.named_node(datatype))
            if datatype_attr is not ABSENT:
                return self.terms.literal(content)
            if frame.implicit_datatype:
                return self.terms.literal(content, self.terms.named_node(frame.implicit_datatype))
            if frame.context.language:
                return self.terms.literal(content, frame.context.language)
            return self.terms.literal(content)
        except Exception as e:
            self.sink.error(QuadConstructionError(e, (frame.relation_subject, None, content)))
            return None

    # --- <base href> ---

    def _rebase(self, href) -> None:
        """Apply a ``<base href>`` to the document and to the open frames."""
        new_base = resolve_iri(href, self.document_base)
        if not new_base or new_base == self.document_base:
            return
        logger.debug("Document base changed from '%s' to '%s'", self.document_base, new_base)
        self.document_base = new_base
        self._root = self._root.with_base(new_base)
        node = self.terms.named_node(new_base)
        for frame in self.stack:
            if frame.attrs.has("xml:base"):
                break
            frame.context = frame.context.with_base(new_base)
            if frame.subject_from_base:
                if frame.relation_subject == frame.subject:
                    frame.relation_subject = node
                frame.subject = node

"""Evaluation context — the inherited state of one element.

A context is an immutable snapshot: a child element derives a new context
from its parent's and pushes it with its own frame. Nothing ever edits an
ancestor's context; a ``<base>`` element replaces open frames' contexts with
re-based copies instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Mapping

from .attributes import AttributeView
from .config import Profile
from .resolution import resolve_iri
from .types import ABSENT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EvaluationContext:
    """base IRI, prefix mapping (lower-cased keys), vocabulary, language."""
    base: str = ""
    prefixes: Mapping[str, str] = field(default_factory=dict)
    vocab: str = ""
    language: str = ""

    def with_base(self, base: str) -> EvaluationContext:
        return replace(self, base=base)

    def __repr__(self) -> str:
        return (f"Context(base={self.base!r}, vocab={self.vocab!r}, "
                f"lang={self.language!r}, {len(self.prefixes)} prefixes)")


def parse_prefixes(value) -> dict[str, str]:
    """Parse an @prefix attribute: ``"dc: http://purl.org/dc/terms/ ..."``.

    Keys are lower-cased. The ``_`` prefix and pairs whose first token does
    not end in a colon are skipped.
    """
    mappings: dict[str, str] = {}
    tokens = value.split() if value else []
    i = 0
    while i < len(tokens) - 1:
        name, iri = tokens[i], tokens[i + 1]
        if not name.endswith(":"):
            logger.debug("Skipping malformed @prefix token '%s'", name)
            i += 1
            continue
        prefix = name[:-1].lower()
        if not prefix or prefix == "_":
            logger.debug("Ignoring reserved @prefix '%s'", name)
        else:
            mappings[prefix] = iri
        i += 2
    return mappings


def root_context(base: str, prefixes: Mapping[str, str], vocab: str = "", language: str = "") -> EvaluationContext:
    """Context in force before the first element is opened."""
    return EvaluationContext(base=base, prefixes=dict(prefixes), vocab=vocab, language=language)


def derive_child(parent: EvaluationContext, attrs: AttributeView, profile: Profile) -> EvaluationContext:
    """The context for an element, derived from its parent's."""
    base = parent.base
    xml_base = attrs.get("xml:base")
    if xml_base is not ABSENT:
        resolved = resolve_iri(xml_base, parent.base)
        if resolved:
            base = resolved

    prefixes = parent.prefixes
    declared = parse_prefixes(attrs.get("prefix"))
    if declared:
        prefixes = {**parent.prefixes, **declared}

    vocab = parent.vocab
    vocab_attr = attrs.get("vocab")
    if vocab_attr is not ABSENT:
        # @vocab="" clears the vocabulary
        vocab = ""
        if vocab_attr.strip():
            vocab = resolve_iri(vocab_attr, base) or ""

    language = parent.language
    lang = attrs.get("xml:lang")
    if lang is ABSENT and profile.lang_attribute:
        lang = attrs.get("lang")
    if lang is not ABSENT:
        language = lang.strip()

    return EvaluationContext(base=base, prefixes=prefixes, vocab=vocab, language=language)

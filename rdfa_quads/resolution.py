"""IRI, CURIE and term resolution.

Pure functions of (attribute value, evaluation context). Every failure is
reported as ``None``: an unknown prefix or a bare term without a vocabulary
drops the affected token, never the document.

``terms`` arguments are anything with ``named_node(iri)`` and
``blank_node(label)`` methods (a term factory or the evaluator's
document-scoped wrapper around one).
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING
from urllib.parse import non_hierarchical, urlsplit, uses_netloc, uses_relative

if TYPE_CHECKING:
    from .context import EvaluationContext

logger = logging.getLogger(__name__)

_ABSOLUTE_IRI = re.compile(r"^[a-z][a-z0-9+.\-]*:", re.IGNORECASE)
_SCHEME_NAME = re.compile(r"^[a-z][a-z0-9+.\-]*$", re.IGNORECASE)

# RFC 3986 appendix B: scheme, authority, path, query, fragment
_IRI_PARTS = re.compile(r"^(?:([^:/?#]+):)?(?://([^/?#]*))?([^?#]*)(?:\?([^#]*))?(?:#(.*))?")

# Schemes recognised when an undeclared CURIE prefix might really be an IRI
# scheme whose reference doesn't start with "//" (urn:isbn:..., mailto:...).
# RDFa Core reads any scheme-shaped prefix as an IRI; restricting it to known
# schemes keeps a typo such as datatype="bogus:nope" from becoming a datatype.
_KNOWN_SCHEMES = frozenset(
    s for s in (*uses_netloc, *uses_relative, *non_hierarchical,
                "urn", "tag", "data", "did", "doi", "info", "geo")
    if s
)


def is_absolute_iri(value: str) -> bool:
    """True when ``value`` starts with a URI scheme."""
    return bool(_ABSOLUTE_IRI.match(value))


def looks_like_iri(prefix: str, reference: str) -> bool:
    """Whether an undeclared ``prefix:reference`` should be read as an IRI."""
    if not _SCHEME_NAME.match(prefix):
        return False
    return reference.startswith("//") or prefix.lower() in _KNOWN_SCHEMES


def split_tokens(value) -> list[str]:
    """Whitespace-separated tokens of an attribute value (ABSENT → [])."""
    if not value:
        return []
    return value.split()


def resolve_iri(value, base: str) -> str | None:
    """Resolve ``value`` against ``base``.

    Absolute IRIs come back unchanged and ``_:`` references are refused.
    Without a base, relative references are returned as written.
    """
    if value is None or not isinstance(value, str):
        return None
    value = value.strip()
    if value.startswith("_:"):
        return None
    if is_absolute_iri(value):
        return value
    if not base:
        return value or None
    resolved = _resolve_reference(value, base)
    try:
        # rejects malformed authorities such as an unclosed "[" IPv6 literal
        urlsplit(resolved)
    except ValueError as e:
        logger.debug("Cannot resolve '%s' against '%s': %s", value, base, e)
        return None
    return resolved


def _resolve_reference(reference: str, base: str) -> str:
    """RFC 3986 §5.2.2 reference resolution, for any base scheme."""
    scheme, base_authority, base_path, base_query, _ = _IRI_PARTS.match(base).groups()
    _, authority, path, query, fragment = _IRI_PARTS.match(reference).groups()

    if authority is not None:
        path = remove_dot_segments(path)
    else:
        authority = base_authority
        if path == "":
            path = base_path
            if query is None:
                query = base_query
        else:
            if not path.startswith("/"):
                if base_authority is not None and base_path == "":
                    path = "/" + path
                else:
                    path = base_path[:base_path.rfind("/") + 1] + path
            path = remove_dot_segments(path)

    iri = f"{scheme}:" if scheme else ""
    if authority is not None:
        iri += "//" + authority
    iri += path
    if query is not None:
        iri += "?" + query
    if fragment is not None:
        iri += "#" + fragment
    return iri


def remove_dot_segments(path: str) -> str:
    """Drop ``.`` and ``..`` segments from a merged path (RFC 3986 §5.2.4)."""
    absolute = path.startswith("/")
    segments = path.split("/")
    if absolute:
        segments = segments[1:]
    output: list[str] = []
    for i, segment in enumerate(segments):
        last = i == len(segments) - 1
        if segment in (".", ".."):
            if segment == ".." and output:
                output.pop()
            if last:
                output.append("")
            continue
        output.append(segment)
    result = "/".join(output)
    return "/" + result if absolute else result


def resolve_term(value, context: EvaluationContext) -> str | None:
    """Expand a TERMorCURIEorAbsIRI to an IRI string.

    One layer of safe-CURIE brackets is stripped. ``prefix:reference`` uses the
    in-scope prefix mapping; an undeclared prefix that is really an IRI scheme
    returns the value itself. A bare term is appended to the vocabulary.
    """
    if not value or not isinstance(value, str):
        return None
    value = value.strip()
    if len(value) >= 2 and value.startswith("[") and value.endswith("]"):
        value = value[1:-1].strip()
    if not value:
        return None

    if ":" in value:
        prefix, reference = value.split(":", 1)
        if prefix == "_":
            return None
        namespace = context.prefixes.get(prefix.lower())
        if namespace is not None:
            return namespace + reference
        if looks_like_iri(prefix, reference):
            return value
        logger.debug("Unknown CURIE prefix '%s' in '%s'", prefix, value)
        return None

    if context.vocab:
        return context.vocab + value
    logger.debug("Term '%s' used without a vocabulary", value)
    return None


def resolve_resource_or_iri(value, context: EvaluationContext, terms, allow_terms: bool = True):
    """``_:label`` → blank node; else term/CURIE expansion when allowed, IRI resolution when not.

    A token that fails term expansion is not retried as a relative IRI, so
    ``rel="stylesheet"`` outside a vocabulary yields nothing.
    """
    if not value or not isinstance(value, str):
        return None
    value = value.strip()
    if not value:
        return None
    if value.startswith("_:"):
        return terms.blank_node(value[2:])
    if allow_terms:
        iri = resolve_term(value, context)
    else:
        iri = resolve_iri(value, context.base)
    return terms.named_node(iri) if iri else None


def resolve_safe_curie_or_iri(value, context: EvaluationContext, terms):
    """The @about / @resource rule.

    Empty → the base; ``_:x`` → blank node; ``[curie]`` → CURIE expansion;
    anything else → IRI resolution, never vocabulary expansion.
    """
    if value is None or not isinstance(value, str):
        return None
    value = value.strip()
    if value == "":
        return terms.named_node(context.base) if context.base else None
    if value.startswith("[") and value.endswith("]"):
        inner = value[1:-1].strip()
        if inner.startswith("_:"):
            return terms.blank_node(inner[2:])
        iri = resolve_term(inner, context)
        return terms.named_node(iri) if iri else None
    if value.startswith("_:"):
        return terms.blank_node(value[2:])
    iri = resolve_iri(value, context.base)
    return terms.named_node(iri) if iri else None


def resolve_token_list(value, context: EvaluationContext, terms, predicates: bool = False) -> list:
    """Resolve each token of a space-separated attribute independently.

    Unresolvable tokens are dropped. With ``predicates=True`` blank nodes are
    dropped too, since a predicate must be an IRI.
    """
    resolved = []
    for token in split_tokens(value):
        term = resolve_resource_or_iri(token, context, terms, allow_terms=True)
        if term is None or (predicates and token.startswith("_:")):
            logger.debug("Dropping unresolvable token '%s'", token)
            continue
        resolved.append(term)
    return resolved

"""Parser configuration and host-language profiles.

The initial context of every document is the RDFa default prefix table,
extended by any prefixes passed in the configuration. A profile selects which
host-language features the evaluator honours on top of RDFa Core.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from .terms import TermFactory


# ---------------------------------------------------------------------------
# RDFa initial context: default prefixes
# ---------------------------------------------------------------------------

DEFAULT_PREFIXES: Mapping[str, str] = MappingProxyType({
    "grddl": "http://www.w3.org/2003/g/data-view#",
    "ma": "http://www.w3.org/ns/ma-ont#",
    "owl": "http://www.w3.org/2002/07/owl#",
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "rdfa": "http://www.w3.org/ns/rdfa#",
    "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
    "rif": "http://www.w3.org/2007/rif#",
    "skos": "http://www.w3.org/2004/02/skos/core#",
    "skosxl": "http://www.w3.org/2008/05/skos-xl#",
    "wdr": "http://www.w3.org/2007/05/powder#",
    "void": "http://rdfs.org/ns/void#",
    "xhv": "http://www.w3.org/1999/xhtml/vocab#",
    "xml": "http://www.w3.org/XML/1998/namespace",
    "xsd": "http://www.w3.org/2001/XMLSchema#",
})


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Profile:
    """Host-language behaviour layered over RDFa Core.

    ``base_element``: a ``<base href>`` element resets the document base.
    ``lang_attribute``: plain ``@lang`` sets the language (``xml:lang`` always does).
    ``implicit_datatypes``: element name -> datatype IRI applied to
    ``@property`` literals that carry no explicit ``@datatype``.
    ``datetime_attribute``: elements whose ``@datetime`` stands in for ``@content``.
    ``prefixes``: extra initial-context prefixes, applied over DEFAULT_PREFIXES.
    """
    name: str
    base_element: bool = True
    lang_attribute: bool = True
    implicit_datatypes: Mapping[str, str] = field(default_factory=dict)
    datetime_attribute: frozenset[str] = frozenset()
    prefixes: Mapping[str, str] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"Profile({self.name})"


# Widely used vocabularies from the W3C RDFa 1.1 initial context
WIDELY_USED_PREFIXES: Mapping[str, str] = MappingProxyType({
    "as": "https://www.w3.org/ns/activitystreams#",
    "cc": "http://creativecommons.org/ns#",
    "ctag": "http://commontag.org/ns#",
    "dc": "http://purl.org/dc/terms/",
    "dc11": "http://purl.org/dc/elements/1.1/",
    "dcat": "http://www.w3.org/ns/dcat#",
    "dcterms": "http://purl.org/dc/terms/",
    "foaf": "http://xmlns.com/foaf/0.1/",
    "gr": "http://purl.org/goodrelations/v1#",
    "ical": "http://www.w3.org/2002/12/cal/icaltzd#",
    "og": "http://ogp.me/ns#",
    "org": "http://www.w3.org/ns/org#",
    "prov": "http://www.w3.org/ns/prov#",
    "qb": "http://purl.org/linked-data/cube#",
    "rev": "http://purl.org/stuff/rev#",
    "schema": "http://schema.org/",
    "sioc": "http://rdfs.org/sioc/ns#",
    "vcard": "http://www.w3.org/2006/vcard/ns#",
    "wdrs": "http://www.w3.org/2007/05/powder-s#",
})

HTML_PROFILE = Profile(
    name="html",
    prefixes=WIDELY_USED_PREFIXES,
    implicit_datatypes=MappingProxyType({
        "time": "http://www.w3.org/2001/XMLSchema#dateTime",
    }),
    datetime_attribute=frozenset({"time"}),
)

XML_PROFILE = Profile(
    name="xml",
    base_element=False,
    lang_attribute=False,
)

PROFILES: Mapping[str, Profile] = MappingProxyType({
    HTML_PROFILE.name: HTML_PROFILE,
    XML_PROFILE.name: XML_PROFILE,
})


def get_profile(profile: str | Profile) -> Profile:
    """Look up a profile by name; Profile instances pass through."""
    if isinstance(profile, Profile):
        return profile
    try:
        return PROFILES[profile]
    except KeyError:
        raise ValueError(
            f"Unknown RDFa profile '{profile}' (expected one of {sorted(PROFILES)})"
        ) from None


# ---------------------------------------------------------------------------
# RDFaConfig
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RDFaConfig:
    """Options for one parse.

    ``term_factory`` defaults to ``DefaultTermFactory``; ``prefixes`` are
    merged over the default prefix table before any ``@prefix`` in the
    document is applied.
    """
    base_iri: str = ""
    language: str = ""
    vocab: str = ""
    term_factory: TermFactory | None = None
    initial_profile: str | Profile = "html"
    prefixes: Mapping[str, str] = field(default_factory=dict)

    @property
    def profile(self) -> Profile:
        return get_profile(self.initial_profile)

    def initial_prefixes(self) -> dict[str, str]:
        """Default table, then profile prefixes, then configured prefixes.

        Keys are lower-cased.
        """
        merged = dict(DEFAULT_PREFIXES)
        merged.update(self.profile.prefixes)
        for prefix, iri in self.prefixes.items():
            merged[prefix.lower()] = iri
        return merged

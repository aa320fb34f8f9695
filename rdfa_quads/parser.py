"""RDFaParser — push-style facade over tokenizer, evaluator and sink.

Usage:

    parser = RDFaParser(base_iri="http://example.org/doc")
    parser.on("data", print)
    parser.feed(first_chunk)
    parser.feed(second_chunk)
    parser.finish()
    quads = parser.collected_quads()

or, for a complete document in one string, ``parse_rdfa(html, **options)``.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

from .config import RDFaConfig
from .errors import ParserStateError, TokenizerError
from .evaluator import RDFaEvaluator
from .sink import QuadSink
from .terms import DefaultTermFactory
from .tokenizer import HtmlTokenizer


class RDFaParser:
    """Incremental RDFa parser for one document.

    Accepts either an ``RDFaConfig`` or the same fields as keyword options
    (keywords override the fields of a given config).
    """

    def __init__(self, config: RDFaConfig | None = None, **options):
        if config is None:
            config = RDFaConfig(**options)
        elif options:
            config = replace(config, **options)
        if config.term_factory is None:
            config = replace(config, term_factory=DefaultTermFactory())
        self.config = config
        self.sink = QuadSink(config.term_factory)
        self.evaluator = RDFaEvaluator(config, self.sink)
        self.tokenizer = HtmlTokenizer(self.evaluator)
        self.finished = False

    def on(self, event: str, callback: Callable) -> RDFaParser:
        """Subscribe to ``"data"`` (one quad), ``"error"`` (an RDFaError) or ``"end"``."""
        self.sink.on(event, callback)
        return self

    def feed(self, chunk: str) -> None:
        """Push a chunk of markup. Tags may be split across chunks."""
        if self.finished:
            self.sink.error(ParserStateError("feed() called after finish()"))
            return
        try:
            self.tokenizer.feed(chunk)
        except Exception as e:
            self.sink.error(TokenizerError(e))

    def finish(self, chunk: str | None = None) -> list:
        """Flush the input, close open elements, terminate lists and fire ``end``.

        Calling it again has no effect. Returns the collected quads.
        """
        if self.finished:
            return self.collected_quads()
        if chunk:
            self.feed(chunk)
        try:
            self.tokenizer.close()
        except Exception as e:
            self.sink.error(TokenizerError(e))
        self.evaluator.finish()
        self.finished = True
        self.sink.end()
        return self.collected_quads()

    def collected_quads(self) -> list:
        return list(self.sink.quads)

    @property
    def errors(self) -> list:
        return list(self.sink.errors)


def parse_rdfa(html: str, config: RDFaConfig | None = None, **options) -> list:
    """Parse a complete document and return its quads in emission order."""
    parser = RDFaParser(config, **options)
    parser.feed(html)
    return parser.finish()

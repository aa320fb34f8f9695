"""Exceptions reported on the parser's error channel.

None of these abort an evaluation run: they are handed to ``error``
listeners and the quads emitted so far remain valid.
"""

from __future__ import annotations


class RDFaError(Exception):
    """Base class for errors surfaced by the RDFa parser."""


class TokenizerError(RDFaError):
    """The HTML tokenizer failed on a chunk of input."""

    def __init__(self, cause: BaseException):
        super().__init__(f"tokenizer error: {cause}")
        self.cause = cause


class QuadConstructionError(RDFaError):
    """The term factory refused to build a quad."""

    def __init__(self, cause: BaseException, components: tuple = ()):
        super().__init__(f"could not construct quad: {cause}")
        self.cause = cause
        self.components = components


class ParserStateError(RDFaError):
    """Input arrived after ``finish()`` was called."""

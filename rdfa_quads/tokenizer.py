"""HTML tokenizer — ``html.parser.HTMLParser`` adapted to evaluator events.

The standard library parser already buffers partial tags across ``feed()``
calls, lower-cases tag and attribute names and decodes character references.
This adapter only reshapes its callbacks into the three events the evaluator
consumes:

  open_element(name, attrs)   attrs: AttributeView (absent vs empty kept)
  text(chunk)
  close_element(name)

Void elements (``<br>``, ``<img>``, ``<base>`` ...) never get a close tag in
HTML, so they are opened and closed on the spot.
"""

from __future__ import annotations

import logging
from html.parser import HTMLParser

from .attributes import AttributeView

logger = logging.getLogger(__name__)


VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link",
    "meta", "param", "source", "track", "wbr",
})


class HtmlTokenizer(HTMLParser):
    """Push tokenizer forwarding document events to ``handler``."""

    def __init__(self, handler):
        super().__init__(convert_charrefs=True)
        self.handler = handler

    # --- HTMLParser overrides ---

    def handle_starttag(self, tag, attrs):
        self.handler.open_element(tag, AttributeView(attrs))
        if tag in VOID_ELEMENTS:
            self.handler.close_element(tag)

    def handle_startendtag(self, tag, attrs):
        # <div/> is treated as an empty element, <br/> as the void element it is
        self.handler.open_element(tag, AttributeView(attrs))
        self.handler.close_element(tag)

    def handle_endtag(self, tag):
        if tag in VOID_ELEMENTS:
            logger.debug("Ignoring end tag for void element </%s>", tag)
            return
        self.handler.close_element(tag)

    def handle_data(self, data):
        if data:
            self.handler.text(data)

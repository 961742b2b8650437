# faerber/vector.py
from __future__ import annotations

"""
SVG recolouring: rewrite colour attributes and embedded raster images so a
vector document only uses palette colours.

Exports:
  COLOUR_ATTRIBUTES
  convert_vector(source, metric, palette, workers=1) -> str

The document is streamed through xml.sax (expat) into an XMLGenerator; each
element's attributes are rewritten on the way through. Output is collected in
memory and only returned once the whole document has been read, so a parse
failure anywhere never yields a partial document.
"""

import base64
import binascii
import io
import re
from typing import Dict, Optional
from xml.sax import SAXParseException, handler, make_parser
from xml.sax.saxutils import XMLGenerator
from xml.sax.xmlreader import AttributesImpl

from PIL import ImageColor

from .colour_convert import Lab
from .core_types import rgb_to_hex
from .errors import (
    AttributeParseError,
    DocumentReadError,
    EmptyPaletteError,
    ImageReadError,
    InvalidConversionMethodError,
)
from .image_io import decode_image_rgba, encode_png_rgba
from .matcher import match_color
from .methods import DistanceMetric
from .palette_data import PaletteView
from .pipeline import convert_naive

COLOUR_ATTRIBUTES = frozenset(
    ("fill", "stroke", "stop-color", "flood-color", "lighting-color", "color")
)
HREF_ATTRIBUTES = frozenset(("href", "xlink:href"))

# CSS keywords that name no concrete colour; copied untouched.
_PASSTHROUGH = frozenset(
    ("none", "inherit", "currentcolor", "transparent", "context-fill", "context-stroke")
)

# Prolog pieces SAX reports only in digested form; copied from the source text.
_DECLARATION = re.compile(r"\A\ufeff?(<\?xml\s[^>]*\?>)")
_DOCTYPE = re.compile(r"<!DOCTYPE\s[^\[>]*(?:\[.*?\]\s*)?>", re.DOTALL)


class _Recolourer:
    """Attribute-level rewriting shared by the SAX handler."""

    def __init__(
        self, metric: DistanceMetric, palette: PaletteView, workers: int
    ) -> None:
        self.metric = metric
        self.palette = palette
        self.workers = workers
        self._cache: Dict[str, str] = {}

    def colour(self, name: str, value: str) -> str:
        text = value.strip()
        if not text or text.lower() in _PASSTHROUGH or text.lower().startswith("url("):
            return value
        hit = self._cache.get(text)
        if hit is not None:
            return hit
        try:
            rgb = ImageColor.getrgb(text)
        except ValueError as e:
            raise AttributeParseError(name, value, str(e)) from e
        lab = Lab.from_rgba(rgb) if len(rgb) == 4 else Lab.from_rgb(rgb)
        out = rgb_to_hex(match_color(self.palette, self.metric, lab))
        self._cache[text] = out
        return out

    def style(self, value: str) -> str:
        decls = value.split(";")
        for i, decl in enumerate(decls):
            key, sep, val = decl.partition(":")
            if sep and key.strip().lower() in COLOUR_ATTRIBUTES:
                decls[i] = f"{key}:{self.colour(key.strip(), val)}"
        return ";".join(decls)

    def href(self, name: str, value: str) -> str:
        if not value[:11].lower() == "data:image/":
            return value
        header, sep, payload = value.partition(",")
        if not sep or ";base64" not in header.lower():
            raise AttributeParseError(name, header, "embedded image is not base64")
        try:
            raw = base64.b64decode(payload.strip(), validate=False)
            rgba = decode_image_rgba(raw, source=name)
        except (binascii.Error, ImageReadError) as e:
            raise AttributeParseError(name, header, str(e)) from e
        mapped = convert_naive(rgba, self.metric, self.palette, self.workers)
        encoded = base64.b64encode(encode_png_rgba(mapped)).decode("ascii")
        return "data:image/png;base64," + encoded

    def attribute(self, name: str, value: str) -> str:
        key = name.lower()
        if key in COLOUR_ATTRIBUTES:
            return self.colour(name, value)
        if key == "style":
            return self.style(value)
        if key in HREF_ATTRIBUTES:
            return self.href(name, value)
        return value


class _RecolourWriter(XMLGenerator):
    """
    XMLGenerator that rewrites attributes and keeps the prolog and comments.

    The XML declaration and DOCTYPE are written exactly as the source had
    them (or not at all when it had none).
    """

    def __init__(
        self,
        out: io.StringIO,
        recolour: _Recolourer,
        declaration: Optional[str],
        doctype: Optional[str],
    ) -> None:
        super().__init__(out, encoding="utf-8", short_empty_elements=True)
        self._recolour = recolour
        self._declaration = declaration
        self._doctype = doctype
        self._in_dtd = False

    def _raw(self, text: str) -> None:
        # XMLGenerator has no public way to emit markup it does not build
        # itself; these two CPython internals are only touched here.
        self._finish_pending_start_element()
        self._write(text)

    def startDocument(self):
        if self._declaration is not None:
            self._raw(self._declaration + "\n")

    def startElement(self, name, attrs):
        rewritten = {k: self._recolour.attribute(k, v) for k, v in attrs.items()}
        super().startElement(name, AttributesImpl(rewritten))

    # LexicalHandler

    def comment(self, content):
        # comments inside an internal subset are already part of the DOCTYPE
        if not self._in_dtd:
            self._raw(f"<!--{content}-->")

    def startDTD(self, name, public_id, system_id):
        self._in_dtd = True
        doctype = self._doctype or _format_doctype(name, public_id, system_id)
        self._raw(doctype + "\n")

    def endDTD(self):
        self._in_dtd = False

    def startCDATA(self):
        pass

    def endCDATA(self):
        pass


def _format_doctype(
    name: str, public_id: Optional[str], system_id: Optional[str]
) -> str:
    if public_id:
        return f'<!DOCTYPE {name} PUBLIC "{public_id}" "{system_id or ""}">'
    if system_id:
        return f'<!DOCTYPE {name} SYSTEM "{system_id}">'
    return f"<!DOCTYPE {name}>"


def convert_vector(
    source: str,
    metric: DistanceMetric,
    palette: PaletteView,
    workers: int = 1,
) -> str:
    """
    Recolour an SVG document.

    Args:
      source : SVG text
      metric : DistanceMetric used for attribute colours and embedded images
      palette: PaletteView of enabled entries
      workers: thread count passed to embedded-image conversion
    Returns:
      the rewritten document text
    Raises:
      AttributeParseError on an unparseable colour or embedded image,
      DocumentReadError on malformed XML.
    """
    if not isinstance(metric, DistanceMetric):
        raise InvalidConversionMethodError(metric, expected="distance metric")
    if len(palette) == 0:
        raise EmptyPaletteError()

    declaration = _DECLARATION.match(source)
    doctype = _DOCTYPE.search(source)
    out = io.StringIO()
    writer = _RecolourWriter(
        out,
        _Recolourer(metric, palette, workers),
        declaration.group(1) if declaration else None,
        doctype.group(0) if doctype else None,
    )

    parser = make_parser()
    parser.setFeature(handler.feature_namespaces, False)
    parser.setFeature(handler.feature_external_ges, False)
    parser.setContentHandler(writer)
    parser.setProperty(handler.property_lexical_handler, writer)
    try:
        parser.parse(io.BytesIO(source.encode("utf-8")))
    except SAXParseException as e:
        raise DocumentReadError(str(e)) from e
    return out.getvalue()


__all__ = ["COLOUR_ATTRIBUTES", "convert_vector"]

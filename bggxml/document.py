# bggxml/document.py
from __future__ import annotations
from html.entities import name2codepoint
from typing import Iterator, List, Optional
import logging
import re

from lxml import etree

from .exceptions import BGGParseError, api_error_from_messages

log = logging.getLogger(__name__)

# Entities every XML parser understands; everything else from HTML has to be rewritten.
_XML_ENTITIES = {"amp", "lt", "gt", "quot", "apos"}
_NAMED_ENTITY = re.compile(rb"&([A-Za-z][A-Za-z0-9]*);")


def _replace_html_entity(match: "re.Match[bytes]") -> bytes:
    name = match.group(1).decode("ascii")
    if name in _XML_ENTITIES or name not in name2codepoint:
        return match.group(0)
    return b"&#%d;" % name2codepoint[name]


def _fragment_at(content: bytes, line: Optional[int], width: int = 80) -> Optional[str]:
    """Returns the source line an XML syntax error points at, for diagnostics."""
    if not line:
        return None
    lines = content.splitlines()
    if line > len(lines):
        return None
    return lines[line - 1].decode("utf-8", errors="replace").strip()[:width]


class XmlNode:
    """A read-only view over a parsed XML element."""

    def __init__(self, element: etree._Element):
        self._element = element

    @property
    def tag(self) -> str:
        return self._element.tag

    def children(self, tag: str) -> List["XmlNode"]:
        """All direct children named ``tag``, in document order."""
        return [XmlNode(el) for el in self._element.findall(tag)]

    def child(self, tag: str) -> Optional["XmlNode"]:
        el = self._element.find(tag)
        return XmlNode(el) if el is not None else None

    def attr(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self._element.get(name, default)

    def text(self) -> str:
        """The element's own text, stripped. Empty string when there is none."""
        return (self._element.text or "").strip()

    def __iter__(self) -> Iterator["XmlNode"]:
        for el in self._element:
            if isinstance(el.tag, str):
                yield XmlNode(el)

    def __repr__(self):
        return f"XmlNode(tag='{self.tag}')"


class XmlDocument:
    """A parsed BGG response whose root element has been checked."""

    def __init__(self, root: XmlNode):
        self.root = root

    @classmethod
    def parse(cls, content: bytes, root_tag: str) -> "XmlDocument":
        """
        Parses a raw response body.

        Args:
            content (bytes): The body as returned by the transport.
            root_tag (str): The root element the endpoint is documented to return.

        Raises:
            BGGParseError: Empty body, malformed XML, or an unexpected root element.
            BGGAPIError: The body is one of BGG's <errors> documents.
        """
        if not content or not content.strip():
            raise BGGParseError("BGG API returned an empty response.")

        content = _NAMED_ENTITY.sub(_replace_html_entity, content)
        try:
            parser = etree.XMLParser(resolve_entities=False, no_network=True, remove_comments=True)
            element = etree.fromstring(content, parser=parser)
        except etree.XMLSyntaxError as e:
            line = e.position[0] if e.position else e.lineno
            raise BGGParseError(
                f"Failed to parse XML response from BGG API: {e}",
                fragment=_fragment_at(content, line),
            ) from e

        root = XmlNode(element)
        if root.tag in ("errors", "error"):
            messages = [m.text() for m in _error_messages(root)]
            log.debug(f"BGG API returned <{root.tag}>: {messages}")
            raise api_error_from_messages(messages)

        if root.tag != root_tag:
            raise BGGParseError(
                f"Expected <{root_tag}> root element but got <{root.tag}>",
                fragment=etree.tostring(element)[:80].decode("utf-8", errors="replace"),
            )
        return cls(root)


def _error_messages(root: XmlNode) -> List[XmlNode]:
    # <errors><error><message/></error></errors> or a bare <error><message/></error>
    if root.tag == "error":
        return root.children("message")
    return [m for error in root.children("error") for m in error.children("message")]

import pytest

from bggxml.document import XmlDocument
from bggxml.exceptions import (
    BGGAPIError,
    BGGParseError,
    InvalidCollectionItemTypeError,
    UnknownUsernameError,
)


def test_children_in_document_order():
    document = XmlDocument.parse(b'<items><item id="2"/><other/><item id="1"/></items>', "items")
    assert [item.attr("id") for item in document.root.children("item")] == ["2", "1"]
    assert [child.tag for child in document.root] == ["item", "other", "item"]


def test_attr_and_text():
    document = XmlDocument.parse(b"<items><name>  Catan \n</name><empty/></items>", "items")
    assert document.root.child("name").text() == "Catan"
    assert document.root.child("empty").text() == ""
    assert document.root.child("missing") is None
    assert document.root.attr("nope") is None
    assert document.root.attr("nope", "default") == "default"


def test_html_entities_are_accepted():
    document = XmlDocument.parse(b"<items><d>a &mdash; b &amp; c&nbsp;d</d></items>", "items")
    assert document.root.child("d").text() == "a — b & c\u00a0d"


def test_comments_are_dropped():
    document = XmlDocument.parse(b"<items><!-- note --><item/></items>", "items")
    assert [child.tag for child in document.root] == ["item"]


def test_empty_body():
    with pytest.raises(BGGParseError):
        XmlDocument.parse(b"  ", "items")


def test_malformed_xml_reports_fragment():
    with pytest.raises(BGGParseError) as exc_info:
        XmlDocument.parse(b"<items>\n<item id='1'>\n<name>broken</items>", "items")
    assert exc_info.value.fragment is not None


def test_unexpected_root():
    with pytest.raises(BGGParseError):
        XmlDocument.parse(b"<html><body>Oops</body></html>", "items")


def test_unknown_username_error():
    body = b"<errors><error><message>Invalid username specified</message></error></errors>"
    with pytest.raises(UnknownUsernameError):
        XmlDocument.parse(body, "items")


def test_invalid_subtype_error():
    body = b"<errors><error><message>Invalid collection subtype</message></error></errors>"
    with pytest.raises(InvalidCollectionItemTypeError):
        XmlDocument.parse(body, "items")


def test_other_api_errors():
    body = b"<error><message>Rate limit exceeded.</message></error>"
    with pytest.raises(BGGAPIError) as exc_info:
        XmlDocument.parse(body, "items")
    assert exc_info.value.messages == ["Rate limit exceeded."]

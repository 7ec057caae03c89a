"""Render a Feed as an Atom 1.0 document."""

from datetime import datetime, timezone
from xml.etree import ElementTree as ET

from feedmerge.models import Feed

ATOM_NS = "http://www.w3.org/2005/Atom"
XML_DECLARATION = '<?xml version="1.0" encoding="utf-8"?>\n'


def _text(parent: ET.Element, tag: str, value: str) -> ET.Element:
    el = ET.SubElement(parent, tag)
    el.text = value
    return el


def to_atom_xml(feed: Feed, updated: datetime | None = None) -> str:
    """Serialize ``feed`` to an indented Atom XML string.

    ``updated`` defaults to the current time, mirroring when the merged
    document was produced.
    """
    updated = updated or datetime.now(timezone.utc)

    root = ET.Element("feed", xmlns=ATOM_NS)
    _text(root, "title", feed.title)
    _text(root, "id", feed.id)
    _text(root, "updated", updated.isoformat())
    ET.SubElement(root, "link", rel="self", type="application/atom+xml", href=feed.link)
    author = ET.SubElement(root, "author")
    _text(author, "name", feed.author_name)

    for entry in feed.entries:
        item = ET.SubElement(root, "entry")
        _text(item, "id", entry.id)
        _text(item, "title", entry.title)
        ET.SubElement(item, "link", rel="alternate", href=entry.link)
        _text(item, "updated", entry.updated.isoformat())
        if entry.summary:
            _text(item, "summary", entry.summary)

    ET.indent(root)
    return XML_DECLARATION + ET.tostring(root, encoding="unicode")

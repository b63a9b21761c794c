"""Reading and writing of workbook package parts."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Union
from xml.parsers import expat

RELATIONSHIPS_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
_REL_BASE = "http://schemas.openxmlformats.org/officeDocument/2006/relationships/"
WORKSHEET_REL_TYPE = _REL_BASE + "worksheet"
SHARED_STRINGS_REL_TYPE = _REL_BASE + "sharedStrings"
THEME_REL_TYPE = _REL_BASE + "theme"
STYLES_REL_TYPE = _REL_BASE + "styles"
XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
SHEET_ENDING = b"</sheetData></worksheet>"


class XLSXReaderError(Exception):
    """Raised for otherwise undefined errors while reading a workbook."""


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


class WorkbookRels(dict):
    """Map of relationship ids such as "rId1" to worksheet targets."""

    def to_xml(self) -> str:
        """Serialise as workbook.xml.rels, adding shared strings, theme and styles."""
        count = len(self)
        slots: list = [None] * (count + 3)
        for rel_id, target in self.items():
            try:
                index = int(rel_id[3:])
            except ValueError:
                raise ValueError(f"invalid relationship id {rel_id!r}") from None
            if not 1 <= index <= len(slots):
                raise ValueError(f"relationship id {rel_id!r} out of range")
            slots[index - 1] = (rel_id, target, WORKSHEET_REL_TYPE)
        extras = (
            ("sharedStrings.xml", SHARED_STRINGS_REL_TYPE),
            ("theme/theme1.xml", THEME_REL_TYPE),
            ("styles.xml", STYLES_REL_TYPE),
        )
        for offset, (target, rel_type) in enumerate(extras, start=1):
            slots[count + offset - 1] = (f"rId{count + offset}", target, rel_type)

        root = ET.Element("Relationships", {"xmlns": RELATIONSHIPS_NS})
        for slot in slots:
            rel_id, target, rel_type = slot if slot is not None else ("", "", "")
            ET.SubElement(
                root, "Relationship", {"Id": rel_id, "Target": target, "Type": rel_type}
            )
        body = ET.tostring(root, encoding="unicode", short_empty_elements=False)
        return XML_HEADER + body


def read_workbook_rels(data: Union[str, bytes]) -> WorkbookRels:
    """Map worksheet relationship ids to worksheet file names without ".xml"."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    try:
        root = ET.fromstring(data.lstrip())
    except ET.ParseError as exc:
        raise XLSXReaderError(f"read_workbook_rels: {exc}") from exc
    rels = WorkbookRels()
    for rel in root:
        if _local(rel.tag) != "Relationship":
            continue
        target = rel.get("Target", "")
        if target.endswith(".xml") and rel.get("Type") == WORKSHEET_REL_TYPE:
            filename = target.rpartition("/")[2]
            rels[rel.get("Id", "")] = filename.replace(".xml", "", 1)
    return rels


class _LimitReached(Exception):
    def __init__(self, offset: int) -> None:
        super().__init__(offset)
        self.offset = offset


def _tag_end(data: bytes, start: int) -> int:
    quote = None
    for index, byte in enumerate(data[start:], start):
        char = chr(byte)
        if quote is not None:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == ">":
            return index + 1
    return len(data)


def truncate_sheet_xml(data: Union[str, bytes], row_limit: int) -> bytes:
    """Cut a worksheet after ``row_limit`` rows and close it off.

    Everything after the last kept row is dropped; if the sheet has no more
    rows than the limit it is returned unchanged.
    """
    if isinstance(data, str):
        data = data.encode("utf-8")
    if not data.strip():
        return data
    parser = expat.ParserCreate(namespace_separator=" ")
    row_count = 0

    def on_end(name: str) -> None:
        nonlocal row_count
        if name.rsplit(" ", 1)[-1] == "row":
            row_count += 1
            if row_count >= row_limit:
                raise _LimitReached(_tag_end(data, parser.CurrentByteIndex))

    parser.EndElementHandler = on_end
    try:
        parser.Parse(data, True)
    except _LimitReached as stop:
        return data[: stop.offset] + SHEET_ENDING
    except expat.ExpatError as exc:
        raise XLSXReaderError(f"truncate_sheet_xml: {exc}") from exc
    return data
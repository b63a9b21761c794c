"""The shared string table of a workbook."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from .richtext import (
    RichTextRun,
    XmlRun,
    rich_text_to_plain_text,
    rich_text_to_xml,
    xml_to_rich_text,
)

SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>\n'
_XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


@dataclass
class _Entry:
    plain_text: str = ""
    rich_text: Optional[list[RichTextRun]] = None


class RefTable:
    """Strings and rich texts referred to by numeric index from worksheet cells.

    When ``is_write`` is true, adding a value that is already present returns
    the existing index instead of appending a duplicate.
    """

    def __init__(self, is_write: bool = False) -> None:
        self.is_write = is_write
        self._entries: list[_Entry] = []
        self._known_strings: dict[str, int] = {}
        self._known_rich_texts: dict[str, list[int]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def add_string(self, text: str) -> int:
        """Add a plain string and return its index."""
        if self.is_write and text in self._known_strings:
            return self._known_strings[text]
        self._entries.append(_Entry(plain_text=text))
        index = len(self._entries) - 1
        self._known_strings[text] = index
        return index

    def add_rich_text(self, runs: Iterable[RichTextRun]) -> int:
        """Add a rich text and return its index."""
        runs = list(runs)
        plain = rich_text_to_plain_text(runs)
        if self.is_write:
            for index in self._known_rich_texts.get(plain, []):
                if self._entries[index].rich_text == runs:
                    return index
        self._entries.append(_Entry(rich_text=runs))
        index = len(self._entries) - 1
        self._known_rich_texts.setdefault(plain, []).append(index)
        return index

    def resolve_shared_string(
        self, index: int
    ) -> tuple[str, Optional[list[RichTextRun]]]:
        """Return (plain_text, rich_text) for an index.

        For a rich text entry the plain text is empty; for a plain entry the
        rich text is None.
        """
        if index < 0 or index >= len(self._entries):
            raise IndexError(f"shared string index {index} out of range")
        entry = self._entries[index]
        if entry.rich_text is not None:
            return "", entry.rich_text
        return entry.plain_text, None

    def to_sst_xml(self) -> str:
        """Serialise the table as a sharedStrings.xml document."""
        count = str(len(self._entries))
        root = ET.Element(
            "sst", {"xmlns": SPREADSHEET_NS, "count": count, "uniqueCount": count}
        )
        for entry in self._entries:
            si = ET.SubElement(root, "si")
            if entry.rich_text is not None:
                for xml_run in rich_text_to_xml(entry.rich_text):
                    si.append(xml_run.to_element())
            else:
                t = ET.SubElement(si, "t")
                t.text = entry.plain_text
                if entry.plain_text != entry.plain_text.strip():
                    t.set(_XML_SPACE, "preserve")
        body = ET.tostring(root, encoding="unicode", short_empty_elements=False)
        return XML_HEADER + body

    @classmethod
    def from_sst_xml(cls, data: Union[str, bytes]) -> "RefTable":
        """Build a reading table from the contents of sharedStrings.xml."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        try:
            root = ET.fromstring(data.lstrip())
        except ET.ParseError as exc:
            raise ValueError(f"invalid shared strings XML: {exc}") from exc
        table = cls(is_write=False)
        for si in root:
            if _local(si.tag) != "si":
                continue
            runs = [XmlRun.from_element(child) for child in si if _local(child.tag) == "r"]
            if runs:
                table.add_rich_text(xml_to_rich_text(runs))
                continue
            text = ""
            for child in si:
                if _local(child.tag) == "t":
                    text = child.text or ""
                    break
            table.add_string(text)
        return table
"""Rich text runs and their XML run representation."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Iterable, Optional, Union

_XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"


class RichTextFontFamily(IntEnum):
    UNSPECIFIED = -1
    NOT_APPLICABLE = 0
    ROMAN = 1
    SWISS = 2
    MODERN = 3
    SCRIPT = 4
    DECORATIVE = 5


class RichTextCharset(IntEnum):
    UNSPECIFIED = -1
    ANSI = 0
    DEFAULT = 1
    SYMBOL = 2
    MAC = 77
    SHIFT_JIS = 128
    HANGUL = 129
    JOHAB = 130
    GB2312 = 134
    BIG5 = 136
    GREEK = 161
    TURKISH = 162
    VIETNAMESE = 163
    HEBREW = 177
    ARABIC = 178
    BALTIC = 186
    RUSSIAN = 204
    THAI = 222
    EAST_EUROPE = 238
    OEM = 255


class RichTextVertAlign(str, Enum):
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"


class RichTextUnderline(str, Enum):
    SINGLE = "single"
    DOUBLE = "double"


def _coerce(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        return value


def _plain(value):
    return value.value if isinstance(value, Enum) else value


def _format_float(value: float) -> str:
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


@dataclass(frozen=True)
class RichTextColor:
    """A text colour given either as ARGB hex or as a theme colour index."""

    rgb: Optional[str] = None
    theme: Optional[int] = None
    tint: Optional[float] = None

    @classmethod
    def from_argb(cls, alpha: int, red: int, green: int, blue: int) -> "RichTextColor":
        """Build a colour from ARGB components in the range 0 to 255."""
        return cls(rgb=f"{alpha:02X}{red:02X}{green:02X}{blue:02X}")

    @classmethod
    def from_theme_color(cls, theme_color: int) -> "RichTextColor":
        """Build a colour from a zero based theme colour index."""
        return cls(theme=theme_color)


@dataclass
class RichTextFont:
    """Font settings for a run; an empty name means size, family and charset are ignored."""

    name: str = ""
    size: float = 0.0
    family: Union[RichTextFontFamily, int] = RichTextFontFamily.NOT_APPLICABLE
    charset: Union[RichTextCharset, int] = RichTextCharset.ANSI
    color: Optional[RichTextColor] = None
    bold: bool = False
    italic: bool = False
    strike: bool = False
    vert_align: Union[RichTextVertAlign, str] = ""
    underline: Union[RichTextUnderline, str] = ""


@dataclass
class RichTextRun:
    """A run of text with an optional font."""

    font: Optional[RichTextFont] = None
    text: str = ""


@dataclass
class RunProperties:
    """The <rPr> element of a run."""

    rfont: Optional[str] = None
    charset: Optional[int] = None
    family: Optional[int] = None
    b: bool = False
    i: bool = False
    strike: bool = False
    outline: bool = False
    shadow: bool = False
    condense: bool = False
    extend: bool = False
    color: Optional[RichTextColor] = None
    sz: Optional[float] = None
    u: Optional[str] = None
    vert_align: Optional[str] = None
    scheme: Optional[str] = None

    def to_element(self) -> ET.Element:
        rpr = ET.Element("rPr")
        if self.rfont is not None:
            ET.SubElement(rpr, "rFont", val=self.rfont)
        if self.charset is not None:
            ET.SubElement(rpr, "charset", val=str(int(self.charset)))
        if self.family is not None:
            ET.SubElement(rpr, "family", val=str(int(self.family)))
        for tag in ("b", "i", "strike", "outline", "shadow", "condense", "extend"):
            if getattr(self, tag):
                ET.SubElement(rpr, tag)
        if self.color is not None:
            attrs = {}
            if self.color.rgb is not None:
                attrs["rgb"] = self.color.rgb
            if self.color.theme is not None:
                attrs["theme"] = str(self.color.theme)
            if self.color.tint is not None:
                attrs["tint"] = _format_float(self.color.tint)
            ET.SubElement(rpr, "color", attrs)
        if self.sz is not None:
            ET.SubElement(rpr, "sz", val=_format_float(self.sz))
        if self.u is not None:
            ET.SubElement(rpr, "u", val=self.u)
        if self.vert_align is not None:
            ET.SubElement(rpr, "vertAlign", val=self.vert_align)
        if self.scheme is not None:
            ET.SubElement(rpr, "scheme", val=self.scheme)
        return rpr

    @classmethod
    def from_element(cls, element: ET.Element) -> "RunProperties":
        props = cls()
        for child in element:
            tag = _local(child.tag)
            val = child.get("val")
            if tag == "rFont":
                props.rfont = val or ""
            elif tag == "charset":
                props.charset = int(val or 0)
            elif tag == "family":
                props.family = int(val or 0)
            elif tag in ("b", "i", "strike", "outline", "shadow", "condense", "extend"):
                setattr(props, tag, val not in ("0", "false"))
            elif tag == "color":
                theme = child.get("theme")
                tint = child.get("tint")
                props.color = RichTextColor(
                    rgb=child.get("rgb"),
                    theme=int(theme) if theme is not None else None,
                    tint=float(tint) if tint is not None else None,
                )
            elif tag == "sz":
                props.sz = float(val or 0)
            elif tag == "u":
                props.u = val if val is not None else "single"
            elif tag == "vertAlign":
                props.vert_align = val or ""
            elif tag == "scheme":
                props.scheme = val or ""
        return props


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


@dataclass
class XmlRun:
    """The <r> element of a rich text string."""

    text: str = ""
    properties: Optional[RunProperties] = field(default=None)

    def to_element(self) -> ET.Element:
        """Build the <r> element for this run."""
        run = ET.Element("r")
        if self.properties is not None:
            run.append(self.properties.to_element())
        t = ET.SubElement(run, "t")
        t.text = self.text
        if self.text != self.text.strip():
            t.set(_XML_SPACE, "preserve")
        return run

    @classmethod
    def from_element(cls, element: ET.Element) -> "XmlRun":
        """Read an <r> element, namespaced or not."""
        run = cls()
        for child in element:
            tag = _local(child.tag)
            if tag == "rPr":
                run.properties = RunProperties.from_element(child)
            elif tag == "t":
                run.text = child.text or ""
        return run


def rich_text_to_xml(runs: Iterable[RichTextRun]) -> list[XmlRun]:
    """Convert rich text runs to their XML run form."""
    result = []
    for run in runs:
        xml_run = XmlRun(text=run.text)
        font = run.font
        if font is not None:
            props = RunProperties()
            if font.name:
                props.rfont = font.name
            if font.size > 0.0:
                props.sz = font.size
            if font.family != RichTextFontFamily.UNSPECIFIED:
                props.family = int(font.family)
            if font.charset != RichTextCharset.UNSPECIFIED:
                props.charset = int(font.charset)
            if font.color is not None:
                props.color = font.color
            props.b = font.bold
            props.i = font.italic
            props.strike = font.strike
            if font.vert_align:
                props.vert_align = _plain(font.vert_align)
            if font.underline:
                props.u = _plain(font.underline)
            xml_run.properties = props
        result.append(xml_run)
    return result


def xml_to_rich_text(runs: Iterable[XmlRun]) -> list[RichTextRun]:
    """Convert XML runs to rich text runs."""
    result = []
    for xml_run in runs:
        run = RichTextRun(text=xml_run.text)
        props = xml_run.properties
        if props is not None:
            run.font = RichTextFont(
                name=props.rfont if props.rfont is not None else "",
                size=props.sz if props.sz is not None else 0.0,
                family=(
                    _coerce(RichTextFontFamily, props.family)
                    if props.family is not None
                    else RichTextFontFamily.UNSPECIFIED
                ),
                charset=(
                    _coerce(RichTextCharset, props.charset)
                    if props.charset is not None
                    else RichTextCharset.UNSPECIFIED
                ),
                color=props.color,
                bold=props.b,
                italic=props.i,
                strike=props.strike,
                vert_align=(
                    _coerce(RichTextVertAlign, props.vert_align)
                    if props.vert_align is not None
                    else ""
                ),
                underline=(
                    _coerce(RichTextUnderline, props.u) if props.u is not None else ""
                ),
            )
        result.append(run)
    return result


def rich_text_to_plain_text(runs: Iterable[RichTextRun]) -> str:
    """Concatenate the text of all runs."""
    return "".join(run.text for run in runs)
# sheetgrid

Building blocks for handling XLSX spreadsheet data in pure Python, using only
the standard library.

## Modules

- `sheetgrid.refs` – cell references and formulas. Convert between `"B3"`-style
  cell IDs and zero-based `(x, y)` coordinates (`get_coords_from_cell_id`,
  `get_cell_id_from_coords`, `get_cell_id_from_coords_with_fixed`), column
  letters and indexes (`col_letters_to_index`, `col_index_to_letters`), parse
  ranges and dimension references (`get_range_from_string`,
  `get_bounds_from_dimension_ref`, `calculate_bounds`), shift a reference while
  keeping `$`-fixed parts (`shift_cell`), and expand shared formulas for a cell
  (`formula_for_cell` with `Formula` and `SharedFormula`). Bad references raise
  `CellRefError`, a `ValueError`.
- `sheetgrid.richtext` – `RichTextRun`, `RichTextFont`, `RichTextColor` and the
  enums `RichTextFontFamily`, `RichTextCharset`, `RichTextVertAlign`,
  `RichTextUnderline`. `rich_text_to_xml` and `xml_to_rich_text` convert to and
  from `XmlRun`/`RunProperties`, which build and read `<r>` / `<rPr>` elements
  (`XmlRun.to_element`, `XmlRun.from_element`). `rich_text_to_plain_text` joins
  the text of runs.
- `sheetgrid.reftable` – `RefTable`, the shared string table. It reads
  `sharedStrings.xml` (`RefTable.from_sst_xml`) and writes it
  (`RefTable.to_sst_xml`). With `is_write=True`, adding a string or rich text
  that is already present returns its existing index.
- `sheetgrid.parts` – `WorkbookRels`, a dict of relationship ids to worksheet
  targets, serialised by `WorkbookRels.to_xml` with shared strings, theme and
  styles relationships appended; `read_workbook_rels` reads worksheet
  relationships from `workbook.xml.rels`; `truncate_sheet_xml` cuts a worksheet
  after a number of rows. Unreadable XML raises `XLSXReaderError`.
- `sheetgrid.rows` – `Row`, `Cell`, `SheetState` and `MemoryCellStore`, which
  keeps rows in memory under keys such as `"Sheet1:000000"`. A missing key
  raises `RowNotFoundError`.

## Installation

```
pip install sheetgrid
```

## Examples

Cell references:

```python
from sheetgrid.refs import (
    col_letters_to_index, col_index_to_letters,
    get_coords_from_cell_id, get_cell_id_from_coords, shift_cell,
)

col_letters_to_index("AMI")      # 1022
col_index_to_letters(26)         # "AA"
get_coords_from_cell_id("A3")    # (0, 2)
get_cell_id_from_coords(2, 2)    # "C3"
shift_cell("$A1", 1, 1)          # "$A2"
```

Shared formulas:

```python
from sheetgrid.refs import Formula, formula_for_cell

shared = {}
formula_for_cell("A2", Formula("2*A1", "shared", "A2:C2", 0), shared)   # "2*A1"
formula_for_cell("B2", Formula(type="shared", si=0), shared)            # "2*B1"
```

Shared strings:

```python
from sheetgrid.reftable import RefTable

table = RefTable()
index = table.add_string("Foo")
table.resolve_shared_string(index)   # ("Foo", None)
xml_text = table.to_sst_xml()        # a str starting with the XML declaration
same = RefTable.from_sst_xml(xml_text)
len(same)                            # 1
```

Rich text:

```python
from sheetgrid.richtext import (
    RichTextColor, RichTextFont, RichTextRun, rich_text_to_xml, rich_text_to_plain_text,
)

runs = [
    RichTextRun(text="Bold", font=RichTextFont(bold=True, color=RichTextColor.from_argb(255, 0, 0, 0))),
    RichTextRun(text=" plain"),
]
rich_text_to_plain_text(runs)   # "Bold plain"
xml_runs = rich_text_to_xml(runs)
xml_runs[0].properties.color.rgb   # "FF000000"
```

Rows in memory:

```python
from sheetgrid.rows import MemoryCellStore, SheetState

sheet = SheetState(name="Sheet1")
with MemoryCellStore() as store:
    row = store.make_row(sheet)
    row.add_cell().value = "foo"
    store.write_row(row)
    store.read_row("Sheet1:000000") is row   # True
    [c.value for c in row.iter_cells(skip_empty=True)]   # ["foo"]
```

## What it does not do

`sheetgrid` works on the pieces of a workbook, not on whole files. It does not
open or save `.xlsx` archives, has no workbook or sheet objects beyond
`SheetState`, does not read styles, themes, hyperlinks or number formats, and
does not format cell values. It provides no command-line tool.

## Running the tests

```
pip install -e ".[test]"
pytest
```
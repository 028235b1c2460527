"""CSV and XLSX structure extraction.

Both paths report ``headers`` as the first parsed row and ``column_count`` as
the number of distinct column positions seen across every parsed row.
"""

import html
import re
import zipfile

from metadata_ingest.extractors.exceptions import ArchiveEntryMissingError
from metadata_ingest.extractors.models import SpreadsheetContent
from metadata_ingest.extractors.ooxml import open_archive, read_entry, read_optional_entry
from metadata_ingest.logging.logger import Log

SAMPLE_ROWS = 5

SHARED_STRINGS_ENTRY = "xl/sharedStrings.xml"
DEFAULT_SHEET_ENTRY = "xl/worksheets/sheet1.xml"

_SHEET_ENTRY_RE = re.compile(r"^xl/worksheets/sheet(\d+)\.xml$")
_SHARED_ITEM_RE = re.compile(r"<si(?:\s[^>]*)?>(.*?)</si>", re.DOTALL)
_TEXT_RUN_RE = re.compile(r"<t(?:\s[^>]*)?>([^<]*)</t>")
_CELL_RE = re.compile(r"<c\b([^>]*?)(?:/>|>(.*?)</c>)", re.DOTALL)
_CELL_REF_RE = re.compile(r'\br="([A-Z]+\d+)"')
_CELL_TYPE_RE = re.compile(r'\bt="(\w+)"')
_VALUE_RE = re.compile(r"<v(?:\s[^>]*)?>([^<]*)</v>")


def split_csv_line(line: str) -> list[str]:
    """Split one comma-delimited line, honouring double quotes and ``""`` escapes."""
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    fields.append("".join(current).strip())
    return fields


def parse_csv(text: str) -> SpreadsheetContent:
    lines = [line.rstrip("\r") for line in text.split("\n")]
    rows = [split_csv_line(line) for line in lines if line.strip()]
    if not rows:
        return SpreadsheetContent()

    column_count = max(len(row) for row in rows)
    Log.info(f"CSV: {len(rows)} rows, {column_count} columns")
    return SpreadsheetContent(
        headers=rows[0],
        first_rows=rows[1 : 1 + SAMPLE_ROWS],
        row_count=len(rows) - 1,
        column_count=column_count,
    )


def column_index(letters: str) -> int:
    """'A' -> 1, 'Z' -> 26, 'AA' -> 27."""
    index = 0
    for letter in letters:
        index = index * 26 + (ord(letter) - ord("A") + 1)
    return index


def parse_cell_reference(reference: str) -> tuple[int, int]:
    """'C12' -> (12, 3) as (row, column)."""
    match = re.fullmatch(r"([A-Z]+)(\d+)", reference)
    if match is None:
        raise ValueError(f"Invalid cell reference: {reference!r}")
    return int(match.group(2)), column_index(match.group(1))


def parse_shared_strings(xml: str) -> list[str]:
    return [
        html.unescape("".join(_TEXT_RUN_RE.findall(item)))
        for item in _SHARED_ITEM_RE.findall(xml)
    ]


def parse_sheet_cells(sheet_xml: str, shared_strings: list[str]) -> dict[tuple[int, int], str]:
    """Map (row, column) coordinates to resolved cell values."""
    cells: dict[tuple[int, int], str] = {}
    for attrs, body in _CELL_RE.findall(sheet_xml):
        ref_match = _CELL_REF_RE.search(attrs)
        if ref_match is None or not body:
            continue
        value = _cell_value(body, _CELL_TYPE_RE.search(attrs), shared_strings)
        if value is None:
            continue
        cells[parse_cell_reference(ref_match.group(1))] = value
    return cells


def _cell_value(
    body: str,
    type_match: re.Match[str] | None,
    shared_strings: list[str],
) -> str | None:
    cell_type = type_match.group(1) if type_match else ""
    if cell_type == "inlineStr":
        runs = _TEXT_RUN_RE.findall(body)
        return html.unescape("".join(runs)) if runs else None

    value_match = _VALUE_RE.search(body)
    if value_match is None:
        return None
    raw = html.unescape(value_match.group(1))
    if cell_type == "s":
        try:
            return shared_strings[int(raw)]
        except (ValueError, IndexError):
            return raw
    return raw


def build_rows(cells: dict[tuple[int, int], str]) -> SpreadsheetContent:
    if not cells:
        return SpreadsheetContent()

    row_numbers = sorted({row for row, _ in cells})
    columns = sorted({column for _, column in cells})
    rows = [
        [cells.get((row, column), "") for column in columns]
        for row in row_numbers[: SAMPLE_ROWS + 1]
    ]
    return SpreadsheetContent(
        headers=rows[0],
        first_rows=rows[1:],
        row_count=len(row_numbers) - 1,
        column_count=len(columns),
    )


def _first_sheet_entry(archive: zipfile.ZipFile) -> str:
    names = archive.namelist()
    if DEFAULT_SHEET_ENTRY in names:
        return DEFAULT_SHEET_ENTRY
    numbered: list[tuple[int, str]] = []
    for name in names:
        match = _SHEET_ENTRY_RE.match(name)
        if match:
            numbered.append((int(match.group(1)), name))
    if not numbered:
        raise ArchiveEntryMissingError("Could not find a worksheet in Excel file")
    return min(numbered)[1]


class SpreadsheetExtractor:
    """Extracts headers, a row sample and dimensions from CSV or XLSX data."""

    def extract_csv(self, text: str) -> SpreadsheetContent:
        return parse_csv(text)

    def extract_xlsx(self, data: bytes) -> SpreadsheetContent:
        """
        Raises:
            ExtractionError: if the archive has no readable worksheet.
        """
        with open_archive(data) as archive:
            sheet_xml = read_entry(archive, _first_sheet_entry(archive))
            shared_xml = read_optional_entry(archive, SHARED_STRINGS_ENTRY)

        shared_strings = parse_shared_strings(shared_xml) if shared_xml else []
        content = build_rows(parse_sheet_cells(sheet_xml, shared_strings))
        Log.info(
            f"Excel: {content.row_count} data rows, {content.column_count} columns"
        )
        return content

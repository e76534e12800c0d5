"""Read question rows from an uploaded spreadsheet.

Each data row is ``[question, option A, option B, ..., correct letter]``.
The first row of the sheet is a header and is dropped. Cells are returned
as stripped strings and trailing empty cells are trimmed, so a row's last
cell is always its correct letter.

Supported formats: ``.xlsx`` (first worksheet) and ``.csv`` (UTF-8).
Checking anything beyond that shape is left to the catalog import.
"""

import csv
import io
import logging
import zipfile
from typing import List

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from app.core.exceptions import ValidationException

logger = logging.getLogger(__name__)

Row = List[str]


def _clean_row(values) -> Row:
    row = ["" if v is None else str(v).strip() for v in values]
    while row and row[-1] == "":
        row.pop()
    return row


def _read_xlsx(content: bytes) -> List[Row]:
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as err:
        raise ValidationException(f"cannot read excel file: {err}") from err

    try:
        sheet = workbook.worksheets[0]
        return [_clean_row(values) for values in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def _read_csv(content: bytes) -> List[Row]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as err:
        raise ValidationException("csv file must be UTF-8 encoded") from err
    return [_clean_row(values) for values in csv.reader(io.StringIO(text))]


def read_question_rows(filename: str, content: bytes) -> List[Row]:
    name = (filename or "").lower()
    if name.endswith(".xlsx"):
        rows = _read_xlsx(content)
    elif name.endswith(".csv"):
        rows = _read_csv(content)
    else:
        raise ValidationException("unsupported file type, expected .xlsx or .csv")

    data_rows = rows[1:]
    logger.debug("Read %d data rows from %s", len(data_rows), filename)
    return data_rows

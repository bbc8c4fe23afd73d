# ==============================================================================
# marketshare/analyzer/validator.py
# ------------------------------------------------------------------------------
# Reads an uploaded spreadsheet into a plain table of rows and cells, and
# reports a readable error when the file cannot be parsed.
# ==============================================================================

import io
import logging
import os
import warnings

import pandas as pd

EXCEL_EXTENSIONS = {'.xlsx', '.xls'}
CSV_EXTENSIONS = {'.csv'}

# Upper bound on the width of a CSV row; rows may be ragged.
CSV_MAX_COLUMNS = 256

def _is_blank(cell):
    if isinstance(cell, str):
        return not cell.strip()
    return pd.isna(cell)

def _frame_to_rows(df):
    """Converts a header-less DataFrame to a list of rows with trailing blanks trimmed."""
    rows = []
    for values in df.astype(object).values.tolist():
        cells = [None if _is_blank(cell) else cell for cell in values]
        while cells and cells[-1] is None:
            cells.pop()
        rows.append(cells)
    return rows

def _coerce_csv_cells(df):
    """Turns CSV text that parses cleanly as a number into that number, as a spreadsheet would."""
    for column in df.columns:
        text = df[column]
        numeric = pd.to_numeric(text, errors='coerce')
        df[column] = text.astype(object).where(numeric.isna(), numeric.astype(object))
    return df

def read_tabular_file(data, filename):
    """
    Parses the raw bytes of an uploaded spreadsheet. Only the first sheet is read.

    Args:
        data (bytes): The full file content.
        filename (str): The original file name, used to pick the parser.

    Returns:
        tuple: A tuple containing:
            - list: The table as rows of cells (str, number or None) if parsing succeeds.
            - list: A list of human-readable error messages if it fails.
    """
    errors = []
    extension = os.path.splitext(filename or '')[1].lower()

    if extension not in EXCEL_EXTENSIONS | CSV_EXTENSIONS:
        errors.append(f"Unsupported file type '{extension or filename}'. Only .xlsx, .xls and .csv files are accepted.")
        return None, errors

    if not data:
        errors.append(f"The file '{filename}' is empty.")
        return None, errors

    buffer = io.BytesIO(data)
    try:
        if extension in EXCEL_EXTENSIONS:
            df = pd.read_excel(buffer, sheet_name=0, header=None)
        else:
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter('always', pd.errors.ParserWarning)
                df = pd.read_csv(buffer, header=None, names=range(CSV_MAX_COLUMNS), index_col=False,
                                 dtype=str, keep_default_na=False, skip_blank_lines=False)
            if any(issubclass(w.category, pd.errors.ParserWarning) for w in caught):
                logging.warning(f"'{filename}' has rows wider than {CSV_MAX_COLUMNS} columns.")
                errors.append(f"The file '{filename}' has rows wider than {CSV_MAX_COLUMNS} columns, "
                              f"which is more than a brokerage report can hold.")
                return None, errors
            df = _coerce_csv_cells(df)
    except Exception as e:
        logging.error(f"Could not parse '{filename}' as tabular data: {e}", exc_info=True)
        errors.append(f"The file '{filename}' could not be read as a spreadsheet. Technical error: {e}")
        return None, errors

    rows = _frame_to_rows(df)
    logging.info(f"Read {len(rows)} rows from '{filename}'.")
    return rows, []

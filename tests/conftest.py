# tests/conftest.py

import io

import pandas as pd
import pytest


@pytest.fixture
def app():
    """
    Creates a new app instance for a test with testing flags enabled.
    """
    from marketshare import create_app

    app = create_app()
    app.config.update({
        "TESTING": True,
    })
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


def make_row(width=20, **cells):
    """
    Builds one sheet row of `width` blank cells with the given cells filled in.
    Keys are column indexes prefixed with 'c', e.g. make_row(c1='Brand', c8='Mkt %').
    """
    row = [None] * width
    for key, value in cells.items():
        row[int(key[1:])] = value
    return row


@pytest.fixture
def mkt_pct_rows():
    """A newer-format export: brand in column B, share as 'Mkt %' in column I."""
    header = make_row(c1='Brand', c6='Total #', c8='Mkt %', c9='DOM', c10='Avg Price',
                      c12='$ Vol Per Prod Agent', c14='Price/SqFt', c15='Closed/List Price',
                      c18='# Offices', c19='Contributing Agents')
    return [
        header,
        make_row(c1="Russ Lyon Sotheby's Int'l Realty", c6=1250, c8='15.6%', c9=84, c10='$1,850,000',
                 c12='$4,200,000', c14='$612', c15=0.962, c18=12, c19=340),
        make_row(c1='HomeSmart', c6=900, c8='9.0%', c9=61, c10=725000, c12=2100000),
        make_row(c1='Realty ONE Group', c6=850, c8='8.7%', c9=58, c10=690000, c12=1900000),
        make_row(c1='Coldwell Banker Realty', c6=820, c8='8.3%', c9=70, c10=810000, c12=2300000),
        make_row(c1='Berkshire Hathaway HomeServices', c6=790, c8='7.8%', c9=66, c10=880000, c12=2500000),
    ]


@pytest.fixture
def xlsx_bytes():
    """Serializes a list of rows to .xlsx bytes the way a spreadsheet export would look."""
    def _build(rows):
        buffer = io.BytesIO()
        pd.DataFrame(rows).to_excel(buffer, header=False, index=False)
        return buffer.getvalue()
    return _build

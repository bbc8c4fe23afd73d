# ==============================================================================
# marketshare/analyzer/detector.py
# ------------------------------------------------------------------------------
# Locates the columns of interest in a raw table by reading the header text
# of its first rows, falling back to the positional defaults of the schema.
# ==============================================================================

import logging
from dataclasses import asdict, dataclass, replace
from functools import reduce
from itertools import islice

from .schema import (DEFAULT_COLUMNS, HEADER_RULES, MARKET_SHARE_TIERS,
                     PERCENT_SHARE_COLUMN, PERCENT_SHARE_CONTAINS_ALL, PERCENT_SHARE_EQUALS,
                     VOLUME_SHARE_COLUMN, VOLUME_SHARE_CONTAINS_ANY)


@dataclass(frozen=True)
class ColumnMap:
    """Zero-based column index for every field the analyzer reads. -1 means absent."""
    brand: int = DEFAULT_COLUMNS['brand']
    market_share: int = DEFAULT_COLUMNS['market_share']
    total_sales: int = DEFAULT_COLUMNS['total_sales']
    avg_price: int = DEFAULT_COLUMNS['avg_price']
    days_on_market: int = DEFAULT_COLUMNS['days_on_market']
    price_per_sqft: int = DEFAULT_COLUMNS['price_per_sqft']
    closed_list_ratio: int = DEFAULT_COLUMNS['closed_list_ratio']
    total_offices: int = DEFAULT_COLUMNS['total_offices']
    contributing_agents: int = DEFAULT_COLUMNS['contributing_agents']

    def as_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class _ScanState:
    columns: ColumnMap
    share_locked: bool = False
    share_tier: int = 0


def cell_at(row, index):
    """Returns the cell at `index`, or None when the row is too short or the index is a sentinel."""
    if row is None or index < 0 or index >= len(row):
        return None
    return row[index]


def _header_text(cell):
    if not isinstance(cell, str):
        return None
    text = cell.strip().lower()
    return text or None


def _matches(text, rule):
    if text in rule['equals']:
        return True
    if any(token in text for token in rule['contains_any']):
        return True
    return any(all(token in text for token in group) for group in rule['contains_all'])


def _scan_row(state, row):
    """Folds one row into the detection state."""
    if not row:
        return state

    columns = state.columns
    share_locked = state.share_locked
    share_tier = state.share_tier

    # 1. The two known share columns win over anything the generic scan finds.
    percent_text = _header_text(cell_at(row, PERCENT_SHARE_COLUMN))
    if percent_text and (percent_text in PERCENT_SHARE_EQUALS or
                         any(all(t in percent_text for t in group) for group in PERCENT_SHARE_CONTAINS_ALL)):
        columns = replace(columns, market_share=PERCENT_SHARE_COLUMN)
        share_locked = True
        logging.debug(f"Using column I (index {PERCENT_SHARE_COLUMN}) for Market Share: '{row[PERCENT_SHARE_COLUMN]}'")

    if not (share_locked and columns.market_share == PERCENT_SHARE_COLUMN):
        volume_text = _header_text(cell_at(row, VOLUME_SHARE_COLUMN))
        if volume_text and any(token in volume_text for token in VOLUME_SHARE_CONTAINS_ANY):
            columns = replace(columns, market_share=VOLUME_SHARE_COLUMN)
            share_locked = True
            logging.debug(f"Using column M (index {VOLUME_SHARE_COLUMN}) for Market Share: '{row[VOLUME_SHARE_COLUMN]}'")

    # 2. Generic scan over every header cell; later matches overwrite earlier ones.
    updates = {}
    for index, cell in enumerate(row):
        text = _header_text(cell)
        if text is None:
            continue

        for field_name, rule in HEADER_RULES.items():
            if _matches(text, rule):
                updates[field_name] = index
                logging.debug(f"Found {field_name} column at index {index} with header '{cell}'")

        if share_locked:
            continue
        for tier, rule in MARKET_SHARE_TIERS:
            if _matches(text, rule):
                if tier >= share_tier:
                    updates['market_share'] = index
                    share_tier = tier
                    logging.debug(f"Found market share column (tier {tier}) at index {index} with header '{cell}'")
                break

    if updates:
        columns = replace(columns, **updates)
    return _ScanState(columns=columns, share_locked=share_locked, share_tier=share_tier)


def detect_columns(rows, scan_limit=10):
    """
    Works out which column holds each field by scanning the first rows for header text.

    Never fails: a field whose header cannot be found keeps its default position.

    Args:
        rows (list): The raw table, a list of rows of cells (str, number or None).
        scan_limit (int): How many leading rows may contain the header.

    Returns:
        ColumnMap: The resolved column positions.
    """
    state = reduce(_scan_row, islice(rows, scan_limit), _ScanState(columns=ColumnMap()))
    logging.info(f"Column map resolved: {state.columns.as_dict()} (share locked: {state.share_locked})")
    return state.columns

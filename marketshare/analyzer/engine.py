# ==============================================================================
# marketshare/analyzer/engine.py
# ------------------------------------------------------------------------------
# Turns a raw table into a ranked list of brokerages: normalizes the market
# share of every row, extracts the subject brokerage's extended metrics and
# derives the headline figures (lead over the runner-up, top-3 concentration).
# ==============================================================================

import logging
import math
import numbers
import re
from decimal import ROUND_HALF_UP, Decimal
from itertools import islice

from .detector import cell_at, detect_columns
from .schema import AMOUNT_STRIP_CHARS, BRAND_ALIASES, SHARE_STRIP_CHARS

# --- Configuration Loader Class ---

class AnalysisConfig:
    """
    Holds the tunable analysis settings for a single run.
    A fresh instance is built for every file, so nothing is shared between runs.
    """

    def __init__(self, settings=None):
        self.load_settings(settings or {})

    def load_settings(self, settings):
        """Loads the settings from a mapping (usually the Flask app config) into attributes."""
        self.HEADER_SCAN_ROWS = int(settings.get('HEADER_SCAN_ROWS', 10))
        self.TOP_N = int(settings.get('TOP_N', 10))
        self.PIE_TOP_N = int(settings.get('PIE_TOP_N', 5))
        self.SUBJECT_BRAND_TOKEN = str(settings.get('SUBJECT_BRAND_TOKEN', 'sotheby')).lower()
        self.SUBJECT_BRAND_LABEL = settings.get('SUBJECT_BRAND_LABEL', "Russ Lyon Sotheby's International Realty")

    def is_subject(self, brand):
        return self.SUBJECT_BRAND_TOKEN in brand.lower() or brand == self.SUBJECT_BRAND_LABEL

# --- Helper Functions ---

_FLOAT_PREFIX = re.compile(r'^\s*[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')
_INT_PREFIX = re.compile(r'^\s*[-+]?\d+')

def _is_number(value):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(value)

def _parse_number(value, strip_chars, integer=False):
    """
    Reads a number out of a cell. Numbers pass through; text has `strip_chars`
    removed and its leading numeric part parsed. Anything else gives None.
    """
    if _is_number(value):
        return int(value) if isinstance(value, numbers.Integral) else float(value)
    if not isinstance(value, str):
        return None
    cleaned = value.translate(str.maketrans('', '', strip_chars))
    match = (_INT_PREFIX if integer else _FLOAT_PREFIX).match(cleaned)
    if not match:
        return None
    if integer:
        return int(match.group(0))
    number = float(match.group(0))
    return number if math.isfinite(number) else None

def round_share(value):
    """Rounds to one decimal place, halves away from zero (12.25 -> 12.3)."""
    return float(Decimal(str(value)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))

def _brand_text(cell):
    if cell is None:
        return None
    if _is_number(cell):
        return str(int(cell)) if float(cell).is_integer() else str(cell)
    if isinstance(cell, float):  # NaN or infinite
        return None
    return str(cell).strip() or None

def coerce_market_share(value):
    """
    Converts a raw share cell to a percentage, or None when it holds no number.

    Text like "12.5%" or "$1,560" is stripped and parsed as is. A number below 1
    is read as a fraction and scaled to a percentage. Values above 1000 are
    assumed to be mis-scaled raw figures and divided by 1000.
    """
    if isinstance(value, str):
        share = _parse_number(value, SHARE_STRIP_CHARS)
    elif _is_number(value):
        share = float(value)
        if share < 1:
            share = share * 100
    else:
        return None

    if share is None:
        return None

    if share > 100:
        logging.warning(f"Unusually high market share detected: {share}%. Might be a data issue.")
        # TODO: tell a mistyped percentage apart from a raw sales count once the
        # export format documents which one column M carries.
        if share > 1000:
            share = round_share(share / 1000)
            logging.warning(f"Adjusted extremely high value to: {share}%")
    return share

def empty_metrics():
    """The subject snapshot reported when the subject brokerage is not in the file."""
    return {
        'total_sales': 0, 'average_price': 0, 'days_on_market': 0,
        'price_per_sqft': None, 'closed_list_ratio': None,
        'total_offices': 0, 'contributing_agents': 0,
    }

def _positive_or_none(value):
    return value if value is not None and value > 0 else None

def _read_metrics(row, columns):
    closed_list_ratio = _parse_number(cell_at(row, columns.closed_list_ratio), SHARE_STRIP_CHARS)
    if closed_list_ratio is not None and closed_list_ratio < 1:
        closed_list_ratio = closed_list_ratio * 100

    return {
        'total_sales': _parse_number(cell_at(row, columns.total_sales), AMOUNT_STRIP_CHARS) or 0,
        'average_price': _parse_number(cell_at(row, columns.avg_price), AMOUNT_STRIP_CHARS) or 0,
        'days_on_market': _parse_number(cell_at(row, columns.days_on_market), AMOUNT_STRIP_CHARS) or 0,
        'price_per_sqft': _positive_or_none(_parse_number(cell_at(row, columns.price_per_sqft), AMOUNT_STRIP_CHARS)),
        'closed_list_ratio': _positive_or_none(closed_list_ratio),
        'total_offices': _parse_number(cell_at(row, columns.total_offices), AMOUNT_STRIP_CHARS, integer=True) or 0,
        'contributing_agents': _parse_number(cell_at(row, columns.contributing_agents), AMOUNT_STRIP_CHARS, integer=True) or 0,
    }

# --- Extraction Passes ---

def extract_records(rows, columns):
    """Builds one {'brand', 'market_share'} record per usable data row, in file order."""
    records = []
    required_length = max(columns.brand, columns.market_share) + 1

    for row_number, row in enumerate(islice(rows, 1, None), start=1):
        if not row or len(row) < required_length:
            logging.debug(f"SKIPPING Row {row_number}: shorter than {required_length} cells.")
            continue

        brand = _brand_text(row[columns.brand])
        if not brand:
            logging.debug(f"SKIPPING Row {row_number}: no brand.")
            continue

        share = coerce_market_share(row[columns.market_share])
        if share is None:
            logging.debug(f"SKIPPING Row {row_number}: market share '{row[columns.market_share]}' is not a number.")
            continue

        records.append({'brand': brand, 'market_share': round_share(share)})
    return records

def extract_subject_metrics(rows, columns, subject_token):
    """
    Reads the extended metrics of the subject brokerage. If several rows name
    the subject, the last one wins.
    """
    snapshot = empty_metrics()
    for row_number, row in enumerate(islice(rows, 1, None), start=1):
        brand = _brand_text(cell_at(row, columns.brand))
        if not brand or subject_token not in brand.lower():
            continue
        snapshot = _read_metrics(row, columns)
        logging.info(f"Extracted subject metrics from Row {row_number} ('{brand}'): {snapshot}")
    return snapshot

# --- Ranking ---

def normalize_brand_labels(records, config):
    """Rewrites known aliases to their display name. Shares are left untouched."""
    aliases = (((config.SUBJECT_BRAND_TOKEN,), config.SUBJECT_BRAND_LABEL),) + BRAND_ALIASES
    normalized = []
    for record in records:
        brand = record['brand']
        brand_lower = brand.lower()
        for tokens, label in aliases:
            if any(token in brand_lower for token in tokens):
                brand = label
        normalized.append({**record, 'brand': brand})
    return normalized

def rank_records(records, config):
    """Returns every record sorted by market share, highest first, under its display name."""
    ordered = sorted(records, key=lambda r: r['market_share'], reverse=True)
    relabeled = normalize_brand_labels(ordered, config)
    return sorted(relabeled, key=lambda r: r['market_share'], reverse=True)

def compute_derived_metrics(ranked, config):
    subject = next((r for r in ranked if config.is_subject(r['brand'])), None)
    runner_up = next((r for r in ranked if not config.is_subject(r['brand'])), None)

    leader_share = subject['market_share'] if subject else 0.0
    runner_up_share = runner_up['market_share'] if runner_up else 0.0
    # No lead or deficit is reported unless both sides are in the file.
    gap = round_share(leader_share - runner_up_share) if subject and runner_up else 0.0

    total_share = sum(r['market_share'] for r in ranked)
    top3_share = sum(r['market_share'] for r in ranked[:3])
    top3_concentration = round_share(top3_share / total_share * 100) if total_share > 0 else 0.0

    return {
        'subject_found': subject is not None,
        'subject_rank': ranked.index(subject) + 1 if subject else None,
        'leader_share': leader_share,
        'runner_up_brand': runner_up['brand'] if runner_up else None,
        'runner_up_share': runner_up_share,
        'gap': gap,
        'top3_share': round_share(top3_share),
        'top3_concentration': top3_concentration,
    }

# --- Main Analysis Orchestrator ---

def analyze_rows(rows, config=None):
    """
    Runs the full analysis over a raw table.

    Args:
        rows (list): The table as rows of cells (str, number or None).
        config (AnalysisConfig): Run settings; defaults apply when omitted.

    Returns:
        dict: 'columns' (ColumnMap), 'records' (every accepted record, ranked),
              'top_records' (the first TOP_N of them), 'subject_metrics' and
              'derived_metrics'. A table without usable rows yields empty lists
              and a zeroed snapshot rather than an error.
    """
    logging.info("=" * 80)
    logging.info("STARTING MARKET SHARE ANALYSIS")
    logging.info("=" * 80)

    config = config or AnalysisConfig()
    rows = list(rows)
    columns = detect_columns(rows, scan_limit=config.HEADER_SCAN_ROWS)

    logging.info("--- Starting Pass 1: Extracting brokerage records. ---")
    records = extract_records(rows, columns)
    logging.info(f"--- Pass 1 Finished. {len(records)} of {max(len(rows) - 1, 0)} data rows accepted. ---")

    logging.info("--- Starting Pass 2: Extracting subject metrics. ---")
    subject_metrics = extract_subject_metrics(rows, columns, config.SUBJECT_BRAND_TOKEN)
    logging.info("--- Pass 2 Finished. ---")

    ranked = rank_records(records, config)
    top_records = ranked[:config.TOP_N]
    logging.debug(f"Final sorted brokerages (Top {config.TOP_N}): {top_records}")

    derived_metrics = compute_derived_metrics(ranked, config)
    logging.info(f"--- Analysis complete. Derived metrics: {derived_metrics} ---")

    return {
        'columns': columns,
        'records': ranked,
        'top_records': top_records,
        'subject_metrics': subject_metrics,
        'derived_metrics': derived_metrics,
    }

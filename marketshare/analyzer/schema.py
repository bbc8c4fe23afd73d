# ==============================================================================
# marketshare/analyzer/schema.py
# ------------------------------------------------------------------------------
# Describes the spreadsheet layouts the analyzer understands: where each
# column sits when no header is recognised, and the header wording that
# identifies each column when one is.
# This schema is the single source of truth for the column detector.
# ==============================================================================

# Zero-based positions used when no header text identifies a column.
# -1 marks a column that is optional and absent unless a header names it.
DEFAULT_COLUMNS = {
    'brand': 1,                 # Column B
    'market_share': 12,         # Column M ($ Vol Per Prod Agent)
    'total_sales': 6,           # Column G (Total #)
    'avg_price': 10,            # Column K (Avg Price)
    'days_on_market': 9,        # Column J (DOM)
    'price_per_sqft': -1,
    'closed_list_ratio': -1,
    'total_offices': 19,
    'contributing_agents': 19,
}

# Newer exports carry the share as a percentage in column I ("Mkt %").
PERCENT_SHARE_COLUMN = 8
PERCENT_SHARE_EQUALS = ('mkt %',)
PERCENT_SHARE_CONTAINS_ALL = (('market', '%'),)

# Older exports carry it as a volume figure in column M ("$ Vol Per Prod Agent").
VOLUME_SHARE_COLUMN = 12
VOLUME_SHARE_CONTAINS_ANY = ('$ vol per prod agent', 'vol per prod', 'per agent')

# Header rules for the generic scan. A lower-cased cell matches a field when it
# equals one of 'equals', contains one of 'contains_any', or contains every
# token of one of the 'contains_all' groups.
HEADER_RULES = {
    'brand': {
        'equals': ('name',),
        'contains_any': ('brand', 'company', 'brokerage', 'firm'),
        'contains_all': (),
    },
    'total_sales': {
        'equals': ('total #',),
        'contains_any': (),
        'contains_all': (('total', '#'),),
    },
    'avg_price': {
        'equals': ('avg price',),
        'contains_any': (),
        'contains_all': (('avg', 'price'), ('average', 'sales')),
    },
    'days_on_market': {
        'equals': ('dom',),
        'contains_any': ('days on market',),
        'contains_all': (('days', 'market'),),
    },
    'price_per_sqft': {
        'equals': ('price/sqft',),
        'contains_any': ('price per sq', 'price/sq', 'price per foot'),
        'contains_all': (('price', 'sqft'),),
    },
    'closed_list_ratio': {
        'equals': ('closed/list price',),
        'contains_any': (),
        'contains_all': (('closed', 'list'), ('sale', 'list')),
    },
    'total_offices': {
        'equals': ('# offices', 'total offices'),
        'contains_any': (),
        'contains_all': (('office', 'total'), ('office', '#')),
    },
    'contributing_agents': {
        'equals': ('contributing agents',),
        'contains_any': (),
        'contains_all': (('contributing', 'agent'),),
    },
}

# Share headers found by the generic scan, strongest first. A weaker tier never
# replaces a column picked by a stronger one.
MARKET_SHARE_TIERS = (
    (3, {'equals': ('market share (#)', 'market share (%)'), 'contains_any': (), 'contains_all': ()}),
    (2, {'equals': (), 'contains_any': ('market share', 'mkt share'), 'contains_all': ()}),
    (1, {'equals': (), 'contains_any': ('share', 'percentage', '%'), 'contains_all': ()}),
)

# Display names for brands that appear under several spellings. The subject
# brokerage's alias is added at runtime from the configuration.
BRAND_ALIASES = (
    (('homesmart', 'home smart'), 'HomeSmart'),
)

# Characters removed from textual cells before they are parsed as numbers.
SHARE_STRIP_CHARS = '%$,'
AMOUNT_STRIP_CHARS = ',$'

EXPECTED_LAYOUT_MESSAGE = (
    "Failed to process file. Please ensure the file contains brokerage names in column B "
    "and market share data in either column I (Mkt %) or column M ($ Vol Per Prod Agent)."
)

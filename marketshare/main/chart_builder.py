# ==============================================================================
# marketshare/main/chart_builder.py
# ------------------------------------------------------------------------------
# Builds the label/value payloads the frontend charts are drawn from.
# ==============================================================================

import pandas as pd

from marketshare.analyzer.engine import round_share

SUBJECT_COLOR = '#002349'
ALL_OTHERS_LABEL = 'All Others'
ALL_OTHERS_COLOR = 'rgba(80, 80, 80, 1)'
PIE_GRAYSCALE_BASE = 90
PIE_GRAYSCALE_STEP = 25
GRAYSCALE_MAX = 210

def _chart_values(values):
    """Plain floats for the JSON payload; missing cells become None."""
    return [None if value is None or pd.isna(value) else float(value) for value in values]

def build_bar_chart(labels, values):
    return {'labels': list(labels), 'values': _chart_values(values)}

def build_pie_chart(records, subject_label, top_n=5):
    """
    Pie payload for the ranked records: the first `top_n` brokerages by name and
    the remainder folded into one "All Others" slice, drawn only when it is
    larger than zero.
    """
    labels = [record['brand'] for record in records[:top_n]]
    values = [record['market_share'] for record in records[:top_n]]

    others_value = sum(record['market_share'] for record in records[top_n:])
    if others_value > 0:
        labels.append(ALL_OTHERS_LABEL)
        values.append(round_share(others_value))

    colors = []
    for index, label in enumerate(labels):
        if label == subject_label:
            colors.append(SUBJECT_COLOR)
        elif label == ALL_OTHERS_LABEL:
            colors.append(ALL_OTHERS_COLOR)
        else:
            gray = min(PIE_GRAYSCALE_BASE + index * PIE_GRAYSCALE_STEP, GRAYSCALE_MAX)
            colors.append(f"rgba({gray}, {gray}, {gray}, 1)")

    return {'labels': labels, 'values': _chart_values(values), 'colors': colors}

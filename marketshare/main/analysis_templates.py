# ==============================================================================
# marketshare/main/analysis_templates.py
# ------------------------------------------------------------------------------
# Per-view presentation settings: the text, colours and narrative insights
# shown next to the ranked chart. Everything here is a pure function of the
# engine's ranked records and derived metrics.
# ==============================================================================

import logging

from marketshare.main.chart_builder import GRAYSCALE_MAX, SUBJECT_COLOR, build_bar_chart

MARKET_SHARE = 'market_share'
OTHER_INSIGHTS = 'other_insights'
COMBINED_VIEW = 'combined_view'
TEMPLATE_TYPES = (MARKET_SHARE, OTHER_INSIGHTS, COMBINED_VIEW)

GRAYSCALE_BASE = 90
GRAYSCALE_STEP = 18

TEMPLATE_TEXT = {
    MARKET_SHARE: {
        'title': "Market Share Analysis",
        'description': "Comparative analysis of market position",
        'chartTitle': "Top 10 Real Estate Brokerages by Market Share",
    },
    OTHER_INSIGHTS: {
        'title': "Other Market Insights",
        'description': "Additional analysis and key metrics",
        'chartTitle': "Market Analysis Insights",
    },
    COMBINED_VIEW: {
        'title': "Complete Market Analysis",
        'description': "Comprehensive view of market share and key metrics",
        'chartTitle': "Top 10 Real Estate Brokerages by Market Share",
    },
}

TEMPLATE_NARRATIVE = {
    MARKET_SHARE: [
        "Established dominant position in the competitive luxury real estate market",
        "Significant lead over nearest competitors in market share percentage",
        "Trusted brand with decades of expertise in premium properties",
    ],
    OTHER_INSIGHTS: [
        "Luxury market positioning with a focus on higher-value properties",
        "Efficient sales process with optimized days on market",
        "Higher-than-average price per square foot indicates premium property portfolio",
        "Strong sale-to-list price ratio demonstrates effective pricing strategy",
        "Demonstrated commitment to quality over quantity in transactions",
    ],
    COMBINED_VIEW: [
        "Leads market in client satisfaction and premium service delivery",
        "Expert agents specializing in luxury and high-end real estate",
        "Consistently achieving optimal results for clients across all metrics",
        "Strategic presence in key high-value neighborhoods and communities",
    ],
}

NO_DATA_SUMMARY = "No brokerage rows with a usable market share were found in the file."

def resolve_template_type(template_type):
    """Unknown or missing template names fall back to the market share view."""
    if template_type in TEMPLATE_TYPES:
        return template_type
    if template_type:
        logging.warning(f"Unknown template type '{template_type}', using '{MARKET_SHARE}'.")
    return MARKET_SHARE

def get_template_text(template_type=MARKET_SHARE):
    return dict(TEMPLATE_TEXT[resolve_template_type(template_type)])

def generate_template_colors(labels, subject_label, template_type=MARKET_SHARE):
    """
    The subject brokerage is always drawn in its brand blue. Everyone else gets a
    grayscale that lightens with rank; the insights view tints the top three.
    """
    template_type = resolve_template_type(template_type)
    colors = []
    for index, label in enumerate(labels):
        if label == subject_label:
            colors.append(SUBJECT_COLOR)
            continue
        gray = min(GRAYSCALE_BASE + index * GRAYSCALE_STEP, GRAYSCALE_MAX)
        blue = gray + 20 if template_type == OTHER_INSIGHTS and index < 3 else gray
        colors.append(f"rgba({gray}, {gray}, {blue}, 1)")
    return colors

def generate_template_insights(derived, subject_label, template_type=MARKET_SHARE, has_data=True):
    """
    Builds the summary lines shown under the chart.

    Args:
        derived (dict): The engine's derived metrics.
        subject_label (str): Display name of the subject brokerage.
        template_type (str): One of TEMPLATE_TYPES.
        has_data (bool): False when the file produced no ranked records.

    Returns:
        list: Human-readable insight strings.
    """
    if not has_data:
        return [NO_DATA_SUMMARY]

    base_insights = [f"{subject_label} has {derived['leader_share']:.1f}% market share"]

    if derived['subject_found'] and derived['runner_up_brand']:
        gap = derived['gap']
        if gap > 0:
            position = f"{gap:.1f} percentage points ahead of"
        elif gap < 0:
            position = f"{abs(gap):.1f} percentage points behind"
        else:
            position = "Level with"
        base_insights.append(
            f"{position} nearest competitor "
            f"({derived['runner_up_brand']} at {derived['runner_up_share']:.1f}%)"
        )
    else:
        base_insights.append("Competitive position in the real estate market")

    base_insights.append(f"Top 3 brokerages control {derived['top3_concentration']:.1f}% of the market")

    return base_insights + TEMPLATE_NARRATIVE[resolve_template_type(template_type)]

def apply_template(top_records, derived, subject_label, template_type=MARKET_SHARE):
    """Full presentation payload for one view of the ranked records."""
    template_type = resolve_template_type(template_type)
    labels = [record['brand'] for record in top_records]
    values = [record['market_share'] for record in top_records]
    text = get_template_text(template_type)

    return {
        'processedData': build_bar_chart(labels, values),
        'insights': {
            'title': text['title'],
            'description': text['description'],
            'summary': generate_template_insights(derived, subject_label, template_type,
                                                  has_data=bool(top_records)),
        },
        'chartTitle': text['chartTitle'],
        'colors': generate_template_colors(labels, subject_label, template_type),
        'templateType': template_type,
    }

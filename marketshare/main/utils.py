# ==============================================================================
# marketshare/main/utils.py
# ==============================================================================
import re

from marketshare.analyzer.engine import round_share
from marketshare.main.analysis_templates import apply_template
from marketshare.main.chart_builder import build_pie_chart

def _whole(value):
    """Renders whole-number floats (12.0) as ints (12)."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value

def format_currency(value):
    """
    Formats a dollar amount with thousands separators and no cents.
    Example: 1234567.4 -> "$1,234,567"
    """
    try:
        amount = float(value)
    except (ValueError, TypeError):
        return str(value)
    sign = '-' if amount < 0 else ''
    return f"{sign}${abs(amount):,.0f}"

def format_additional_metrics(snapshot):
    """
    Shapes the subject brokerage's snapshot for display. Price per square foot and
    the closed/list ratio are only included when the file actually carried them.
    """
    metrics = {
        'totalSales': _whole(snapshot['total_sales']),
        'averagePrice': format_currency(snapshot['average_price']),
        'daysOnMarket': round_share(float(snapshot['days_on_market'])),
        'totalOffices': _whole(snapshot['total_offices']),
        'contributingAgents': _whole(snapshot['contributing_agents']),
    }
    if snapshot.get('price_per_sqft'):
        metrics['pricePerSqft'] = f"${snapshot['price_per_sqft']:.0f}"
    if snapshot.get('closed_list_ratio'):
        metrics['closedListRatio'] = f"{snapshot['closed_list_ratio']:.1f}%"
    return metrics

def clean_file_name(filename):
    """
    Turns an upload's file name into a short display title.
    Example: "scottsdale_luxury-report.xlsx" -> "Scottsdale Luxury Report"
    """
    if not filename:
        return ""
    name = re.sub(r'\.(xlsx|xls|csv)$', '', filename, flags=re.IGNORECASE)
    name = re.sub(r'[_-]', ' ', name)
    name = ' '.join(word[:1].upper() + word[1:].lower() for word in name.split(' '))
    if len(name) > 30:
        name = name[:30] + '...'
    return name.strip()

def prepare_frontend_data(results, config, template_type=None, file_name=None):
    """
    Transforms the raw engine output into the structure consumed by the frontend:
    the ranked bar series, the insight text, the subject's formatted metrics and
    the chart extras (colours, title, top-5 pie).
    """
    template = apply_template(
        results['top_records'],
        results['derived_metrics'],
        config.SUBJECT_BRAND_LABEL,
        template_type,
    )
    derived = results['derived_metrics']

    return {
        'processedData': template['processedData'],
        'insights': template['insights'],
        'additionalMetrics': format_additional_metrics(results['subject_metrics']),
        'derivedMetrics': {
            'leaderShare': derived['leader_share'],
            'runnerUp': derived['runner_up_brand'],
            'runnerUpShare': derived['runner_up_share'],
            'gap': derived['gap'],
            'top3Concentration': derived['top3_concentration'],
        },
        'chart': {
            'title': template['chartTitle'],
            'colors': template['colors'],
            'pie': build_pie_chart(results['records'], config.SUBJECT_BRAND_LABEL, top_n=config.PIE_TOP_N),
        },
        'templateType': template['templateType'],
        'fileName': clean_file_name(file_name),
    }

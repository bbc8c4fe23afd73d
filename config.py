# ==============================================================================
# config.py
# ------------------------------------------------------------------------------
# Configuration settings for the Flask application.
# Uses environment variables so deployments can tune the analyzer without
# touching the code.
# ==============================================================================

import os
from dotenv import load_dotenv

# Determine the absolute path of the project directory
basedir = os.path.abspath(os.path.dirname(__file__))

# Load environment variables from a .env file located in the project root
load_dotenv(os.path.join(basedir, '.env'))

class Config:
    """
    Base configuration class. Contains default settings that can be overridden
    by environment-specific configurations.
    """
    # --- Security ---
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-should-really-set-a-secret-key-in-your-env-file'

    # --- Logging ---
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'

    # --- File Upload Configuration ---
    # Spreadsheets are read straight into memory, nothing is written to disk.
    ALLOWED_EXTENSIONS = {'.xlsx', '.xls', '.csv'}

    # Uploads larger than 10 MB are rejected by Flask with a 413.
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024

    # --- Analysis Settings ---
    # How many leading rows are searched for a header row.
    HEADER_SCAN_ROWS = int(os.environ.get('HEADER_SCAN_ROWS') or 10)

    # Length of the primary ranked list and of the pie chart's named slices.
    TOP_N = int(os.environ.get('TOP_N') or 10)
    PIE_TOP_N = int(os.environ.get('PIE_TOP_N') or 5)

    # The brokerage whose extended metrics are reported alongside the ranking.
    SUBJECT_BRAND_TOKEN = os.environ.get('SUBJECT_BRAND_TOKEN') or 'sotheby'
    SUBJECT_BRAND_LABEL = os.environ.get('SUBJECT_BRAND_LABEL') or "Russ Lyon Sotheby's International Realty"

    DEFAULT_TEMPLATE = os.environ.get('DEFAULT_TEMPLATE') or 'market_share'

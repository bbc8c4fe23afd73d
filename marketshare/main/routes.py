# ==============================================================================
# marketshare/main/routes.py
# ------------------------------------------------------------------------------
# Defines the JSON API of the main application blueprint.
# This file acts as the controller between the upload and the analyzer.
# ==============================================================================

import os
from flask import current_app, jsonify, request
from werkzeug.utils import secure_filename

from marketshare.main import bp
from marketshare.analyzer.engine import AnalysisConfig, analyze_rows
from marketshare.analyzer.schema import EXPECTED_LAYOUT_MESSAGE
from marketshare.analyzer.validator import read_tabular_file
from marketshare.main.forms import UploadForm
from marketshare.main.utils import prepare_frontend_data

# --- Helper Functions ---

def allowed_file(filename):
    """Checks if the file extension is allowed based on the app config."""
    return '.' in filename and \
           os.path.splitext(filename)[1].lower() in current_app.config['ALLOWED_EXTENSIONS']

def error_response(details, status):
    """Every failure carries the same guidance on the expected file layout."""
    return jsonify({'error': EXPECTED_LAYOUT_MESSAGE, 'details': details}), status

# --- API Routes ---

@bp.route('/api/test')
def test_connection():
    """Lets the frontend check that the backend is reachable."""
    return jsonify({'status': 'ok', 'message': 'Backend connection successful'})

@bp.route('/api/process-files', methods=['POST'])
def process_files():
    """Analyses the first uploaded spreadsheet and returns the chart-ready result."""
    form = UploadForm()
    if not form.validate_on_submit():
        details = [message for messages in form.errors.values() for message in messages]
        return error_response(details, 400)

    uploads = form.files.data
    if len(uploads) > 1:
        current_app.logger.warning(f"{len(uploads)} files uploaded; only '{uploads[0].filename}' will be processed.")
    upload = uploads[0]

    if not allowed_file(upload.filename):
        return error_response(['Only CSV and Excel files are accepted.'], 400)

    filename = secure_filename(upload.filename)
    current_app.logger.info(f"Processing file: '{upload.filename}'")

    rows, errors = read_tabular_file(upload.read(), upload.filename)
    if errors:
        return error_response(errors, 400)

    template_type = form.template.data or request.args.get('template') or current_app.config.get('DEFAULT_TEMPLATE')

    try:
        config = AnalysisConfig(current_app.config)
        results = analyze_rows(rows, config)
        frontend_data = prepare_frontend_data(results, config, template_type, file_name=filename)
    except Exception as e:
        current_app.logger.error(f"Analysis failed for '{upload.filename}': {e}", exc_info=True)
        return error_response([f"An unexpected error occurred during analysis: {e}"], 500)

    if not frontend_data['processedData']['labels']:
        current_app.logger.warning(f"No usable brokerage rows found in '{upload.filename}'.")

    return jsonify(frontend_data)

@bp.app_errorhandler(413)
def file_too_large(error):
    limit_mb = current_app.config['MAX_CONTENT_LENGTH'] // (1024 * 1024)
    return error_response([f'File size exceeds {limit_mb}MB limit.'], 413)

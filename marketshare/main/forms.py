# ==============================================================================
# marketshare/main/forms.py
# ------------------------------------------------------------------------------
# Defines the upload form using Flask-WTF for request validation.
# ==============================================================================

from flask_wtf import FlaskForm
from flask_wtf.file import FileRequired, MultipleFileField
from wtforms import StringField
from wtforms.validators import AnyOf, Optional

from marketshare.main.analysis_templates import TEMPLATE_TYPES

class UploadForm(FlaskForm):
    """Spreadsheet upload for the JSON API. Only the first file is analysed."""

    class Meta:
        # The API is called by a separate frontend without a session token.
        csrf = False

    files = MultipleFileField('Files', validators=[FileRequired(message="Please select at least one file to upload.")])
    template = StringField('Template', validators=[
        Optional(),
        AnyOf(TEMPLATE_TYPES, message="Unknown template type."),
    ])

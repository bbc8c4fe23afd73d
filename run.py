# ==============================================================================
# run.py
# ------------------------------------------------------------------------------
# The main entry point to launch the Flask application.
# ==============================================================================

from marketshare import create_app

# Create the Flask application instance using the factory function
app = create_app()

if __name__ == '__main__':
    app.run(debug=True)

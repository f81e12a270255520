"""
WSGI / Flask-Migrate entry point.

Usage:
    gunicorn wsgi:app
    flask db init       # first time only (creates migrations/)
    flask db migrate -m "description"
    flask db upgrade
    flask init-db --sample-data
"""

from smartsprint import create_app

app = create_app()

"""
SmartSprint
Database models package.

The shared ``db`` handle lives here so every model module can do
``from smartsprint.models import db``.
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

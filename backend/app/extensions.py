"""
extensions.py — Flask extension singletons.

Creates SQLAlchemy and Marshmallow with no app attached; create_app() calls
init_app(app) on each. Import them from here wherever needed:

    from backend.app.extensions import db, ma

Schema inheritance rule:
  All schemas in app/schemas/ inherit from marshmallow.Schema directly, NOT
  from ma.Schema. ma.Schema needs an active application context, and the
  unit tests load and dump schemas without one.
"""

from flask_sqlalchemy import SQLAlchemy
from flask_marshmallow import Marshmallow

db = SQLAlchemy()

ma = Marshmallow()

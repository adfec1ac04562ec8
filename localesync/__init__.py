"""
LocaleSync - translation lifecycle engine for SQLAlchemy models
"""
__version__ = "0.1.0"

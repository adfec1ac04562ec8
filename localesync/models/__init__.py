"""
SQLAlchemy models
"""
from localesync.models.translation import Translation

__all__ = [
    "Translation",
]

# Import Base for Alembic
from localesync.core.database import Base

#!/usr/bin/env python3
"""
Create LocaleSync tables.
Used on first run; production schemas are managed by Alembic.
"""
import sys
from pathlib import Path

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from localesync.core.database import engine, Base
from localesync.models import Translation  # noqa: F401


def create_tables():
    """Create all tables"""
    print("🔧 Creating tables...")
    
    try:
        Base.metadata.create_all(bind=engine)
        print("✅ Tables created")
        print("\n📋 Tables:")
        for table_name in Base.metadata.tables:
            print(f"   - {table_name}")
    except Exception as e:
        print(f"❌ Error creating tables: {e}")
        raise


if __name__ == "__main__":
    create_tables()

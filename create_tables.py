"""
Create all database tables
Run with: python3 create_tables.py
"""
from sqlalchemy import inspect

from db import Base, engine

# Import all models so they are registered with Base.metadata
from models.group import Group  # noqa: F401
from models.team import Team  # noqa: F401
from models.round import Round  # noqa: F401
from models.match import Match  # noqa: F401

if __name__ == "__main__":
    print("🔨 Creating all tables...")
    Base.metadata.create_all(bind=engine)
    print("✅ All tables created successfully!")

    inspector = inspect(engine)
    tables = inspector.get_table_names()
    print(f"\n📋 Created tables ({len(tables)}):")
    for table in sorted(tables):
        print(f"   - {table}")

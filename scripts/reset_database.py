#!/usr/bin/env python3
"""
Reset tournament progress: delete every match and round, keep groups and teams.
Run with: PYTHONPATH=. python3 scripts/reset_database.py
"""
from db import SessionLocal
from models.match import Match
from models.round import Round
from models.team import Team


def reset_database():
    """Clear rounds and matches so the tournament can be replayed"""
    db = SessionLocal()
    try:
        matches = db.query(Match).delete(synchronize_session=False)
        rounds = db.query(Round).delete(synchronize_session=False)
        db.commit()

        print(f"Matches deleted: {matches}")
        print(f"Rounds deleted: {rounds}")
        print(f"Teams preserved: {db.query(Team).count()}")
        print("✅ Database reset complete!")
    except Exception as e:
        db.rollback()
        print(f"❌ Error resetting database: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    print("🔄 Resetting database...")
    print("⚠️  This will delete ALL rounds and matches but keep groups and teams")

    confirm = input("Continue? (y/N): ")
    if confirm.lower() == 'y':
        reset_database()
    else:
        print("❌ Reset cancelled")

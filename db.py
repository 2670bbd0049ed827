from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, declarative_base
from core.config import settings

DATABASE_URL = settings.database_url


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    # Hosted PostgreSQL: connection pooling and SSL
    return {
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "connect_args": {
            "sslmode": "require",
            "connect_timeout": 10
        },
    }


engine = create_engine(DATABASE_URL, echo=settings.debug, **_engine_options(DATABASE_URL))

# Base class for models
Base = declarative_base()

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    FastAPI dependency: open a session for the request and close it afterwards.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def test_connection():
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
            print("✅ Database connection OK")
            print(f"URL: {engine.url.render_as_string(hide_password=True)}")
    except Exception as e:
        print("❌ Database connection failed:")
        print(e)


if __name__ == "__main__":
    test_connection()

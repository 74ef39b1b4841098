from sqlalchemy.orm import DeclarativeBase


class BaseSQL(DeclarativeBase):
    """Main metadata object for all SQLAlchemy models."""

    pass

# thethought/db/base.py
from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


# JSONB en Postgres, JSON plano en SQLite (tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")

# app/db/base_class.py

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base

# Single declarative base shared by every model in the service.
Base = declarative_base()

# JSONB on Postgres, plain JSON elsewhere (the SQLite test database).
JSONType = JSON().with_variant(JSONB(), "postgresql")

"""Custom SQLAlchemy types for NoteVault models with cross-DB support."""

import json
import uuid
from typing import Any, List, Optional

from sqlalchemy import String, Text, TypeDecorator


class JSONList(TypeDecorator):
    """
    Store a list of JSON values (strings or small dicts):

    - On PostgreSQL: uses JSONB
    - On SQLite (and others): stores JSON text in a TEXT column

    Always returns a list, so NULL reads back as [].
    """

    cache_ok = True
    impl = Text  # placeholder, real impl decided per-dialect

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import JSONB

            return dialect.type_descriptor(JSONB())
        # Fallback (e.g., sqlite): JSON as TEXT
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value: Optional[List[Any]], dialect):
        if value is None:
            value = []
        values = list(value)
        if dialect.name == "postgresql":
            return values
        # JSON encode for TEXT storage
        return json.dumps(values, ensure_ascii=False)

    def process_result_value(self, value, dialect) -> List[Any]:
        if value is None:
            return []
        if isinstance(value, list):
            return value
        return list(json.loads(value))


class GUID(TypeDecorator):
    """
    Platform-independent GUID/UUID type.

    - Uses PostgreSQL UUID type when available
    - Falls back to CHAR(36) storing hex string form on other DBs (e.g., SQLite)
    """

    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            from sqlalchemy.dialects.postgresql import UUID as PG_UUID

            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        # PostgreSQL expects uuid.UUID when as_uuid=True, others expect string
        if dialect.name == "postgresql":
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if dialect.name == "postgresql":
            # Already a uuid.UUID from PG when as_uuid=True
            return value
        # Coerce string back to uuid.UUID for SQLite/others
        return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))

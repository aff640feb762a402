"""statement_db: settings database library (SQLAlchemy).

Public exports
--------------
- ``Base`` and ``metadata`` of the schema
- ORM models in ``statement_db.models.settings`` (re-exported)
- Engine/session helpers in ``statement_db.client``
"""

from __future__ import annotations

from .client import dispose_engines, get_engine, get_session, session_scope
from .models.settings import Base, StSetting

metadata = Base.metadata

__all__ = [
    "Base",
    "metadata",
    "StSetting",
    "dispose_engines",
    "get_engine",
    "get_session",
    "session_scope",
]

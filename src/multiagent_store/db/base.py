from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    # Shared metadata for every ORM model; `init_db` creates tables from it.
    pass

from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine


def resolve_engine(engine: Optional[Engine] = None, database_url: Optional[str] = None) -> Engine:
    if engine is not None:
        return engine
    database_url = database_url or os.getenv("DATABASE_URL")
    if not database_url:
        raise RuntimeError("DATABASE_URL required if engine not provided")
    return _engine_for(database_url)


@lru_cache(maxsize=4)
def _engine_for(database_url: str) -> Engine:
    return create_engine(database_url, future=True)

"""Database package.

Provides session management, the table definitions and the repositories.

## Usage

```python
from vault.db import get_db
from vault.db.repositories import AccountRepository

async for session in get_db():
    repo = AccountRepository(await session.connection())
    result = await repo.get_by_id(1)
```
"""

from .session import create_engine, create_engine_for_url, dispose_engine, get_db, get_engine
from .tables import metadata

__all__ = [
    "create_engine",
    "create_engine_for_url",
    "dispose_engine",
    "get_db",
    "get_engine",
    "metadata",
]

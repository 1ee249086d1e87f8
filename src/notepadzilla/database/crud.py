from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from . import models

async def get_entry(db: AsyncSession, key: str) -> models.KeyValueEntry | None:
    result = await db.execute(select(models.KeyValueEntry).filter(models.KeyValueEntry.key == key))
    return result.scalars().first()

async def put_entry(db: AsyncSession, key: str, value: str) -> models.KeyValueEntry:
    """Inserts or overwrites the entry for `key`. Does not commit."""
    db_entry = await get_entry(db, key)
    if db_entry is None:
        db_entry = models.KeyValueEntry(key=key, value=value)
        db.add(db_entry)
    else:
        db_entry.value = value
    await db.flush()
    return db_entry

async def delete_entry(db: AsyncSession, key: str) -> bool:
    """Removes the entry for `key` if present. Does not commit."""
    db_entry = await get_entry(db, key)
    if db_entry is None:
        return False
    await db.delete(db_entry)
    await db.flush()
    return True

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
from .models import Link, utcnow
from typing import Optional, List


class CodeConflictError(Exception):
    """Raised when the unique constraint on links.code rejects an insert."""

    def __init__(self, code: str):
        super().__init__(f"Code already exists: {code}")
        self.code = code


async def create_link(db: AsyncSession, code: str, target_url: str) -> Link:
    link = Link(code=code, target_url=target_url, total_clicks=0, last_clicked=None)
    db.add(link)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise CodeConflictError(code) from e
    await db.refresh(link)
    return link

async def get_link_by_code(db: AsyncSession, code: str) -> Optional[Link]:
    result = await db.execute(select(Link).where(Link.code == code))
    return result.scalar_one_or_none()

async def link_exists(db: AsyncSession, code: str) -> bool:
    result = await db.execute(select(Link.id).where(Link.code == code))
    return result.first() is not None

async def list_links(db: AsyncSession) -> List[Link]:
    result = await db.execute(select(Link).order_by(Link.created_at.desc()))
    return list(result.scalars().all())

async def delete_link(db: AsyncSession, code: str) -> Optional[Link]:
    result = await db.execute(
        delete(Link)
        .where(Link.code == code)
        .returning(Link)
    )
    deleted = result.scalar_one_or_none()
    await db.commit()
    return deleted

async def record_click(db: AsyncSession, code: str) -> Optional[Link]:
    # Single UPDATE so concurrent redirects never lose an increment
    result = await db.execute(
        update(Link)
        .where(Link.code == code)
        .values(total_clicks=Link.total_clicks + 1, last_clicked=utcnow())
        .returning(Link)
        .execution_options(populate_existing=True)
    )
    link = result.scalar_one_or_none()
    await db.commit()
    return link

import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from tinylink.crud import (
    CodeConflictError,
    create_link,
    delete_link,
    get_link_by_code,
    link_exists,
    list_links,
    record_click,
)
from tinylink.database import AsyncSessionLocal


@pytest.mark.asyncio
async def test_create_link_defaults(db: AsyncSession):
    link = await create_link(db, "abc123", "https://example.com")

    assert link.id is not None
    assert link.code == "abc123"
    assert link.target_url == "https://example.com"
    assert link.total_clicks == 0
    assert link.last_clicked is None
    assert link.created_at is not None

@pytest.mark.asyncio
async def test_create_duplicate_raises_conflict(db: AsyncSession):
    await create_link(db, "dup", "https://a.example")

    with pytest.raises(CodeConflictError):
        await create_link(db, "dup", "https://b.example")

    # Session is usable again after the rollback
    assert (await get_link_by_code(db, "dup")).target_url == "https://a.example"

@pytest.mark.asyncio
async def test_link_exists(db: AsyncSession):
    assert not await link_exists(db, "nope")
    await create_link(db, "yes", "https://example.com")
    assert await link_exists(db, "yes")

@pytest.mark.asyncio
async def test_list_links_newest_first(db: AsyncSession):
    await create_link(db, "first", "https://one.example")
    await asyncio.sleep(0.01)
    await create_link(db, "second", "https://two.example")

    codes = [link.code for link in await list_links(db)]
    assert codes == ["second", "first"]

@pytest.mark.asyncio
async def test_delete_link(db: AsyncSession):
    await create_link(db, "gone", "https://example.com")

    deleted = await delete_link(db, "gone")
    assert deleted is not None
    assert deleted.code == "gone"
    assert await get_link_by_code(db, "gone") is None
    assert await delete_link(db, "gone") is None

@pytest.mark.asyncio
async def test_record_click_increments(db: AsyncSession):
    await create_link(db, "clicky", "https://example.com")

    link = await record_click(db, "clicky")
    assert link.total_clicks == 1
    assert link.last_clicked is not None

    link = await record_click(db, "clicky")
    assert link.total_clicks == 2

@pytest.mark.asyncio
async def test_record_click_unknown_code(db: AsyncSession):
    assert await record_click(db, "missing") is None

@pytest.mark.asyncio
async def test_record_click_concurrent_sessions(db: AsyncSession):
    await create_link(db, "busy", "https://example.com")

    async def click():
        async with AsyncSessionLocal() as session:
            await record_click(session, "busy")

    await asyncio.gather(*(click() for _ in range(5)))

    async with AsyncSessionLocal() as session:
        link = await get_link_by_code(session, "busy")
    assert link.total_clicks == 5

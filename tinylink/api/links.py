import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..schemas import LinkCreate, LinkResponse, ErrorResponse
from ..crud import (
    CodeConflictError,
    create_link,
    delete_link,
    get_link_by_code,
    link_exists,
    list_links,
)
from ..utils import generate_random_code, is_valid_url
from ..config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

SERVER_ERROR = "Server error"
NOT_FOUND = "Not found"
CODE_TAKEN = "Code already exists"

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

@router.post("/links", response_model=LinkResponse, status_code=status.HTTP_201_CREATED, responses=ERROR_RESPONSES)
async def shorten_link(
    link_in: LinkCreate,
    db: AsyncSession = Depends(get_db)
):
    if not is_valid_url(link_in.target_url):
        raise HTTPException(status_code=400, detail="Invalid URL")

    try:
        # 1. Resolve code; caller-supplied codes are used verbatim
        if link_in.code:
            code = link_in.code
            if await link_exists(db, code):
                raise HTTPException(status_code=409, detail=CODE_TAKEN)
        else:
            for _ in range(max(settings.CODE_GENERATION_ATTEMPTS, 1)):
                code = generate_random_code(settings.CODE_LENGTH)
                if not await link_exists(db, code):
                    break
            else:
                raise HTTPException(status_code=409, detail=CODE_TAKEN)

        # 2. Save to DB; the unique constraint catches a concurrent insert
        link = await create_link(db, code, link_in.target_url)
    except HTTPException:
        raise
    except CodeConflictError:
        raise HTTPException(status_code=409, detail=CODE_TAKEN)
    except Exception:
        logger.exception("Failed to create link")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

    logger.info("Created link %s -> %s", link.code, link.target_url)
    return link

@router.get("/links", response_model=List[LinkResponse], responses=ERROR_RESPONSES)
async def get_links(db: AsyncSession = Depends(get_db)):
    try:
        return await list_links(db)
    except Exception:
        logger.exception("Failed to list links")
        raise HTTPException(status_code=500, detail=SERVER_ERROR)

@router.get("/links/{code}", response_model=LinkResponse, responses=ERROR_RESPONSES)
async def get_link_stats(
    code: str,
    db: AsyncSession = Depends(get_db)
):
    try:
        link = await get_link_by_code(db, code)
    except Exception:
        logger.exception("Failed to fetch link %s", code)
        raise HTTPException(status_code=500, detail=SERVER_ERROR)
    if not link:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return link

@router.delete("/links/{code}", status_code=status.HTTP_204_NO_CONTENT, responses=ERROR_RESPONSES)
async def remove_link(
    code: str,
    db: AsyncSession = Depends(get_db)
):
    try:
        deleted = await delete_link(db, code)
    except Exception:
        logger.exception("Failed to delete link %s", code)
        raise HTTPException(status_code=500, detail=SERVER_ERROR)
    if not deleted:
        raise HTTPException(status_code=404, detail=NOT_FOUND)

    logger.info("Deleted link %s", code)
    return None

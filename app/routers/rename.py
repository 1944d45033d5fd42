import logging

from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool

from app.dependencies import get_user_files_service
from app.exceptions import UserFilesError
from app.schemas.filesystem import RenameRequest, RenameResponse
from app.services.user_files import UserFilesService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rename", tags=["filesystem"])


@router.patch("", response_model=RenameResponse)
async def rename_item(
    body: RenameRequest,
    service: UserFilesService = Depends(get_user_files_service),
):
    """
    Rename a file or folder without moving it to another folder
    """
    try:
        result = await run_in_threadpool(service.rename, body.old_path, body.new_name)
    except UserFilesError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    except Exception as e:
        logger.exception("Error renaming item")
        raise HTTPException(status_code=500, detail="Failed to rename item") from e

    return RenameResponse(data=result)

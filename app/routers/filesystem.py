import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from starlette.concurrency import run_in_threadpool

from app.dependencies import get_user_files_service
from app.exceptions import UserFilesError
from app.schemas.filesystem import CreateFolderRequest, FolderCreatedResponse, TreeResponse
from app.services.user_files import UserFilesService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/filesystem", tags=["filesystem"])


@router.get("", response_model=TreeResponse)
async def get_filesystem(
    path: str = Query("", description="Folder to read, relative to the user files directory"),
    service: UserFilesService = Depends(get_user_files_service),
):
    """
    Read a folder of the user files directory as a tree
    """
    try:
        tree = await run_in_threadpool(service.read_tree, path)
    except UserFilesError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    except Exception as e:
        logger.exception("Error reading filesystem")
        raise HTTPException(status_code=500, detail="Failed to read filesystem") from e

    return TreeResponse(data=tree)


@router.post("", response_model=FolderCreatedResponse)
async def create_folder(
    body: CreateFolderRequest,
    service: UserFilesService = Depends(get_user_files_service),
):
    """
    Create a folder, including any missing parent folders
    """
    try:
        folder = await run_in_threadpool(service.create_folder, body.folder_path, body.name)
    except UserFilesError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    except Exception as e:
        logger.exception("Error creating folder")
        raise HTTPException(status_code=500, detail="Failed to create folder") from e

    return FolderCreatedResponse(data=folder)

"""Request dependencies shared by the routers."""

from fastapi import Depends, Request

from app.config import Settings
from app.services.user_files import UserFilesService


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was created with"""
    return request.app.state.settings


def get_user_files_service(settings: Settings = Depends(get_app_settings)) -> UserFilesService:
    """Service bound to the configured user files directory"""
    return UserFilesService(
        settings.user_files_dir,
        default_folders=settings.default_folders,
        root_folder_name=settings.root_folder_name,
    )

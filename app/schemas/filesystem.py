from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FileNode(CamelModel):
    """File entry in a folder tree"""
    id: str
    name: str
    type: Literal["file"] = "file"
    size: int
    extension: str
    mime_type: str
    created_at: datetime
    updated_at: datetime


class FolderNode(CamelModel):
    """Folder entry in a folder tree, children ordered newest first"""
    id: str
    name: str
    type: Literal["folder"] = "folder"
    children: list[Union["FolderNode", FileNode]] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


TreeNode = Union[FolderNode, FileNode]


class RenameResult(CamelModel):
    """Paths involved in a rename, relative to the user files directory"""
    old_path: str
    new_path: str
    new_name: str


class CreateFolderRequest(CamelModel):
    """Body of a create-folder request"""
    folder_path: Optional[StrictStr] = None
    name: Optional[StrictStr] = None


class RenameRequest(CamelModel):
    """Body of a rename request"""
    old_path: Optional[StrictStr] = None
    new_name: Optional[StrictStr] = None


class TreeResponse(BaseModel):
    success: bool = True
    data: FolderNode


class FolderCreatedResponse(BaseModel):
    success: bool = True
    message: str = "Folder created successfully"
    data: FolderNode


class RenameResponse(BaseModel):
    success: bool = True
    message: str = "Item renamed successfully"
    data: RenameResult


class ErrorResponse(BaseModel):
    success: bool = False
    error: str

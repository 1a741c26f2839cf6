from datetime import datetime
from typing import List, Optional

from devexchange.schemas.common.camel_base import CamelModel


class ImageUploadOut(CamelModel):
    id: int
    image_name: str
    folder_name: str
    image_path: str
    created_date: datetime
    group_id: int
    config_link_id: int
    user_id: Optional[str] = None
    is_active: bool


class UploadResult(CamelModel):
    success: bool = True
    message: str
    data: List[ImageUploadOut]


class UserImageOut(CamelModel):
    id: int
    file_name: str
    config_link_id: int
    upload_date: datetime
    image_path: str


class DeleteImageRequest(CamelModel):
    image_id: int
    container_name: Optional[str] = None
    file_name: Optional[str] = None


class DeleteConfigLinkRequest(CamelModel):
    # named after the form field the client already sends; holds a config link id
    category_id: int

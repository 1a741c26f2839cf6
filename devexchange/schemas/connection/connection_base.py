from datetime import datetime
from typing import List, Optional

from devexchange.schemas.common.camel_base import CamelModel


class ConnectionOut(CamelModel):
    id: int
    title: str
    link: str
    image_path: Optional[str] = None
    description: str
    created_date: datetime
    git_hub_link: Optional[str] = None


class OwnedConnectionOut(ConnectionOut):
    is_active: bool
    is_featured: bool


class AdminConnectionOut(OwnedConnectionOut):
    user_id: str
    user_email: Optional[str] = None
    user_name: Optional[str] = None


class ConnectionList(CamelModel):
    success: bool = True
    data: List[ConnectionOut]


class OwnedConnectionList(CamelModel):
    success: bool = True
    data: List[OwnedConnectionOut]


class AdminConnectionList(CamelModel):
    success: bool = True
    data: List[AdminConnectionOut]


class ConnectionCreated(CamelModel):
    success: bool = True
    message: str
    data: OwnedConnectionOut


class UpdateConnectionStatusRequest(CamelModel):
    connection_id: int
    is_active: bool


class UpdateConnectionFeatureRequest(CamelModel):
    connection_id: int
    is_featured: bool


class EmailRequest(CamelModel):
    website_id: int

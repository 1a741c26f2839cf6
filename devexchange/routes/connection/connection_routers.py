import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from devexchange.core.database import get_db
from devexchange.core.security import get_current_user, require_admin, require_trusted_web_connect
from devexchange.models.connection_db import connection_crud
from devexchange.models.user_db.user_db import User
from devexchange.schemas.category.category_base import SuccessMessage
from devexchange.schemas.connection.connection_base import (
    AdminConnectionList,
    AdminConnectionOut,
    ConnectionCreated,
    ConnectionList,
    ConnectionOut,
    OwnedConnectionList,
    OwnedConnectionOut,
    UpdateConnectionFeatureRequest,
    UpdateConnectionStatusRequest,
)
from devexchange.services.storage import content_type_for, storage

logger = logging.getLogger(__name__)

CONTROLLER_NAME = "WebsiteConnection"
BANNER_FOLDER = f"{CONTROLLER_NAME}/website-banners"

connection_router = APIRouter(prefix=f"/{CONTROLLER_NAME}", tags=["Website Connections"])


@connection_router.post("/uploadUserProgramData", response_model=ConnectionCreated)
async def upload_connection(
    title: Optional[str] = Form(None),
    link: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    git_hub_link: Optional[str] = Form(None, alias="gitHubLink"),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_web_connect),
):
    if image is None:
        raise HTTPException(status_code=400, detail="No banner image uploaded")
    if not title or not link or not description:
        raise HTTPException(status_code=400, detail="Title, link and description are required")

    data = await image.read()
    if not data:
        raise HTTPException(status_code=400, detail="No banner image uploaded")

    file_name = storage.new_file_name(image.filename)
    url = storage.upload_file(data, content_type_for(image.filename), BANNER_FOLDER, file_name)
    connection = connection_crud.create_connection(
        db,
        current_user.id,
        title=title,
        link=link,
        description=description,
        git_hub_link=git_hub_link or None,
        image_path=url,
    )
    return ConnectionCreated(
        message="Website connection created successfully",
        data=OwnedConnectionOut.model_validate(connection),
    )


@connection_router.get("/byUser/{user_id}", response_model=ConnectionList)
def get_user_connections(user_id: str, db: Session = Depends(get_db)):
    connections = connection_crud.list_active_by_user(db, user_id)
    return ConnectionList(data=[ConnectionOut.model_validate(c) for c in connections])


@connection_router.get("/image/{file_name}")
def get_banner_image(file_name: str):
    key = storage.object_key(BANNER_FOLDER, file_name)
    if not storage.exists(key):
        raise HTTPException(status_code=404, detail="Image not found")
    return RedirectResponse(storage.public_url(key), headers={"Cache-Control": "public, max-age=86400"})


@connection_router.get("/active", response_model=ConnectionList)
def get_active_connections(db: Session = Depends(get_db)):
    return ConnectionList(data=[ConnectionOut.model_validate(c) for c in connection_crud.list_active(db)])


@connection_router.get("/featuredActive", response_model=ConnectionList)
def get_featured_active_connections(db: Session = Depends(get_db)):
    return ConnectionList(
        data=[ConnectionOut.model_validate(c) for c in connection_crud.list_active(db, featured_only=True)]
    )


@connection_router.get("/GetAllConnections", response_model=AdminConnectionList)
def get_all_connections(db: Session = Depends(get_db), _: User = Depends(require_admin)):
    data = []
    for connection in connection_crud.list_all_with_owner(db):
        item = AdminConnectionOut.model_validate(connection)
        if connection.owner:
            item.user_email = connection.owner.email
            item.user_name = connection.owner.user_name
        data.append(item)
    return AdminConnectionList(data=data)


@connection_router.get("/owned", response_model=OwnedConnectionList)
def get_owned_connections(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return OwnedConnectionList(
        data=[OwnedConnectionOut.model_validate(c) for c in connection_crud.list_owned(db, current_user.id)]
    )


@connection_router.post("/UpdateConnectionStatus", response_model=SuccessMessage)
def update_connection_status(
    request: UpdateConnectionStatusRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    if not connection_crud.set_connection_active(db, request.connection_id, request.is_active):
        raise HTTPException(status_code=404, detail="Connection not found")
    return SuccessMessage(message="Connection status updated successfully")


@connection_router.post("/UpdateConnectionFeatureStatus", response_model=SuccessMessage)
def update_connection_feature_status(
    request: UpdateConnectionFeatureRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    if not connection_crud.set_connection_featured(db, request.connection_id, request.is_featured):
        raise HTTPException(status_code=404, detail="Connection not found")
    return SuccessMessage(message="Connection feature status updated successfully")


@connection_router.delete("/{connection_id}", response_model=SuccessMessage)
def delete_connection(
    connection_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    connection = connection_crud.get_connection(db, connection_id)
    if not connection:
        raise HTTPException(status_code=404, detail="Connection not found")
    if connection.user_id != current_user.id:
        raise HTTPException(status_code=403, detail="You do not have permission to delete this connection")

    image_path = connection.image_path
    connection_crud.delete_connection(db, connection)

    if image_path:
        key = storage.key_for_url(image_path)
        if key is None or not storage.delete_file(key):
            logger.warning("Banner %s was already gone", image_path)
    return SuccessMessage(message="Connection deleted successfully")

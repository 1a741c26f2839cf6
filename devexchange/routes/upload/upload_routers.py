import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from devexchange.core.database import get_db
from devexchange.core.security import ensure_owner_or_admin, require_admin, require_trusted_classification_quiz
from devexchange.models.category_db import category_crud
from devexchange.models.image_db import image_crud
from devexchange.models.user_db.user_db import User
from devexchange.schemas.category.category_base import (
    CategoryActiveUpdate,
    CategoryFeatureUpdate,
    SuccessMessage,
)
from devexchange.schemas.category.full_category import (
    CatalogueOut,
    CategorySummary,
    FullCategory,
    FullCategoryResult,
)
from devexchange.schemas.image.image_base import (
    DeleteConfigLinkRequest,
    DeleteImageRequest,
    ImageUploadOut,
    UploadResult,
    UserImageOut,
)
from devexchange.services.storage import content_type_for, folder_for, storage

logger = logging.getLogger(__name__)

CONTROLLER_NAME = "UploadManager"

upload_router = APIRouter(prefix=f"/{CONTROLLER_NAME}", tags=["Upload Manager"])


def image_folder(folder: str) -> str:
    return f"{CONTROLLER_NAME}/{folder.strip().lower()}"


def _remove_image_object(image_path: str):
    key = storage.key_for_url(image_path)
    if key is None or not storage.delete_file(key):
        logger.warning("Image object for %s was already gone", image_path)


@upload_router.get("/image/{folder}/{file_name}")
def get_image(folder: str, file_name: str):
    key = storage.object_key(image_folder(folder), file_name)
    if not storage.exists(key):
        raise HTTPException(status_code=404, detail="Image not found")
    return RedirectResponse(storage.public_url(key), headers={"Cache-Control": "public, max-age=86400"})


@upload_router.post("/uploadImage", response_model=UploadResult)
async def upload_images(
    files: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_classification_quiz),
):
    if not files:
        raise HTTPException(status_code=400, detail="No files uploaded")

    category = category_crud.get_newest_category_for_user(db, current_user.id)
    if not category:
        raise HTTPException(status_code=400, detail="No category found for the user")

    folder = folder_for(category.category_name)
    group_id = image_crud.next_group_id(db)

    records = []
    for upload in files:
        data = await upload.read()
        if not data:
            continue
        file_name = storage.new_file_name(upload.filename)
        url = storage.upload_file(data, content_type_for(upload.filename), image_folder(folder), file_name)
        records.append({
            "image_name": upload.filename,
            "folder_name": folder,
            "image_path": url,
            "group_id": group_id,
            "config_link_id": category.config_link_id,
            "user_id": current_user.id,
            "is_active": True,
        })

    if not records:
        raise HTTPException(status_code=400, detail="No files uploaded")

    images = image_crud.create_images(db, records)
    logger.info("User %s uploaded %d images to group %s", current_user.id, len(images), group_id)
    return UploadResult(
        message="Files uploaded successfully",
        data=[ImageUploadOut.model_validate(image) for image in images],
    )


@upload_router.post("/full-category", response_model=FullCategoryResult)
def upload_full_category(
    full_category: FullCategory,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_classification_quiz),
):
    category = category_crud.create_full_category(db, current_user.id, full_category)
    return FullCategoryResult(
        message="Configuration uploaded successfully!",
        category=CategorySummary(id=category.id, category_name=category.category_name),
    )


@upload_router.get("/Get-Active-Categories", response_model=CatalogueOut)
def get_active_categories(db: Session = Depends(get_db)):
    return category_crud.list_catalogue(db)


@upload_router.get("/Get-Featured-Categories", response_model=CatalogueOut)
def get_featured_categories(db: Session = Depends(get_db)):
    return category_crud.list_catalogue(db, featured_only=True)


@upload_router.get("/byUser/{user_id}", response_model=List[UserImageOut])
def get_user_images(user_id: str, db: Session = Depends(get_db)):
    return [
        UserImageOut(
            id=image.id,
            file_name=image.image_name,
            config_link_id=image.config_link_id,
            upload_date=image.created_date,
            image_path=image.image_path,
        )
        for image in image_crud.list_images_by_user(db, user_id)
    ]


@upload_router.delete("/deleteImage", response_model=SuccessMessage)
def delete_image(
    request: DeleteImageRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_classification_quiz),
):
    image = image_crud.get_image(db, request.image_id)
    if not image:
        raise HTTPException(status_code=404, detail="Image not found")
    ensure_owner_or_admin(image.user_id, current_user, "You do not have permission to delete this image")

    _remove_image_object(image_crud.delete_image(db, image.id))
    return SuccessMessage(message="Image deleted successfully")


@upload_router.delete("/deleteCategory", response_model=SuccessMessage)
def delete_config_link(
    request: DeleteConfigLinkRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_trusted_classification_quiz),
):
    for owner_id in image_crud.config_link_owners(db, request.category_id):
        ensure_owner_or_admin(owner_id, current_user, "You do not have permission to delete this category")

    image_paths, category_count = image_crud.delete_config_link(db, request.category_id)
    for image_path in image_paths:
        _remove_image_object(image_path)
    logger.info(
        "Config link %s removed: %d images, %d categories",
        request.category_id, len(image_paths), category_count,
    )
    return SuccessMessage(message="Category and all associated images deleted successfully")


@upload_router.post("/UpdateCategoryFeatureStatus", response_model=SuccessMessage)
def update_category_feature_status(
    request: CategoryFeatureUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    if not category_crud.set_category_featured(db, request.category_id, request.is_featured):
        raise HTTPException(status_code=404, detail="Category not found")
    return SuccessMessage(message="Category feature status updated successfully")


@upload_router.post("/UpdateCategoryActiveStatus", response_model=SuccessMessage)
def update_category_active_status(
    request: CategoryActiveUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
):
    if not category_crud.set_category_active(db, request.category_id, request.is_active):
        raise HTTPException(status_code=404, detail="Category not found")
    return SuccessMessage(message="Category active status updated successfully")

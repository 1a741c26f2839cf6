from typing import List, Set

from sqlalchemy import func
from sqlalchemy.orm import Session

from devexchange.models.category_db.category_db import Category
from devexchange.models.image_db.image_db import ImageUpload


def get_image(db: Session, image_id: int):
    return db.query(ImageUpload).filter(ImageUpload.id == image_id).first()


def list_images_by_user(db: Session, user_id: str) -> List[ImageUpload]:
    return db.query(ImageUpload).filter(ImageUpload.user_id == user_id).order_by(ImageUpload.id).all()


def list_images_by_config_link(db: Session, config_link_id: int) -> List[ImageUpload]:
    return (
        db.query(ImageUpload)
        .filter(ImageUpload.config_link_id == config_link_id)
        .order_by(ImageUpload.image_name, ImageUpload.id)
        .all()
    )


def next_group_id(db: Session) -> int:
    return (db.query(func.max(ImageUpload.group_id)).scalar() or 0) + 1


def create_images(db: Session, images: List[dict]) -> List[ImageUpload]:
    db_images = [ImageUpload(**image) for image in images]
    db.add_all(db_images)
    db.commit()
    for db_image in db_images:
        db.refresh(db_image)
    return db_images


def delete_image(db: Session, image_id: int):
    """Delete the row and return the stored path, or None when absent."""
    image = get_image(db, image_id)
    if not image:
        return None
    image_path = image.image_path
    db.delete(image)
    db.commit()
    return image_path


def config_link_owners(db: Session, config_link_id: int) -> Set[str]:
    """Ids of every user owning a category or image under ``config_link_id``."""
    owners = {
        user_id
        for (user_id,) in db.query(Category.user_id).filter(Category.config_link_id == config_link_id).distinct()
    }
    owners.update(
        user_id
        for (user_id,) in db.query(ImageUpload.user_id).filter(ImageUpload.config_link_id == config_link_id).distinct()
    )
    return owners


def delete_config_link(db: Session, config_link_id: int):
    """Remove every image row and category sharing ``config_link_id``.

    Returns the image paths that were removed and the number of categories.
    """
    images = list_images_by_config_link(db, config_link_id)
    categories = db.query(Category).filter(Category.config_link_id == config_link_id).all()
    image_paths = [image.image_path for image in images]
    for image in images:
        db.delete(image)
    for category in categories:
        db.delete(category)
    db.commit()
    return image_paths, len(categories)

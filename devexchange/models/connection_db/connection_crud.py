import logging
from typing import List

from sqlalchemy.orm import Session, joinedload

from devexchange.models.connection_db.connection_db import WebsiteConnection

logger = logging.getLogger(__name__)


def get_connection(db: Session, connection_id: int):
    return db.query(WebsiteConnection).filter(WebsiteConnection.id == connection_id).first()


def create_connection(
    db: Session,
    user_id: str,
    title: str,
    link: str,
    description: str,
    git_hub_link: str = None,
    image_path: str = None,
):
    connection = WebsiteConnection(
        title=title,
        link=link,
        description=description,
        git_hub_link=git_hub_link,
        image_path=image_path,
        user_id=user_id,
        is_active=False,
        is_featured=False,
    )
    db.add(connection)
    db.commit()
    db.refresh(connection)
    logger.info("Website connection %s submitted by %s", connection.id, user_id)
    return connection


def list_active_by_user(db: Session, user_id: str) -> List[WebsiteConnection]:
    return (
        db.query(WebsiteConnection)
        .filter(WebsiteConnection.user_id == user_id, WebsiteConnection.is_active.is_(True))
        .order_by(WebsiteConnection.id)
        .all()
    )


def list_active(db: Session, featured_only: bool = False) -> List[WebsiteConnection]:
    query = db.query(WebsiteConnection).filter(WebsiteConnection.is_active.is_(True))
    if featured_only:
        query = query.filter(WebsiteConnection.is_featured.is_(True))
    return query.order_by(WebsiteConnection.id).all()


def list_all_with_owner(db: Session) -> List[WebsiteConnection]:
    return (
        db.query(WebsiteConnection)
        .options(joinedload(WebsiteConnection.owner))
        .order_by(WebsiteConnection.id)
        .all()
    )


def list_owned(db: Session, user_id: str) -> List[WebsiteConnection]:
    return (
        db.query(WebsiteConnection)
        .filter(WebsiteConnection.user_id == user_id)
        .order_by(WebsiteConnection.id)
        .all()
    )


def set_connection_active(db: Session, connection_id: int, is_active: bool):
    connection = get_connection(db, connection_id)
    if not connection:
        return None
    connection.is_active = is_active
    db.commit()
    db.refresh(connection)
    return connection


def set_connection_featured(db: Session, connection_id: int, is_featured: bool):
    connection = get_connection(db, connection_id)
    if not connection:
        return None
    connection.is_featured = is_featured
    db.commit()
    db.refresh(connection)
    return connection


def delete_connection(db: Session, connection: WebsiteConnection):
    db.delete(connection)
    db.commit()

from datetime import datetime

from sqlalchemy import Column, String, Boolean, Integer, DateTime, ForeignKey

from devexchange.core.database import Base


class ImageUpload(Base):
    __tablename__ = "image_uploads"

    id = Column(Integer, primary_key=True, index=True)
    folder_name = Column(String(255), nullable=False)
    image_name = Column(String(255), nullable=False)
    image_path = Column(String(1024), nullable=False, index=True)
    created_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    config_link_id = Column(Integer, nullable=False, index=True)
    group_id = Column(Integer, nullable=False, default=0)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)

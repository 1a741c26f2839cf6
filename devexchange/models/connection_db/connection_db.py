from datetime import datetime

from sqlalchemy import Column, String, Boolean, Integer, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from devexchange.core.database import Base


class WebsiteConnection(Base):
    __tablename__ = "website_connections"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    link = Column(String(1024), nullable=False)
    description = Column(Text, nullable=False)
    git_hub_link = Column(String(1024), nullable=True)
    image_path = Column(String(1024), nullable=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    created_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    is_active = Column(Boolean, default=False, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)

    owner = relationship("User")

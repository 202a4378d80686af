# app/system_models/template_model/template_model.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from app.database.connection import Base
from app.helpers.time import utcnow

class Template(Base):
    __tablename__ = "templates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False, default="evolution")
    description = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

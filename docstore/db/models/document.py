from sqlalchemy import Column, LargeBinary, String

from docstore.db.base import BaseModel


class Document(BaseModel):
    __tablename__ = "documents"

    name = Column(String(255), nullable=False)

    # Локатор: задано не больше одного поля
    path = Column(String(1024), nullable=True)
    inline_content = Column(LargeBinary, nullable=True)
    object_key = Column(String(1024), nullable=True)

    # Хранилище, активное при создании; NULL для старых записей
    storage_backend = Column(String(32), nullable=True)

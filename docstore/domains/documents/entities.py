import uuid
from datetime import datetime
from typing import Optional

from docstore.domains.storage.resolver import StorageType


class Document:
    """Документ: имя, локатор содержимого и временные метки"""

    def __init__(
        self,
        uuid: Optional[uuid.UUID],
        name: str,
        path: Optional[str] = None,
        inline_content: Optional[bytes] = None,
        object_key: Optional[str] = None,
        storage_backend: Optional[StorageType] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        locators = [value for value in (path, inline_content, object_key) if value is not None]
        if len(locators) > 1:
            raise ValueError("A document can have at most one content locator")

        self.uuid = uuid
        self.name = name
        self.path = path
        self.inline_content = inline_content
        self.object_key = object_key
        self.storage_backend = storage_backend
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def id(self) -> Optional[str]:
        """Внешний идентификатор; None пока запись не сохранена"""
        return str(self.uuid) if self.uuid else None

    @classmethod
    def create_document(
        cls,
        name: str,
        storage_backend: StorageType,
        path: Optional[str] = None,
        inline_content: Optional[bytes] = None,
        object_key: Optional[str] = None
    ) -> "Document":
        """Новый несохраненный документ; id и даты назначает репозиторий"""
        return cls(
            uuid=None,
            name=name,
            path=path,
            inline_content=inline_content,
            object_key=object_key,
            storage_backend=storage_backend
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, Document):
            return False
        return self.uuid == other.uuid

    def __hash__(self) -> int:
        return hash(self.uuid)

    def __repr__(self) -> str:
        return f"Document(uuid={self.uuid}, name={self.name}, backend={self.storage_backend})"

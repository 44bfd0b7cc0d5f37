"""Ошибки слоя хранения документов.

Каждая ошибка содержит читаемое сообщение с исходной причиной,
HTTP слой передает его клиенту без изменений.
"""


class DocumentStoreError(Exception):
    """Базовая ошибка слоя хранения"""


class InvalidInputError(DocumentStoreError):
    """Недостаточно данных для активного хранилища"""


class DocumentNotFoundError(DocumentStoreError):
    """Документ с таким id не найден"""

    def __init__(self, document_id: str):
        self.document_id = document_id
        super().__init__("Document not found")


class SourceUnavailableError(DocumentStoreError):
    """Не удалось прочитать исходный файл при создании документа"""


class NoValidLocationError(DocumentStoreError):
    """Содержимое записи недоступно в текущем хранилище"""


class ContentReadError(DocumentStoreError):
    """Не удалось прочитать содержимое"""


class ObjectStoreError(DocumentStoreError):
    """Ошибка обращения к S3"""


class BackendUnavailableError(ObjectStoreError):
    """S3 недоступен или не заданы учетные данные"""


class TransportError(ObjectStoreError):
    """S3 отклонил запрос или вернул ошибку"""


class ObjectNotFoundError(ObjectStoreError):
    """Объект отсутствует или ответ пришел без тела"""


class DeletionFailedError(DocumentStoreError):
    """Не удалось удалить документ"""


class PersistenceError(DocumentStoreError):
    """Запись или удаление в БД не подтверждены"""

"""Работа с локальными файлами для файлового хранилища и загрузок.

Ошибки ОС не преобразуются: FileNotFoundError если файла нет,
PermissionError / OSError в остальных случаях.
"""
import os
import re
import secrets
import time

import aiofiles
import aiofiles.os

SAFE_FILENAME_PATTERN = re.compile(r"[^A-Za-z0-9.\-]")


def sanitize_filename(name: str) -> str:
    """Замена всех символов вне [A-Za-z0-9.-] на подчеркивание"""
    return SAFE_FILENAME_PATTERN.sub("_", name)


async def read_bytes(path: str) -> bytes:
    async with aiofiles.open(path, "rb") as f:
        return await f.read()


async def read_text(path: str, encoding: str = "utf-8") -> str:
    async with aiofiles.open(path, "r", encoding=encoding, newline="") as f:
        return await f.read()


async def remove(path: str) -> None:
    await aiofiles.os.remove(path)


async def save_upload(directory: str, name: str, data: bytes) -> str:
    """Запись загруженного файла в <directory>/<millis>-<random>-<очищенное имя>, возвращает путь"""
    os.makedirs(directory, exist_ok=True)
    safe_name = sanitize_filename(os.path.basename(name)) or "unnamed"
    filename = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}-{safe_name}"
    path = os.path.join(directory, filename)
    async with aiofiles.open(path, "wb") as f:
        await f.write(data)
    return path

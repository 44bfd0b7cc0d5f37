from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Хранилище: filesystem | database | s3
    storage_type: str = "filesystem"
    # Чтение и удаление через хранилище из записи, а не через активное
    dispatch_by_record_backend: bool = False

    database_url: str = "sqlite+aiosqlite:///./documents.db"
    sql_echo: bool = False

    upload_dir: str = "./uploads"

    # AWS S3
    aws_region: str = "us-east-1"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    s3_bucket_name: str = ""
    s3_endpoint_url: Optional[str] = None
    s3_key_prefix: str = "documents"

    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"
    port: int = 9004
    environment: str = "development"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    # Hosted backend: project URL and the public anonymous key
    BACKEND_URL: str
    BACKEND_ANON_KEY: str
    DATABASE_URL: str
    SESSION_JWT_SECRET: str

    # S3-compatible storage of the hosted backend
    STORAGE_ACCESS_KEY_ID: str
    STORAGE_SECRET_ACCESS_KEY: str
    STORAGE_ENDPOINT_URL: Optional[str] = None
    STORAGE_REGION: str = "us-east-1"
    STORAGE_BUCKET_NAME: str = "assets"

    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024
    IMPORT_PASSWORD: Optional[str] = None
    DEBUG: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def storage_endpoint(self) -> str:
        if self.STORAGE_ENDPOINT_URL:
            return self.STORAGE_ENDPOINT_URL
        return self.BACKEND_URL.rstrip("/") + "/storage/v1/s3"


# Built once at import; missing backend settings abort startup here
settings = Settings()

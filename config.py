import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel


class Settings(BaseModel):
    firebase_credentials: str = "./firebase.json"
    firebase_project_id: Optional[str] = None

    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-2"
    s3_bucket_name: Optional[str] = None
    media_max_size_mb: int = 10

    cors_origins: List[str] = ["http://localhost:3000"]
    bcrypt_rounds: int = 12
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment (and .env if present)"""
        load_dotenv()

        origins = os.environ.get("CORS_ORIGINS", "http://localhost:3000")
        return cls(
            firebase_credentials=os.environ.get("FIREBASE_CREDENTIALS", "./firebase.json"),
            firebase_project_id=os.environ.get("FIREBASE_PROJECT_ID"),
            aws_access_key_id=os.environ.get("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.environ.get("AWS_SECRET_ACCESS_KEY"),
            aws_region=os.environ.get("AWS_REGION", "us-east-2"),
            s3_bucket_name=os.environ.get("S3_BUCKET_NAME"),
            media_max_size_mb=int(os.environ.get("MEDIA_MAX_SIZE_MB", 10)),
            cors_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
            bcrypt_rounds=int(os.environ.get("BCRYPT_ROUNDS", 12)),
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )

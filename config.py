# config.py
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

DEFAULT_TOKEN_EXPIRE_MINUTES = 7 * 24 * 60


@dataclass(frozen=True)
class Settings:
    secret_key: str
    mongo_uri: str = "mongodb://127.0.0.1:27017"
    mongo_db_name: str = "movie_api"
    access_token_expire_minutes: int = DEFAULT_TOKEN_EXPIRE_MINUTES
    s3_bucket: str = ""
    aws_region: str = "us-east-1"
    log_level: str = "INFO"


def load_settings() -> Settings:
    """Build settings from the environment, reading a local .env first if present."""
    load_dotenv()
    secret_key = os.getenv("SECRET_KEY")
    if not secret_key:
        raise RuntimeError("SECRET_KEY must be set to sign access tokens")
    return Settings(
        secret_key=secret_key,
        mongo_uri=os.getenv("MONGO_URI", Settings.mongo_uri),
        mongo_db_name=os.getenv("MONGO_DB_NAME", Settings.mongo_db_name),
        access_token_expire_minutes=int(
            os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", DEFAULT_TOKEN_EXPIRE_MINUTES)
        ),
        s3_bucket=os.getenv("S3_BUCKET", ""),
        aws_region=os.getenv("AWS_REGION", Settings.aws_region),
        log_level=os.getenv("LOG_LEVEL", Settings.log_level),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()

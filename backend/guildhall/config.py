from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Any SQLAlchemy URL. The document store keeps every collection in a
    # single JSON-document table on this database.
    DATABASE_URL: str

    # Bearer tokens are JWTs issued by the identity provider and signed with
    # this key. The "sub" claim is the authenticated user id.
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    AUTH_ISSUER: str = ""  # empty = issuer not checked

    CORS_ORIGINS: list[str] = ["*"]
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    PORT: int = 3000

    # Prepended to generated invite links, e.g. "https://chat.example.com/join/"
    INVITE_LINK_BASE: str = ""

    model_config = {"env_file": ".env"}


settings = Settings()

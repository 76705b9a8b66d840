from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    SECRET_KEY: str
    DATABASE_URL: str
    ALGORITHM: str = "HS256"
    SESSION_EXPIRE_MINUTES: int = 7 * 24 * 60
    SESSION_COOKIE_NAME: str = "session"
    SESSION_COOKIE_SECURE: bool = False

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"

    # OAuth (Google / Facebook)
    BASE_URL: Optional[str] = None
    GOOGLE_CLIENT_ID: Optional[str] = None
    GOOGLE_CLIENT_SECRET: Optional[str] = None
    FACEBOOK_APP_ID: Optional[str] = None
    FACEBOOK_APP_SECRET: Optional[str] = None
    DEV_AUTH_BYPASS: bool = False

    # Upload de imagens
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[str] = None
    UPLOADS_DIR: str = "uploads"
    MAX_FILE_SIZE_MB: int = 10
    MAX_FILES_PER_UPLOAD: int = 10

    # Listagem
    DEFAULT_PAGE_SIZE: int = 12
    MAX_PAGE_SIZE: int = 100

    # Contagem de visualizações
    VIEW_DEDUP_WINDOW_MINUTES: int = 60
    # Atrás de proxy: número de proxies confiáveis que anexam ao X-Forwarded-For
    TRUST_PROXY: bool = False
    TRUSTED_PROXY_HOPS: int = 1

    # Valores iniciais das configurações do app
    DEFAULT_SUPPORT_PHONE: str = "+1 (555) 123-4567"
    DEFAULT_SUPPORT_WHATSAPP: str = "+15551234567"
    DEFAULT_SUPPORT_EMAIL: str = "support@propfind.com"

    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 60
    CACHE_ENABLED: bool = True
    CACHE_TTL_SECONDS: int = 300

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def google_enabled(self) -> bool:
        return bool(self.GOOGLE_CLIENT_ID and self.GOOGLE_CLIENT_SECRET)

    @property
    def facebook_enabled(self) -> bool:
        return bool(self.FACEBOOK_APP_ID and self.FACEBOOK_APP_SECRET)

    @property
    def cloudinary_enabled(self) -> bool:
        return bool(
            self.CLOUDINARY_CLOUD_NAME
            and self.CLOUDINARY_API_KEY
            and self.CLOUDINARY_API_SECRET
        )

    @property
    def cors_origins_list(self) -> List[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def max_file_size_bytes(self) -> int:
        return self.MAX_FILE_SIZE_MB * 1024 * 1024


settings = Settings()

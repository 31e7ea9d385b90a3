from decouple import config, Csv

class Settings:
    # Database Configuration
    DATABASE_URL: str = config("DATABASE_URL", default="sqlite:///./marketplace.db")

    # Security Configuration
    SECRET_KEY: str = config("SECRET_KEY", default="your-secret-key-here-change-in-production")
    ALGORITHM: str = config("ALGORITHM", default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = config("ACCESS_TOKEN_EXPIRE_MINUTES", default=60, cast=int)
    TOKEN_ISSUER: str = config("TOKEN_ISSUER", default="marketplace")

    # Storage Configuration
    UPLOAD_DIR: str = config("UPLOAD_DIR", default="uploads")
    MAX_UPLOAD_SIZE_MB: int = config("MAX_UPLOAD_SIZE_MB", default=50, cast=int)
    MAX_PRODUCT_IMAGES: int = config("MAX_PRODUCT_IMAGES", default=5, cast=int)
    MAX_PRODUCT_VIDEOS: int = config("MAX_PRODUCT_VIDEOS", default=3, cast=int)
    PLACEHOLDER_IMAGE: str = config("PLACEHOLDER_IMAGE", default="placeholder-image.jpg")

    # Orders
    ORDER_DELETE_ALLOW_VENDOR: bool = config("ORDER_DELETE_ALLOW_VENDOR", default=False, cast=bool)

    # Localization of user-facing messages ("en" or "ar")
    MESSAGES_LOCALE: str = config("MESSAGES_LOCALE", default="en")

    # URL Configuration
    CORS_ORIGINS: list = config(
        "CORS_ORIGINS",
        default="http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173",
        cast=Csv()
    )

    # Environment
    ENVIRONMENT: str = config("ENVIRONMENT", default="development")
    DEBUG: bool = config("DEBUG", default=True, cast=bool)

    # Logging
    LOG_LEVEL: str = config("LOG_LEVEL", default="INFO")

settings = Settings()

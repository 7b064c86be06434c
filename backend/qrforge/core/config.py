import os
from pydantic_settings import BaseSettings

_DATA_DIR = os.getenv("DATA_SAVE_DIR", "/tmp/data")


class Settings(BaseSettings):
    # 🧠 App Info
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "QR Forge")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # 🌍 Base URL used to build public image links
    PUBLIC_BASE_URL: str = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")

    # 🗄️ Database (SQLite by default, Postgres via DATABASE_URL)
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        f"sqlite:///{os.path.join(_DATA_DIR, 'qr_history.db')}"
    )

    # 📦 File storage
    QR_SAVE_DIR: str = os.getenv("QR_SAVE_DIR", "/tmp/qr")

    # 🔳 QR rendering
    QR_WIDTH: int = int(os.getenv("QR_WIDTH", 300))
    QR_MARGIN: int = int(os.getenv("QR_MARGIN", 2))
    QR_DEFAULT_ECC: str = os.getenv("QR_DEFAULT_ECC", "M")

    # 🎨 Contrast heuristic thresholds
    QR_MIN_LUMINANCE_DELTA: float = float(os.getenv("QR_MIN_LUMINANCE_DELTA", 90))
    QR_MIN_RGB_DISTANCE: float = float(os.getenv("QR_MIN_RGB_DISTANCE", 120))

    # 🕓 History / Logs
    HISTORY_LIMIT: int = int(os.getenv("HISTORY_LIMIT", 10))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()

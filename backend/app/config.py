# app/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "AR Exposition API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for the mobile/web clients
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:8081",  # Expo dev server
    ]

    # Cloudinary media hosting (cover images, thumbnails, profile pictures, 3D models)
    cloudinary_cloud_name: str | None = os.getenv("CLOUDINARY_CLOUD_NAME")
    cloudinary_api_key: str | None = os.getenv("CLOUDINARY_API_KEY")
    cloudinary_api_secret: str | None = os.getenv("CLOUDINARY_API_SECRET")
    cloudinary_api_base: str = os.getenv("CLOUDINARY_API_BASE", "https://api.cloudinary.com/v1_1")
    media_timeout_sec: float = float(os.getenv("MEDIA_TIMEOUT_SEC", "60"))

    # Upload limits (bytes)
    max_image_bytes: int = int(os.getenv("MAX_IMAGE_BYTES", str(1 * 1024 * 1024)))
    max_model_bytes: int = int(os.getenv("MAX_MODEL_BYTES", str(20 * 1024 * 1024)))

    # Business rules
    purchase_valid_days: int = int(os.getenv("PURCHASE_VALID_DAYS", "30"))
    default_max_objects: int = int(os.getenv("DEFAULT_MAX_OBJECTS", "10"))

    # Comma separated genre names seeded on first start (empty = no seeding)
    seed_genres: list[str] = [
        g.strip() for g in os.getenv("SEED_GENRES", "").split(",") if g.strip()
    ]

    @property
    def is_production(self) -> bool:
        return self.env.lower() in ("prod", "production")

settings = Settings()  # Instantiate configuration

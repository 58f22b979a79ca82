from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    # App
    APP_ENV: str = "development"
    DEBUG: bool = True
    SITE_DOMAIN: str = "http://localhost:5173"
    CORS_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # MongoDB
    MONGO_URL: str = "mongodb://localhost:27017"
    DB_NAME: str = "askflow_db"

    # Firebase Admin : service account encodé en base64 ou chemin vers le JSON
    FB_SERVICE_KEY:      Optional[str] = None
    FIREBASE_ADMIN_JSON: Optional[str] = None

    # Stripe Checkout
    STRIPE_SECRET:     Optional[str] = None
    STRIPE_API_BASE:   str = "https://api.stripe.com/v1"
    CHECKOUT_CURRENCY: str = "usd"

    # Limites
    USERS_SEARCH_LIMIT:  int = 5
    CHECKOUT_RATE_LIMIT: str = "20/minute"
    SIGNUP_RATE_LIMIT:   str = "30/minute"

    model_config = SettingsConfigDict(
        env_file=[".env", "../.env"],  # cherche dans backend/ puis dans la racine
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()

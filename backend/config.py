from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./tubecalc.db"
    APP_NAME: str = "Steel Tube Weight Calculator"
    LOG_LEVEL: str = "INFO"

    # Defaults for a fresh install; users change them via /api/settings
    DEFAULT_PRICE_PER_KG: float = 260.0
    DEFAULT_MATERIAL: str = "stainless-steel"
    DEFAULT_UNIT_SYSTEM: str = "metric"
    DEFAULT_WEIGHT_UNIT: str = "kg"
    CURRENCY: str = "₹"

    # MS pipe calculator keeps its own rate and material
    MS_DEFAULT_PRICE_PER_KG: float = 120.0
    MS_DEFAULT_MATERIAL: str = "carbon-steel"

    class Config:
        env_file = ".env"


settings = Settings()

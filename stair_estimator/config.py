from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./stairs.db"
    APP_NAME: str = "stair-estimator"
    LOG_LEVEL: str = "INFO"

    # Calculation defaults, overridable per request in fields
    DEFAULT_SLAB_TYPE: str = "porcelain"
    DEFAULT_TRANSPORT_DISTANCE_M: float = 30.0
    DEFAULT_CARRIER_SIZE_TONNES: float = 0.125

    class Config:
        env_file = ".env"


settings = Settings()

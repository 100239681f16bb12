from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PORT: int = 8100
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]
    LOG_LEVEL: str = "INFO"

    AR_MAX_DIMENSION_METERS: float = 2.0
    AR_MAX_DIMENSION_LIMIT: float = 100.0
    AR_CACHE_TTL_SECONDS: float = 3600.0
    AR_CACHE_SWEEP_THRESHOLD: int = 50

    ALLOWED_GLB_DOMAINS: list[str] = ["zenodo.org"]
    PROXY_ALLOWED_PREFIXES: list[str] = [
        "https://zenodo.org/",
        "https://iiif.zenodo.org/",
    ]
    FETCH_TIMEOUT_SECONDS: float = 30.0
    USER_AGENT: str = "HeritageAR/1.0"

    model_config = {"env_prefix": ""}


settings = Settings()

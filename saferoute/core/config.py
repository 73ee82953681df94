from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    # API
    api_prefix: str = "/api"
    debug: bool = False

    # CORS
    cors_origins: list[str] = ["*"]

    # Path source (OSRM)
    osrm_base_url: str = "https://router.project-osrm.org"
    osrm_profile: str = "driving"
    osrm_timeout_s: float = 15.0
    osrm_basic_timeout_s: float = 10.0
    max_alternatives: int = 3

    # Incident feed (NT Road Report)
    nt_road_report_url: str = "https://roadreport.nt.gov.au/api/Obstruction/GetAll"
    nt_road_report_timeout_s: float = 10.0
    incident_refresh_enabled: bool = True
    incident_refresh_interval_s: int = 300  # 5 minutes

    # Scoring
    fallback_speed_kmh: float = 50.0
    weather_factor: float = 85.0  # placeholder until a weather feed is wired in
    scoring_config_path: Optional[str] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

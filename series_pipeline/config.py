"""
Pipeline settings and logging setup
"""
import sys
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from loguru import logger


LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


class PipelineSettings(BaseSettings):
    """Series pipeline settings (SERIES_* environment variables)"""

    # Logging
    log_level: str = Field(default="INFO", description="stderr log level")
    log_file: Optional[str] = Field(default=None, description="Rotating log file path")

    # Quality monitoring
    unknown_rate_threshold: float = Field(default=0.05, ge=0, le=1,
                                          description="Max share of unclassified classes")

    # Statistics report
    report_top_series: int = Field(default=20, ge=0, description="Series names listed in the report")
    report_unknown_limit: int = Field(default=30, ge=0, description="Unknown names listed in the report")

    class Config:
        env_prefix = "SERIES_"
        case_sensitive = False


@lru_cache()
def get_settings() -> PipelineSettings:
    """Settings from the environment, reading .env on first use"""
    load_dotenv()
    return PipelineSettings()


def configure_logging(settings: Optional[PipelineSettings] = None) -> None:
    """Replace loguru's default sink with the pipeline's stderr (and optional file) sinks"""
    settings = settings or get_settings()

    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=settings.log_level.upper())
    if settings.log_file:
        logger.add(
            settings.log_file,
            rotation="1 day",
            retention="30 days",
            level="DEBUG",
        )

"""Application-wide configuration and logging setup."""

from .config import Config, DatabaseConfig, ServerConfig, SweepConfig
from .logger import setup_logger

__all__ = ["Config", "DatabaseConfig", "ServerConfig", "SweepConfig", "setup_logger"]

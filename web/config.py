"""
Configuration for ReplicaPage.

Settings are read from the process environment, with a `.env` file in the
working directory loaded first.
"""

from pydantic import BaseModel, Field
from pathlib import Path
from typing import Optional
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Directory holding index.html and images/ by default
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseModel):
    """Runtime settings for one replica."""
    app_name: str = Field(default="replica", description="Display name used in log output")
    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=3000, ge=1, le=65535, description="TCP port to listen on")
    site_dir: Path = Field(default=PROJECT_ROOT, description="Directory holding the page and images")
    index_file: str = Field(default="index.html")
    images_prefix: str = Field(default="/images")
    images_dir: str = Field(default="images")
    log_level: str = Field(default="info", pattern=r"(?i)^(critical|error|warning|info|debug)$")
    metrics_port: Optional[int] = Field(default=None, ge=1, le=65535)
    enable_tracing: bool = Field(default=False)
    otlp_endpoint: str = Field(default="localhost:4317")

    @property
    def index_path(self) -> Path:
        return self.site_dir / self.index_file

    @property
    def images_path(self) -> Path:
        return self.site_dir / self.images_dir


# Environment variable -> settings field
ENV_FIELDS = {
    "APP_NAME": "app_name",
    "HOST": "host",
    "PORT": "port",
    "SITE_DIR": "site_dir",
    "INDEX_FILE": "index_file",
    "IMAGES_PREFIX": "images_prefix",
    "IMAGES_DIR": "images_dir",
    "LOG_LEVEL": "log_level",
    "METRICS_PORT": "metrics_port",
    "ENABLE_TRACING": "enable_tracing",
    "OTLP_ENDPOINT": "otlp_endpoint",
}


def load_settings(environ=None) -> Settings:
    """
    Build settings from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Settings: Validated settings

    Raises:
        pydantic.ValidationError: If a value is malformed, e.g. a non-numeric
            or out-of-range PORT
    """
    if environ is None:
        environ = os.environ
    values = {
        field: environ[name]
        for name, field in ENV_FIELDS.items()
        if environ.get(name, "") != ""
    }
    return Settings(**values)

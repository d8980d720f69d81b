"""
Centralized settings and path configuration for the booking service.

Values come from the environment (or a .env file in the working
directory); anything unset falls back to the defaults below.
"""
from pathlib import Path
from typing import Annotated, Literal, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_SERVICE_AREA_PINS = tuple(f"1900{n:02d}" for n in range(1, 11))


def get_project_root() -> Path:
    """Get the project root directory (where pyproject.toml lives)."""
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / 'pyproject.toml').exists():
            return parent
    # Fallback to 3 levels up from this file
    return Path(__file__).resolve().parent.parent.parent.parent


class Settings(BaseSettings):
    """Application settings with sensible defaults."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    project_root: Path = Field(default_factory=get_project_root)
    data_dir: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices('CAR_BOOKING_DATA_DIR', 'data_dir'),
    )

    # Admin bearer token; admin routes reject everything when unset
    admin_api_token: Optional[str] = None

    # PIN codes that count as inside the service area, comma separated in the environment
    service_area_pins: Annotated[tuple[str, ...], NoDecode] = DEFAULT_SERVICE_AREA_PINS

    # Whether rules with scope 'custom' are always applied
    apply_custom_rules: bool = True

    whatsapp_phone: str = "917006091511"
    log_level: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'] = "INFO"

    @field_validator('service_area_pins', mode='before')
    @classmethod
    def split_pins(cls, value):
        if isinstance(value, str):
            return tuple(p.strip() for p in value.split(',') if p.strip())
        return value

    @field_validator('admin_api_token', mode='before')
    @classmethod
    def blank_token_is_unset(cls, value):
        return value or None

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @model_validator(mode='after')
    def default_data_dir(self) -> 'Settings':
        if self.data_dir is None:
            self.data_dir = self.project_root / 'data'
        return self

    @property
    def cars_csv(self) -> Path:
        return self.data_dir / 'cars.csv'

    @property
    def rules_csv(self) -> Path:
        return self.data_dir / 'price_rules.csv'


# Default settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

"""
Shared service instances for the API routers.

Routes receive these through FastAPI dependencies so tests can swap
them via app.dependency_overrides.
"""
from ..config.settings import get_settings, Settings
from ..services.cars_service import CarsService
from ..services.rules_service import RulesService


settings = get_settings()
cars_service = CarsService(settings.cars_csv)
rules_service = RulesService(settings.rules_csv)


def get_app_settings() -> Settings:
    return settings


def get_cars_service() -> CarsService:
    return cars_service


def get_rules_service() -> RulesService:
    return rules_service

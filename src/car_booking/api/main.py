import logging
import math
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from car_booking.config.settings import Settings
from car_booking.engine import estimate
from car_booking.services.cars_service import CarsService
from car_booking.services.rules_service import RulesService
from car_booking.api.admin_api import cars_router, rules_router
from car_booking.api.state import get_app_settings, get_cars_service, get_rules_service, settings


logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Longest trip the booking desk will quote
MAX_TRIP_KMS = 100_000

app = FastAPI(
    title="Car Booking API",
    description="Cars, price rules and price estimates for wedding car bookings",
    version="1.0.0"
)

# Enable CORS for the booking site
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(cars_router)
app.include_router(rules_router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are client errors (400), like any other bad input."""
    return JSONResponse(status_code=400, content={"detail": jsonable_errors(exc)})


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


class EstimateRequest(BaseModel):
    carId: str
    kms: Optional[float] = None
    scope: Optional[str] = None
    dateISO: Optional[str] = None


def parse_date_iso(value: Optional[str]) -> datetime:
    """Parse an ISO-8601 date or datetime; now (UTC) when absent."""
    if not value:
        return datetime.now(timezone.utc)
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise ValueError("Invalid dateISO")


@app.get("/")
async def root():
    return {"status": "online", "message": "Car Booking API Active"}


@app.get("/api/cars")
async def list_cars(cars: CarsService = Depends(get_cars_service)):
    """Active cars ordered by name."""
    try:
        return {"cars": [c.to_dict() for c in cars.list_cars(include_inactive=False)]}
    except Exception:
        logger.exception("cars-get error")
        raise HTTPException(status_code=500, detail="Failed to fetch cars")


@app.get("/api/price-rules")
async def list_price_rules(rules: RulesService = Depends(get_rules_service)):
    """Active rules in evaluation order."""
    try:
        return {"rules": [r.to_dict() for r in rules.list_rules(include_inactive=False)]}
    except Exception:
        logger.exception("price-rules-get error")
        raise HTTPException(status_code=500, detail="Failed to fetch rules")


@app.post("/api/price-estimate")
async def price_estimate(
    req: EstimateRequest,
    cars: CarsService = Depends(get_cars_service),
    rules: RulesService = Depends(get_rules_service),
    app_settings: Settings = Depends(get_app_settings),
):
    """Price a trip for one car with every active rule applied."""
    kms = 0.0 if req.kms is None else req.kms
    if not math.isfinite(kms) or kms < 0:
        raise HTTPException(status_code=400, detail="kms must be a non-negative number")
    if kms > MAX_TRIP_KMS:
        raise HTTPException(status_code=400, detail=f"kms must not exceed {MAX_TRIP_KMS}")

    scope = 'outside_srinagar' if req.scope == 'outside_srinagar' else 'srinagar'

    try:
        when = parse_date_iso(req.dateISO)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    car = cars.get_car(req.carId)
    if car is None or not car.active:
        raise HTTPException(status_code=404, detail="Car not found")

    result = estimate(
        base=car.base_price,
        per_km=car.per_km,
        kms=kms,
        rules=rules.list_rules(include_inactive=False),
        when=when,
        scope=scope,
        apply_custom=app_settings.apply_custom_rules,
    )
    logger.info("Estimated car %s (%s, %.1f km): total %s", car.id, scope, kms, result.total)

    return {"estimate": result.to_dict(), "car": car.to_public_dict()}

"""
Admin API - FastAPI routers for car inventory and price rule management.

Request bodies are validated by the payload models; malformed bodies are
turned into 400 responses by the app's validation handler.
"""
from fastapi import APIRouter, Depends, HTTPException, Response

from ..services.cars_service import CarsService
from ..services.rules_service import RulesService
from ..services.validators import CarPayload, PriceRulePayload
from .auth import require_admin
from .state import get_cars_service, get_rules_service


cars_router = APIRouter(prefix="/api/admin/cars", tags=["cars-admin"], dependencies=[Depends(require_admin)])
rules_router = APIRouter(prefix="/api/admin/price-rules", tags=["price-rules-admin"], dependencies=[Depends(require_admin)])


# Cars

@cars_router.get("")
async def list_cars(cars: CarsService = Depends(get_cars_service)):
    """List all cars, inactive included."""
    return {"cars": [c.to_dict() for c in cars.list_cars(include_inactive=True)]}


@cars_router.post("")
async def create_car(payload: CarPayload, cars: CarsService = Depends(get_cars_service)):
    """Create a car."""
    try:
        return cars.create_car(payload.to_record()).to_dict()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@cars_router.put("/{car_id}")
async def update_car(car_id: str, payload: CarPayload, cars: CarsService = Depends(get_cars_service)):
    """Replace a car's editable fields; the id comes from the path."""
    try:
        return cars.update_car(car_id, payload.to_record()).to_dict()
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@cars_router.delete("/{car_id}", status_code=204)
async def delete_car(car_id: str, cars: CarsService = Depends(get_cars_service)):
    """Delete a car."""
    try:
        cars.delete_car(car_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


# Price rules

@rules_router.get("")
async def list_rules(rules: RulesService = Depends(get_rules_service)):
    """List all price rules in evaluation order, inactive included."""
    return {"rules": [r.to_dict() for r in rules.list_rules(include_inactive=True)]}


@rules_router.get("/stats")
async def get_stats(rules: RulesService = Depends(get_rules_service)):
    """Get rule statistics."""
    return rules.get_stats()


@rules_router.post("")
async def create_rule(payload: PriceRulePayload, rules: RulesService = Depends(get_rules_service)):
    """Create a price rule."""
    try:
        return rules.create_rule(payload.to_record()).to_dict()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@rules_router.put("/{rule_id}")
async def update_rule(rule_id: str, payload: PriceRulePayload, rules: RulesService = Depends(get_rules_service)):
    """Replace a price rule's editable fields; the id comes from the path."""
    try:
        return rules.update_rule(rule_id, payload.to_record()).to_dict()
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@rules_router.delete("/{rule_id}", status_code=204)
async def delete_rule(rule_id: str, rules: RulesService = Depends(get_rules_service)):
    """Delete a price rule."""
    try:
        rules.delete_rule(rule_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)

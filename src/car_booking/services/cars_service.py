"""
Cars Service - CRUD operations for the vehicle inventory.
Handles reading/writing cars.csv.
"""
import logging
import uuid
from pathlib import Path
from typing import Optional

from ..engine.models import Car
from .csv_store import read_rows, write_rows, utc_timestamp


logger = logging.getLogger(__name__)


class CarsService:
    """Service for managing rentable cars."""

    CSV_COLUMNS = ['id', 'name', 'category', 'base_price', 'per_km', 'image_url', 'active', 'created_at']

    def __init__(self, cars_csv_path: Path):
        self.cars_csv_path = cars_csv_path

    def _load(self) -> list[Car]:
        return [Car.from_csv_row(row) for row in read_rows(self.cars_csv_path)]

    def list_cars(self, include_inactive: bool = True) -> list[Car]:
        """List cars ordered by name."""
        cars = self._load()
        if not include_inactive:
            cars = [c for c in cars if c.active]
        return sorted(cars, key=lambda c: c.name)

    def get_car(self, car_id: str) -> Optional[Car]:
        """Get a single car by ID."""
        for car in self._load():
            if car.id == car_id:
                return car
        return None

    def create_car(self, payload: dict) -> Car:
        """Create a new car from a validated payload."""
        car = Car(
            id=payload.get('id') or uuid.uuid4().hex,
            name=payload['name'],
            category=payload.get('category', 'sedan'),
            base_price=int(payload['base_price']),
            per_km=int(payload.get('per_km', 0)),
            image_url=payload.get('image_url'),
            active=payload.get('active', True),
            created_at=utc_timestamp(),
        )

        cars = self._load()
        if any(c.id == car.id for c in cars):
            raise ValueError(f"Car with ID '{car.id}' already exists")

        cars.append(car)
        self._write_cars(cars)

        logger.info("Created car %s (%s)", car.id, car.name)
        return car

    def update_car(self, car_id: str, updates: dict) -> Car:
        """Update an existing car."""
        cars = self._load()

        for i, car in enumerate(cars):
            if car.id == car_id:
                for key, value in updates.items():
                    if key in ('id', 'created_at'):
                        continue
                    if hasattr(car, key):
                        setattr(car, key, value)
                cars[i] = car
                break
        else:
            raise ValueError(f"Car with ID '{car_id}' not found")

        self._write_cars(cars)
        logger.info("Updated car %s", car_id)
        return cars[i]

    def delete_car(self, car_id: str) -> bool:
        """Delete a car."""
        cars = self._load()
        remaining = [c for c in cars if c.id != car_id]

        if len(remaining) == len(cars):
            raise ValueError(f"Car with ID '{car_id}' not found")

        self._write_cars(remaining)
        logger.info("Deleted car %s", car_id)
        return True

    def _write_cars(self, cars: list[Car]):
        """Write cars back to CSV."""
        write_rows(self.cars_csv_path, self.CSV_COLUMNS, [c.to_csv_row() for c in cars])

import pytest

from emergencyParking.model import ParkingLotModel


def build_model(**overrides):
    params = {
        "width": 5,
        "height": 4,
        "total_cycles": 200,
        "include_liars": False,
        "emergency_cars_per_hour_min": 0,
        "emergency_cars_per_hour_max": 0,
        "seed": 7,
    }
    params.update(overrides)
    return ParkingLotModel(**params)


@pytest.fixture
def make_model():
    """Quiet model: full lot, no hourly arrivals unless asked for."""
    return build_model

from .model import ParkingLotModel
from .agents import CarAgent
from .categories import CarSize, CarState, Category, EventKind, LiarType, WillingnessCategory

__all__ = [
    "ParkingLotModel",
    "CarAgent",
    "CarSize",
    "CarState",
    "Category",
    "EventKind",
    "LiarType",
    "WillingnessCategory",
]

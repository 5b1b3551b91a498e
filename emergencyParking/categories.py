from enum import Enum, auto


class Category(Enum):
    NORMAL = auto()
    GENUINE_EMERGENCY = auto()
    LIAR = auto()


class LiarType(Enum):
    LOW = auto()
    HIGH = auto()


class CarState(Enum):
    REQUESTING = auto()
    PARKED = auto()
    DEPARTED = auto()


class WillingnessCategory(Enum):
    HIGH = auto()
    LOW = auto()


class CarSize(Enum):
    SMALL = auto()
    MEDIUM = auto()
    LARGE = auto()


class EventKind(Enum):
    PARKED = "parked"
    VACATED = "vacated"
    LEFT_WITHOUT_PARKING = "left_without_parking"
    SWITCHED_TO_NORMAL = "switched_to_normal"
    LIAR_LEFT = "liar_left"

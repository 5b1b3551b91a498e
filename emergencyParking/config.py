# Default parameters for the emergency parking lot model.
# Time is measured in hours; one cycle advances the clock by CYCLE_DURATION.

GRID_WIDTH = 5
GRID_HEIGHT = 4

CYCLE_DURATION = 0.25       # 15 minutes per cycle
TOTAL_CYCLES = 672          # one week

HIGH_WILLINGNESS_PERCENTAGE = 0.5

INCLUDE_LIARS = True
LIAR_CARS_PER_HOUR_MIN = 0
LIAR_CARS_PER_HOUR_MAX = 2
EMERGENCY_CARS_PER_HOUR_MIN = 0
EMERGENCY_CARS_PER_HOUR_MAX = 2

LIAR_DETECTION_THRESHOLD = 3
PARKING_RATE = 2.0          # cost per hour

WAIT_GRACE_PERIOD = 0.5
MAX_PARKING_DURATION = 24.0
MAX_PARKING_HISTORY = 10
PAID_DURATION_MIN = 1.0
PAID_DURATION_MAX = 8.0

EMERGENCY_SWITCH_AFTER = 2.0
LIAR_MAX_STAY = 24.0
LIAR_LEAVE_PROBABILITY = 0.1
LIE_PROBABILITY = 0.7

NETWORK_RELIABILITY = 1.0

# willingness threshold separating reluctant from willing occupants
WILLINGNESS_THRESHOLD = 0.45


# Experiment presets: willingness share x liar pressure
PRESETS = {
    "baseline": {
        "high_willingness_percentage": 0.5,
        "include_liars": False,
    },
    "low_willingness_no_liars": {
        "high_willingness_percentage": 0.2,
        "include_liars": False,
    },
    "high_willingness_no_liars": {
        "high_willingness_percentage": 0.8,
        "include_liars": False,
    },
    "low_willingness_few_liars": {
        "high_willingness_percentage": 0.2,
        "include_liars": True,
        "liar_cars_per_hour_min": 0,
        "liar_cars_per_hour_max": 1,
    },
    "high_willingness_few_liars": {
        "high_willingness_percentage": 0.8,
        "include_liars": True,
        "liar_cars_per_hour_min": 0,
        "liar_cars_per_hour_max": 1,
    },
    "low_willingness_many_liars": {
        "high_willingness_percentage": 0.2,
        "include_liars": True,
        "liar_cars_per_hour_min": 1,
        "liar_cars_per_hour_max": 3,
    },
    "high_willingness_many_liars": {
        "high_willingness_percentage": 0.8,
        "include_liars": True,
        "liar_cars_per_hour_min": 1,
        "liar_cars_per_hour_max": 3,
    },
}

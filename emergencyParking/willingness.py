"""
Willingness-to-help scoring.

A parked car rates how ready it is to give up its space for a requester.
The score is a weighted mix of five normalised factors, then remapped by
the car's willingness category so HIGH cars always land in [0.45, 1.0]
and LOW cars always land in [0.0, 0.45).
"""

import math

from .categories import CarSize, WillingnessCategory
from .config import WILLINGNESS_THRESHOLD

SIZE_FACTORS = {
    CarSize.SMALL: 1.0,
    CarSize.MEDIUM: 0.7,
    CarSize.LARGE: 0.4,
}

VACATED_BEFORE_BONUS = 0.2
NO_VACATE_BONUS = 0.05

W_TIME = 0.25
W_HISTORY = 0.15
W_SIZE = 0.20
W_PRIORITY = 0.25
W_VACATED = 0.15

HIGH_SPAN = 1.0 - WILLINGNESS_THRESHOLD


def clamp(value, lo=0.0, hi=1.0):
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def time_factor(now, arrival_time, max_parking_duration):
    if max_parking_duration <= 0:
        return 1.0
    return clamp((now - arrival_time) / max_parking_duration)


def history_factor(parking_history, max_parking_history):
    if max_parking_history <= 0:
        return 1.0
    return clamp(parking_history / max_parking_history)


def priority_factor(priority_level):
    return clamp(priority_level / 2.0)


def base_score(now, arrival_time, parking_history, car_size,
               requester_priority, requester_vacated_before,
               max_parking_duration, max_parking_history):
    bonus = VACATED_BEFORE_BONUS if requester_vacated_before else NO_VACATE_BONUS
    base = (
        W_TIME * time_factor(now, arrival_time, max_parking_duration)
        + W_HISTORY * history_factor(parking_history, max_parking_history)
        + W_SIZE * SIZE_FACTORS[car_size]
        + W_PRIORITY * priority_factor(requester_priority)
        + W_VACATED * bonus
    )
    return clamp(base)


def remap(base, willingness_category):
    """Map a base score onto the side of the threshold the category owns."""
    if willingness_category == WillingnessCategory.HIGH:
        return WILLINGNESS_THRESHOLD + base * HIGH_SPAN
    score = base * WILLINGNESS_THRESHOLD
    # base == 1.0 would touch the threshold
    if score >= WILLINGNESS_THRESHOLD:
        score = math.nextafter(WILLINGNESS_THRESHOLD, 0.0)
    return score


def willingness_score(car, now, requester_priority, requester_vacated_before):
    model = car.model
    base = base_score(
        now,
        car.arrival_time,
        car.parking_history,
        car.car_size,
        requester_priority,
        requester_vacated_before,
        model.max_parking_duration,
        model.max_parking_history,
    )
    return remap(base, car.willingness_category)

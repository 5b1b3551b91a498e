import logging

from .categories import CarState, Category

logger = logging.getLogger(__name__)


class LiarDetector:
    """
    Suspicion bookkeeping for emergency claimants.

    Every cycle a non-normal car that has asked more than once gains one
    suspicion point. Reaching the threshold flags the car for good and
    costs it one priority level. Genuine emergencies that keep asking are
    penalised exactly like liars; there is no false-positive correction.
    """

    def __init__(self, threshold=3):
        if threshold < 1:
            raise ValueError(f"Detection threshold must be >= 1, got {threshold}")
        self.threshold = threshold
        self.flagged_ids = set()

    def update(self, car):
        """Returns True if the car was flagged during this update."""
        if car.category == Category.NORMAL or car.state == CarState.DEPARTED:
            return False

        if car.emergency_request_count > 1:
            car.suspicion_level += 1

        if car.suspicion_level >= self.threshold and not car.is_flagged:
            car.is_flagged = True
            car.priority_level = max(0, car.priority_level - 1)
            self.flagged_ids.add(car.unique_id)
            logger.debug(
                "Car %s flagged (suspicion %d, priority now %d)",
                car.unique_id, car.suspicion_level, car.priority_level,
            )
            return True
        return False

    def update_all(self, cars):
        return [c for c in cars if self.update(c)]

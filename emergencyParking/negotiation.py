"""
Emergency negotiation round.

A requesting car broadcasts (has_vacated_before, priority_level) to every
parked, connected normal car. Each recipient rescores its willingness to
help; reluctant recipients count as refusals. If requesters outnumber free
spaces, the most willing recipients are evicted until the shortfall is
covered or the willing pool runs dry. When nobody is willing, every waiting
requester is counted once as refused for parking.
"""

import logging

from .categories import CarState, Category
from .config import WILLINGNESS_THRESHOLD
from .messaging import Delivery, EmergencyRequest

logger = logging.getLogger(__name__)


class NegotiationProtocol:
    def __init__(self, model):
        self.model = model

    # ---------------- broadcast ----------------
    def broadcast(self, car):
        request = EmergencyRequest(
            sender_id=car.unique_id,
            has_vacated_before=car.has_vacated_before,
            priority_level=car.priority_level,
            sent_at=self.model.current_time,
        )
        result = self.model.bus.send(request)
        if result == Delivery.DELIVERED:
            car.emergency_request_count += 1
        else:
            logger.warning(
                "Bus unavailable, request from car %s not sent at t=%.2f",
                car.unique_id, self.model.current_time,
            )
        return result

    # ---------------- score ----------------
    def recipients(self):
        return [
            c for c in self.model.cars
            if c.state == CarState.PARKED
            and c.category == Category.NORMAL
            and c.connected
        ]

    def score(self, request):
        recipients = self.recipients()
        stats = self.model.stats
        for car in recipients:
            car.receive_request(request)
            if car.willingness_to_help <= WILLINGNESS_THRESHOLD:
                stats.record_refusal()
        return recipients

    # ---------------- select ----------------
    def select(self, recipients):
        """Evict willing recipients to cover the shortfall. Returns the evicted cars."""
        waiting = self.model.waiting_requesters()
        num_waiting = len(waiting)
        num_free = self.model.spot_grid.free_count()
        if num_waiting <= num_free:
            return []

        candidates = [
            c for c in recipients
            if c.state == CarState.PARKED and c.willingness_to_help > WILLINGNESS_THRESHOLD
        ]

        if not candidates:
            for car in waiting:
                if self.model.stats.record_refused_for_parking(car.unique_id):
                    logger.debug("Car %s refused for parking", car.unique_id)
            return []

        # sorted() is stable, ties keep enumeration order
        candidates = sorted(candidates, key=lambda c: c.willingness_to_help, reverse=True)
        shortfall = num_waiting - num_free
        evicted = []
        for car in candidates[:min(shortfall, len(candidates))]:
            if car.vacate(reason="evicted"):
                evicted.append(car)
        self.model.stats.record_evictions(len(evicted))
        return evicted

    def handle(self, request):
        recipients = self.score(request)
        return self.select(recipients)

    def run(self):
        """Drain every request delivered this cycle, in send order."""
        evicted = []
        bus = self.model.bus
        while bus.has_pending():
            request = bus.receive()
            evicted.extend(self.handle(request))
        return evicted

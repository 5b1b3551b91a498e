import pandas as pd

from .categories import LiarType


class StatisticsAggregator:
    """
    Run-wide counters and the ordered event log.

    Counters only ever grow during a run and change only through the
    record_* methods, each fed by one caller: parking records come from
    CarAgent.check_for_spot, transfers from CarAgent.vacate, refusals and
    evictions from the negotiation protocol.
    """

    def __init__(self):
        self.spots_to_genuine_emergencies = 0
        self.spots_to_low_priority_liars = 0
        self.spots_to_high_priority_liars = 0

        self.total_liar_cost = 0.0
        self.total_transferred_time_by_normal = 0.0
        self.total_refusals = 0
        self.total_cars_refused_for_parking = 0

        self.total_evictions = 0
        self.total_left_without_parking = 0
        self.total_switched_to_normal = 0
        self.total_liars_left = 0
        self.total_cars_flagged = 0

        self.refused_car_ids = set()
        self.events = []

    # ---------- event log ----------
    def log_event(self, time, kind, spot=None, **extra):
        record = {"time": time, "event_kind": kind.value, "spot_location": spot}
        record.update(extra)
        self.events.append(record)
        return record

    def events_frame(self):
        if not self.events:
            return pd.DataFrame(columns=["time", "event_kind", "spot_location"])
        return pd.DataFrame(self.events)

    # ---------- counters ----------
    def record_genuine_parked(self):
        self.spots_to_genuine_emergencies += 1

    def record_liar_parked(self, liar_type, transferred_time, parking_rate):
        if liar_type == LiarType.HIGH:
            self.spots_to_high_priority_liars += 1
        else:
            self.spots_to_low_priority_liars += 1
        cost = max(0.0, transferred_time) * parking_rate
        self.total_liar_cost += cost
        return cost

    def record_transfer(self, remaining):
        if remaining > 0:
            self.total_transferred_time_by_normal += remaining

    def record_evictions(self, count):
        self.total_evictions += count

    def record_left_without_parking(self):
        self.total_left_without_parking += 1

    def record_switched_to_normal(self):
        self.total_switched_to_normal += 1

    def record_liar_left(self):
        self.total_liars_left += 1

    def record_flagged(self, count):
        self.total_cars_flagged += count

    def record_refusal(self):
        self.total_refusals += 1

    def record_refused_for_parking(self, car_id):
        """Count a car as refused once until it next parks."""
        if car_id in self.refused_car_ids:
            return False
        self.refused_car_ids.add(car_id)
        self.total_cars_refused_for_parking += 1
        return True

    def clear_refused(self, car_id):
        self.refused_car_ids.discard(car_id)

    def summary(self):
        return {
            "spots_to_genuine_emergencies": self.spots_to_genuine_emergencies,
            "spots_to_low_priority_liars": self.spots_to_low_priority_liars,
            "spots_to_high_priority_liars": self.spots_to_high_priority_liars,
            "total_liar_cost": self.total_liar_cost,
            "total_transferred_time_by_normal": self.total_transferred_time_by_normal,
            "total_refusals": self.total_refusals,
            "total_cars_refused_for_parking": self.total_cars_refused_for_parking,
        }

    def extended_summary(self):
        s = self.summary()
        s.update({
            "total_evictions": self.total_evictions,
            "total_left_without_parking": self.total_left_without_parking,
            "total_switched_to_normal": self.total_switched_to_normal,
            "total_liars_left": self.total_liars_left,
            "total_cars_flagged": self.total_cars_flagged,
            "events_logged": len(self.events),
        })
        return s

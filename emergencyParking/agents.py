import logging

from mesa import Agent

from .categories import CarSize, CarState, Category, EventKind, LiarType, WillingnessCategory
from .willingness import willingness_score

logger = logging.getLogger(__name__)

# requester profile used when a parked car rescores itself with no request
IDLE_REQUEST_PRIORITY = 1
IDLE_REQUEST_VACATED = False


class CarAgent(Agent):
    """
    States:
      normal:    PARKED -> DEPARTED
      emergency: REQUESTING -> PARKED -> DEPARTED
                 REQUESTING -> DEPARTED (left without parking)
    A genuine emergency parked for long enough becomes a normal car.
    """

    def __init__(
        self,
        model,
        category=Category.NORMAL,
        liar_type=None,
        willingness_category=WillingnessCategory.LOW,
        car_size=CarSize.MEDIUM,
        priority_level=0,
        parking_history=0,
        has_vacated_before=False,
        paid_duration=0.0,
    ):
        super().__init__(model)
        if category == Category.LIAR and liar_type is None:
            raise ValueError("Liar cars need a liar_type")
        if category != Category.LIAR and liar_type is not None:
            raise ValueError("Only liar cars carry a liar_type")

        self.category = category
        self.liar_type = liar_type
        self.willingness_category = willingness_category
        self.car_size = car_size
        self.priority_level = priority_level
        self.parking_history = parking_history
        self.has_vacated_before = has_vacated_before

        self.state = CarState.REQUESTING if self.is_emergency else CarState.PARKED
        self.arrival_time = model.current_time
        self.request_time = model.current_time
        self.paid_duration = paid_duration
        self.transferred_time = 0.0
        self.occupied_spot = None

        self.willingness_to_help = 0.0
        self.connected = True

        # --- liar detection ---
        self.emergency_request_count = 0
        self.suspicion_level = 0
        self.is_flagged = False

        # spawned cars broadcast unconditionally on their first cycle
        self.fresh = True

    @property
    def is_emergency(self):
        return self.category != Category.NORMAL

    @property
    def is_liar(self):
        return self.category == Category.LIAR

    def elapsed(self):
        return self.model.current_time - self.arrival_time

    def draw_paid_duration(self):
        return self.model.random_source.uniform_real(
            self.model.paid_duration_min, self.model.paid_duration_max
        )

    def _spot_or_abort(self, action):
        if self.occupied_spot is None:
            logger.error(
                "Car %s is %s without a parking space; skipping %s",
                self.unique_id, self.state.name, action,
            )
            return None
        return self.occupied_spot

    # ---------- willingness ----------
    def refresh_willingness(self):
        self.willingness_to_help = willingness_score(
            self, self.model.current_time, IDLE_REQUEST_PRIORITY, IDLE_REQUEST_VACATED
        )

    def receive_request(self, request):
        self.willingness_to_help = willingness_score(
            self, self.model.current_time, request.priority_level, request.has_vacated_before
        )
        return self.willingness_to_help

    # ---------- requesting ----------
    def wants_to_broadcast(self):
        if self.state != CarState.REQUESTING:
            return False
        if self.fresh:
            return True
        if not self.is_liar:
            return True

        # liars withhold when they sense they are close to being caught
        if self.is_flagged:
            return False
        if self.suspicion_level >= self.model.detector.threshold - 1:
            return False
        return self.model.random_source.bernoulli(self.model.lie_probability)

    def request_step(self):
        if self.wants_to_broadcast():
            self.model.protocol.broadcast(self)
        self.fresh = False

    def check_for_spot(self):
        if self.state != CarState.REQUESTING:
            return False

        model = self.model
        space = model.spot_grid.find_free()
        if space is None:
            waited = model.current_time - self.request_time
            if waited > model.wait_grace_period:
                self._leave_without_parking(waited)
            return False

        model.spot_grid.occupy(space, self.unique_id)
        self.occupied_spot = space
        self.arrival_time = model.current_time
        self.transferred_time = space.carryover_paid_time
        if self.transferred_time > 0:
            self.paid_duration = self.transferred_time
        else:
            self.paid_duration = self.draw_paid_duration()
        space.carryover_paid_time = 0.0
        self.state = CarState.PARKED

        stats = model.stats
        stats.clear_refused(self.unique_id)
        extra = {"car": self.unique_id, "category": self.category.name}
        if self.category == Category.GENUINE_EMERGENCY:
            stats.record_genuine_parked()
            model.stage_emergency_parked(self)
        elif self.is_liar:
            cost = stats.record_liar_parked(
                self.liar_type, self.transferred_time, model.parking_rate
            )
            extra["liar_type"] = self.liar_type.name
            extra["liar_cost"] = cost

        stats.log_event(
            model.current_time, EventKind.PARKED, space.index,
            transferred_time=self.transferred_time, **extra,
        )
        logger.debug("Car %s parked at space %d", self.unique_id, space.index)
        return True

    def _leave_without_parking(self, waited):
        self.state = CarState.DEPARTED
        self.model.stats.record_left_without_parking()
        self.model.stats.log_event(
            self.model.current_time, EventKind.LEFT_WITHOUT_PARKING,
            car=self.unique_id, category=self.category.name, waited=waited,
        )
        self.model.retire(self)

    # ---------- vacating ----------
    def vacate(self, reason="voluntary", kind=EventKind.VACATED):
        if self.state != CarState.PARKED:
            return False
        space = self._spot_or_abort("vacate")
        if space is None:
            return False

        model = self.model
        remaining = max(0.0, self.paid_duration - self.elapsed())
        model.spot_grid.free(space, remaining)
        if self.category == Category.NORMAL:
            model.stats.record_transfer(remaining)

        self.occupied_spot = None
        self.state = CarState.DEPARTED
        if self.category == Category.GENUINE_EMERGENCY:
            model.stage_emergency_left(self)

        model.stats.log_event(
            model.current_time, kind, space.index,
            car=self.unique_id, category=self.category.name,
            remaining=remaining, reason=reason,
        )
        logger.debug(
            "Car %s vacated space %d (%s, %.2fh carried over)",
            self.unique_id, space.index, reason, remaining,
        )
        model.retire(self)
        return True

    # ---------- parked reflexes ----------
    def parked_step(self):
        if self.state != CarState.PARKED:
            return
        if self._spot_or_abort("parked reflexes") is None:
            return

        if self.category == Category.NORMAL:
            self._renew_if_overstayed()
            self.refresh_willingness()
        elif self.category == Category.GENUINE_EMERGENCY:
            self._maybe_switch_to_normal()
        elif self.is_liar:
            self._maybe_leave_as_liar()

    def _renew_if_overstayed(self):
        if self.elapsed() >= self.paid_duration:
            self.paid_duration += self.draw_paid_duration()

    def _maybe_switch_to_normal(self):
        model = self.model
        if self.elapsed() < model.emergency_switch_after:
            return
        self.category = Category.NORMAL
        self.refresh_willingness()
        model.stage_emergency_left(self)
        model.stats.record_switched_to_normal()
        model.stats.log_event(
            model.current_time, EventKind.SWITCHED_TO_NORMAL, self.occupied_spot.index,
            car=self.unique_id,
        )

    def _maybe_leave_as_liar(self):
        model = self.model
        if self.elapsed() < model.liar_max_stay:
            return
        if not model.random_source.bernoulli(model.liar_leave_probability):
            return
        if self.vacate(reason="avoid_detection", kind=EventKind.LIAR_LEFT):
            model.stats.record_liar_left()

    def step(self):
        # the model drives cars phase by phase; see ParkingLotModel.step
        pass

    def __repr__(self):
        tag = self.category.name
        if self.liar_type is not None:
            tag += f"({self.liar_type.name})"
        return f"<CarAgent {self.unique_id} {tag} {self.state.name}>"


def liar_priority(liar_type):
    return 2 if liar_type == LiarType.HIGH else 1

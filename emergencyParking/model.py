import logging

from mesa import Model
from mesa.datacollection import DataCollector

from . import config
from .agents import CarAgent, liar_priority
from .categories import CarSize, CarState, Category, LiarType, WillingnessCategory
from .clock import SimulationClock
from .detection import LiarDetector
from .grid import SpotGrid
from .messaging import MessageBus
from .negotiation import NegotiationProtocol
from .rng import RandomSource
from .stats import StatisticsAggregator

logger = logging.getLogger(__name__)

CAR_SIZES = [CarSize.SMALL, CarSize.MEDIUM, CarSize.LARGE]


class ParkingLotModel(Model):
    """
    Parking lot where emergency claimants, some of them lying, negotiate
    spaces away from normal cars.

    Every space starts occupied by a normal car. Each hour new genuine
    emergencies (and liars, if enabled) arrive and ask for a space. Each
    cycle runs in fixed phases:

      1. clock tick and hourly spawns
      2. requesting cars broadcast
      3. negotiation: score, select, evict
      4. requesting cars look for a free space
      5. parked reflexes (renewal, category switch, liar departure)
      6. liar detection
      7. commit of staged membership changes and departures
    """

    def __init__(
        self,
        width=config.GRID_WIDTH,
        height=config.GRID_HEIGHT,
        cycle_duration=config.CYCLE_DURATION,
        total_cycles=config.TOTAL_CYCLES,
        high_willingness_percentage=config.HIGH_WILLINGNESS_PERCENTAGE,
        include_liars=config.INCLUDE_LIARS,
        liar_cars_per_hour_min=config.LIAR_CARS_PER_HOUR_MIN,
        liar_cars_per_hour_max=config.LIAR_CARS_PER_HOUR_MAX,
        emergency_cars_per_hour_min=config.EMERGENCY_CARS_PER_HOUR_MIN,
        emergency_cars_per_hour_max=config.EMERGENCY_CARS_PER_HOUR_MAX,
        liar_detection_threshold=config.LIAR_DETECTION_THRESHOLD,
        parking_rate=config.PARKING_RATE,
        wait_grace_period=config.WAIT_GRACE_PERIOD,
        max_parking_duration=config.MAX_PARKING_DURATION,
        max_parking_history=config.MAX_PARKING_HISTORY,
        paid_duration_min=config.PAID_DURATION_MIN,
        paid_duration_max=config.PAID_DURATION_MAX,
        emergency_switch_after=config.EMERGENCY_SWITCH_AFTER,
        liar_max_stay=config.LIAR_MAX_STAY,
        liar_leave_probability=config.LIAR_LEAVE_PROBABILITY,
        lie_probability=config.LIE_PROBABILITY,
        network_reliability=config.NETWORK_RELIABILITY,
        seed=None,
    ):
        super().__init__(seed=seed)

        if not 0.0 <= high_willingness_percentage <= 1.0:
            raise ValueError(
                f"high_willingness_percentage must be in [0, 1], got {high_willingness_percentage}"
            )
        if liar_cars_per_hour_min > liar_cars_per_hour_max:
            raise ValueError("liar_cars_per_hour_min is larger than liar_cars_per_hour_max")
        if emergency_cars_per_hour_min > emergency_cars_per_hour_max:
            raise ValueError("emergency_cars_per_hour_min is larger than emergency_cars_per_hour_max")
        if parking_rate < 0:
            raise ValueError(f"parking_rate must be non-negative, got {parking_rate}")
        if paid_duration_min > paid_duration_max:
            raise ValueError("paid_duration_min is larger than paid_duration_max")

        self.high_willingness_percentage = high_willingness_percentage
        self.include_liars = include_liars
        self.liar_cars_per_hour_min = liar_cars_per_hour_min
        self.liar_cars_per_hour_max = liar_cars_per_hour_max
        self.emergency_cars_per_hour_min = emergency_cars_per_hour_min
        self.emergency_cars_per_hour_max = emergency_cars_per_hour_max
        self.parking_rate = parking_rate
        self.wait_grace_period = wait_grace_period
        self.max_parking_duration = max_parking_duration
        self.max_parking_history = max_parking_history
        self.paid_duration_min = paid_duration_min
        self.paid_duration_max = paid_duration_max
        self.emergency_switch_after = emergency_switch_after
        self.liar_max_stay = liar_max_stay
        self.liar_leave_probability = liar_leave_probability
        self.lie_probability = lie_probability

        # --- collaborators ---
        self.random_source = RandomSource(self.random)
        self.clock = SimulationClock(cycle_duration, total_cycles)
        self.bus = MessageBus(self.random_source, reliability=network_reliability)
        self.detector = LiarDetector(liar_detection_threshold)
        self.protocol = NegotiationProtocol(self)
        self.stats = StatisticsAggregator()
        self.spot_grid = SpotGrid(self, width, height)

        # cars in creation order; this order breaks every tie
        self.cars = []

        # parked genuine emergencies, changed only at commit
        self.emergency_parked = set()
        self._staged_emergency_add = []
        self._staged_emergency_remove = []
        self._departed = []

        self._populate_normal_cars()

        self.datacollector = DataCollector(
            model_reporters={
                "Time": lambda m: m.current_time,
                "OccupiedSpaces": lambda m: m.spot_grid.occupied_count(),
                "FreeSpaces": lambda m: m.spot_grid.free_count(),
                "ParkedCars": lambda m: m.parked_count(),
                "WaitingRequesters": lambda m: len(m.waiting_requesters()),
                "ParkedEmergencies": lambda m: len(m.emergency_parked),
                "FlaggedCars": lambda m: len(m.detector.flagged_ids),
                "SpotsToGenuine": lambda m: m.stats.spots_to_genuine_emergencies,
                "SpotsToLowLiars": lambda m: m.stats.spots_to_low_priority_liars,
                "SpotsToHighLiars": lambda m: m.stats.spots_to_high_priority_liars,
                "LiarCost": lambda m: m.stats.total_liar_cost,
                "TransferredByNormal": lambda m: m.stats.total_transferred_time_by_normal,
                "Refusals": lambda m: m.stats.total_refusals,
                "RefusedForParking": lambda m: m.stats.total_cars_refused_for_parking,
            }
        )
        self.running = True
        self.datacollector.collect(self)

        logger.info(
            "Parking lot %dx%d ready: %d normal cars, %.0f%% high willingness, liars %s",
            width, height, len(self.cars), 100 * high_willingness_percentage,
            "on" if include_liars else "off",
        )

    @property
    def current_time(self):
        return self.clock.time

    # ---------- setup ----------
    def _populate_normal_cars(self):
        rs = self.random_source
        n = len(self.spot_grid)
        n_high = int(round(self.high_willingness_percentage * n))
        high_idx = set(rs.sample(range(n), n_high))

        for space in self.spot_grid:
            category = (
                WillingnessCategory.HIGH if space.index in high_idx else WillingnessCategory.LOW
            )
            car = CarAgent(
                self,
                category=Category.NORMAL,
                willingness_category=category,
                car_size=rs.choice(CAR_SIZES),
                priority_level=rs.uniform_int(0, 2),
                parking_history=rs.uniform_int(0, self.max_parking_history),
                has_vacated_before=rs.bernoulli(0.3),
                paid_duration=rs.uniform_real(self.paid_duration_min, self.paid_duration_max),
            )
            self.spot_grid.occupy(space, car.unique_id)
            car.occupied_spot = space
            car.refresh_willingness()
            self.cars.append(car)

    def _draw_willingness_category(self):
        if self.random_source.bernoulli(self.high_willingness_percentage):
            return WillingnessCategory.HIGH
        return WillingnessCategory.LOW

    def spawn_emergency(self, priority_level=2, has_vacated_before=None, car_size=None):
        rs = self.random_source
        if has_vacated_before is None:
            has_vacated_before = rs.bernoulli(0.5)
        car = CarAgent(
            self,
            category=Category.GENUINE_EMERGENCY,
            willingness_category=self._draw_willingness_category(),
            car_size=car_size or rs.choice(CAR_SIZES),
            priority_level=priority_level,
            parking_history=rs.uniform_int(0, self.max_parking_history),
            has_vacated_before=has_vacated_before,
        )
        self.cars.append(car)
        return car

    def spawn_liar(self, liar_type=None, has_vacated_before=None, car_size=None):
        rs = self.random_source
        if liar_type is None:
            liar_type = LiarType.HIGH if rs.bernoulli(0.5) else LiarType.LOW
        if has_vacated_before is None:
            has_vacated_before = rs.bernoulli(0.5)
        car = CarAgent(
            self,
            category=Category.LIAR,
            liar_type=liar_type,
            willingness_category=self._draw_willingness_category(),
            car_size=car_size or rs.choice(CAR_SIZES),
            priority_level=liar_priority(liar_type),
            parking_history=rs.uniform_int(0, self.max_parking_history),
            has_vacated_before=has_vacated_before,
        )
        self.cars.append(car)
        return car

    def hourly_spawn(self):
        rs = self.random_source
        n_emergency = rs.uniform_int(self.emergency_cars_per_hour_min, self.emergency_cars_per_hour_max)
        n_liars = 0
        if self.include_liars:
            n_liars = rs.uniform_int(self.liar_cars_per_hour_min, self.liar_cars_per_hour_max)

        for _ in range(n_emergency):
            self.spawn_emergency()
        for _ in range(n_liars):
            self.spawn_liar()

        logger.debug(
            "t=%.2f spawned %d emergencies and %d liars",
            self.current_time, n_emergency, n_liars,
        )

    # ---------- queries ----------
    def waiting_requesters(self):
        return [
            c for c in self.cars
            if c.category != Category.NORMAL and c.state == CarState.REQUESTING
        ]

    def parked_count(self):
        return sum(1 for c in self.cars if c.state == CarState.PARKED)

    def conservation_holds(self):
        return self.parked_count() == self.spot_grid.occupied_count()

    # ---------- commit buffer ----------
    def stage_emergency_parked(self, car):
        self._staged_emergency_add.append(car.unique_id)

    def stage_emergency_left(self, car):
        self._staged_emergency_remove.append(car.unique_id)

    def retire(self, car):
        self._departed.append(car)

    def commit(self):
        for uid in self._staged_emergency_add:
            self.emergency_parked.add(uid)
        for uid in self._staged_emergency_remove:
            self.emergency_parked.discard(uid)
        self._staged_emergency_add.clear()
        self._staged_emergency_remove.clear()

        for car in self._departed:
            if car in self.cars:
                self.cars.remove(car)
                car.remove()
        self._departed.clear()

    # ---------- main step ----------
    def step(self):
        # 1. clock and spawns
        for _ in range(self.clock.tick()):
            self.hourly_spawn()

        # connectivity for this cycle
        for car in self.cars:
            if car.state == CarState.PARKED and car.category == Category.NORMAL:
                car.connected = self.bus.available()

        # 2. broadcast
        for car in list(self.cars):
            if car.state == CarState.REQUESTING:
                car.request_step()

        # 3. negotiation
        self.protocol.run()

        # 4. requesters look for a space
        for car in list(self.cars):
            car.check_for_spot()

        # 5. parked reflexes
        for car in list(self.cars):
            car.parked_step()

        # 6. liar detection
        flagged = self.detector.update_all(self.cars)
        self.stats.record_flagged(len(flagged))

        # 7. commit
        self.commit()

        self.datacollector.collect(self)

        if self.clock.finished:
            self.running = False
            logger.info("Run finished at t=%.2f: %s", self.current_time, self.stats.summary())

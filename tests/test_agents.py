"""
tests/test_agents.py - Tests for the CarAgent lifecycle
"""

import logging

import pytest

from emergencyParking.agents import CarAgent
from emergencyParking.categories import CarState, Category, LiarType, WillingnessCategory


def first_normal(model):
    return next(c for c in model.cars if c.category == Category.NORMAL and c.state == CarState.PARKED)


class TestConstruction:
    def test_normals_fill_the_lot(self, make_model):
        model = make_model()
        assert len(model.cars) == 20
        assert model.spot_grid.free_count() == 0
        assert all(c.state == CarState.PARKED for c in model.cars)
        assert [c.occupied_spot.index for c in model.cars] == list(range(20))

    def test_high_willingness_share_is_exact(self, make_model):
        model = make_model(high_willingness_percentage=0.5)
        highs = [c for c in model.cars if c.willingness_category == WillingnessCategory.HIGH]
        assert len(highs) == 10

    def test_emergency_starts_requesting(self, make_model):
        model = make_model()
        car = model.spawn_emergency()
        assert car.state == CarState.REQUESTING
        assert car.occupied_spot is None

    def test_liar_needs_type(self, make_model):
        model = make_model()
        with pytest.raises(ValueError):
            CarAgent(model, category=Category.LIAR)

    def test_only_liars_carry_type(self, make_model):
        model = make_model()
        with pytest.raises(ValueError):
            CarAgent(model, category=Category.GENUINE_EMERGENCY, liar_type=LiarType.LOW)

    def test_liar_priority_by_type(self, make_model):
        model = make_model()
        assert model.spawn_liar(liar_type=LiarType.HIGH).priority_level == 2
        assert model.spawn_liar(liar_type=LiarType.LOW).priority_level == 1


class TestCheckForSpot:
    def test_inherits_carryover(self, make_model):
        model = make_model()
        normal = first_normal(model)
        normal.paid_duration = 3.5
        normal.vacate()
        space = model.spot_grid[0]
        assert space.carryover_paid_time == pytest.approx(3.5)

        car = model.spawn_emergency()
        assert car.check_for_spot()
        assert car.occupied_spot is space
        assert car.transferred_time == pytest.approx(3.5)
        assert car.paid_duration == pytest.approx(3.5)
        assert space.carryover_paid_time == 0.0
        assert model.stats.spots_to_genuine_emergencies == 1

    def test_emergency_tracking_waits_for_commit(self, make_model):
        model = make_model()
        first_normal(model).vacate()
        car = model.spawn_emergency()
        car.check_for_spot()
        assert car.unique_id not in model.emergency_parked
        model.commit()
        assert car.unique_id in model.emergency_parked

    def test_fresh_paid_duration_without_carryover(self, make_model):
        model = make_model()
        first_normal(model).vacate()
        model.spot_grid[0].carryover_paid_time = 0.0
        car = model.spawn_emergency()
        car.check_for_spot()
        assert car.transferred_time == 0.0
        assert model.paid_duration_min <= car.paid_duration <= model.paid_duration_max

    def test_liar_cost_charged_once(self, make_model):
        """3h carried over at rate 2.0 costs 6.0."""
        model = make_model(parking_rate=2.0)
        first_normal(model).vacate()
        model.spot_grid[0].carryover_paid_time = 3.0
        liar = model.spawn_liar(liar_type=LiarType.HIGH)
        assert liar.check_for_spot()
        assert model.stats.total_liar_cost == pytest.approx(6.0)
        assert model.stats.spots_to_high_priority_liars == 1
        assert not liar.check_for_spot()
        assert model.stats.total_liar_cost == pytest.approx(6.0)

    def test_low_liar_counted_separately(self, make_model):
        model = make_model()
        first_normal(model).vacate()
        liar = model.spawn_liar(liar_type=LiarType.LOW)
        liar.check_for_spot()
        assert model.stats.spots_to_low_priority_liars == 1
        assert model.stats.spots_to_high_priority_liars == 0


class TestVacate:
    def test_normal_transfers_remaining_time(self, make_model):
        model = make_model()
        normal = first_normal(model)
        normal.paid_duration = 5.0
        model.step()
        model.step()
        assert normal.vacate()
        assert model.stats.total_transferred_time_by_normal == pytest.approx(4.5)
        assert model.spot_grid[0].carryover_paid_time == pytest.approx(4.5)
        assert normal.state == CarState.DEPARTED

    def test_emergency_vacate_not_counted_as_transfer(self, make_model):
        model = make_model()
        first_normal(model).vacate()
        before = model.stats.total_transferred_time_by_normal
        car = model.spawn_emergency()
        car.check_for_spot()
        car.vacate()
        assert model.stats.total_transferred_time_by_normal == before

    def test_vacate_twice_is_noop(self, make_model):
        model = make_model()
        normal = first_normal(model)
        assert normal.vacate()
        assert not normal.vacate()


class TestParkedReflexes:
    def test_overstay_renews(self, make_model):
        model = make_model()
        normal = first_normal(model)
        normal.paid_duration = 0.25
        model.step()
        assert normal.state == CarState.PARKED
        assert normal.paid_duration >= 0.25 + model.paid_duration_min

    def test_genuine_switches_to_normal_after_two_hours(self, make_model):
        model = make_model()
        first_normal(model).vacate()
        car = model.spawn_emergency()
        model.step()
        assert car.state == CarState.PARKED
        for _ in range(7):
            model.step()
        assert car.category == Category.GENUINE_EMERGENCY
        model.step()
        assert car.category == Category.NORMAL
        assert car.unique_id not in model.emergency_parked
        assert model.stats.total_switched_to_normal == 1
        for _ in range(4):
            model.step()
        assert car.category == Category.NORMAL, "Switch never reverts"

    def test_liar_leaves_after_long_stay(self, make_model):
        model = make_model(liar_max_stay=0.25, liar_leave_probability=1.0)
        first_normal(model).vacate()
        liar = model.spawn_liar()
        model.step()
        assert liar.state == CarState.PARKED
        model.step()
        assert liar.state == CarState.DEPARTED
        assert model.stats.total_liars_left == 1
        assert any(e["event_kind"] == "liar_left" for e in model.stats.events)

    def test_missing_space_is_logged_and_skipped(self, make_model, caplog):
        model = make_model()
        normal = first_normal(model)
        normal.occupied_spot = None
        with caplog.at_level(logging.ERROR):
            normal.parked_step()
            assert not normal.vacate()
        assert "without a parking space" in caplog.text
        assert normal.state == CarState.PARKED


class TestStrategicLying:
    def test_fresh_liar_always_broadcasts(self, make_model):
        model = make_model(lie_probability=0.0)
        liar = model.spawn_liar()
        assert liar.wants_to_broadcast()

    def test_biased_coin(self, make_model):
        model = make_model(lie_probability=1.0)
        liar = model.spawn_liar()
        liar.fresh = False
        assert liar.wants_to_broadcast()
        model.lie_probability = 0.0
        assert not liar.wants_to_broadcast()

    def test_withholds_near_threshold(self, make_model):
        model = make_model(lie_probability=1.0, liar_detection_threshold=3)
        liar = model.spawn_liar()
        liar.fresh = False
        liar.suspicion_level = 2
        assert not liar.wants_to_broadcast()

    def test_flagged_liar_withholds(self, make_model):
        model = make_model(lie_probability=1.0)
        liar = model.spawn_liar()
        liar.fresh = False
        liar.is_flagged = True
        assert not liar.wants_to_broadcast()

    def test_genuine_always_rebroadcasts(self, make_model):
        model = make_model()
        car = model.spawn_emergency()
        car.fresh = False
        car.suspicion_level = 10
        assert car.wants_to_broadcast()

"""Tests for vectorborne.person — schedules, presence and per-strain health."""

import pytest

from vectorborne.person import ExposureEvent, Person
from vectorborne.place import Place
from vectorborne.types import NO_SOURCE, HealthState, HostLike, InfectionSource


@pytest.fixture
def home() -> Place:
    return Place(place_id=0, n_strains=3)


@pytest.fixture
def market() -> Place:
    return Place(place_id=1, n_strains=3)


class TestProtocol:
    def test_satisfies_host_protocol(self, home):
        assert isinstance(Person(0, 30, 3, home=home), HostLike)


class TestSchedule:
    def test_home_every_day(self, home, market):
        person = Person(0, 30, 3, home=home)
        for day in range(14):
            assert person.is_present(day, home)
            assert not person.is_present(day, market)

    def test_weekly_visit(self, home, market):
        person = Person(0, 30, 3, home=home, weekly_schedule={2: [market]})
        assert person.is_present(2, market)
        assert person.is_present(9, market)
        assert not person.is_present(3, market)
        assert person.is_present(2, home)

    def test_no_home(self, market):
        person = Person(0, 30, 3, weekly_schedule={0: [market]})
        assert person.get_activity_places(0) == [market]
        assert person.get_activity_places(1) == []

    def test_places_not_duplicated(self, home):
        person = Person(0, 30, 3, home=home, weekly_schedule={0: [home]})
        assert person.get_activity_places(0) == [home]

    def test_update_schedule_follows_day(self, home, market):
        person = Person(0, 30, 3, home=home, weekly_schedule={1: [market]})
        person.update_schedule(1)
        assert person.is_present(1, market)
        person.update_schedule(2)
        assert not person.is_present(2, market)


class TestHealth:
    def test_starts_susceptible(self):
        person = Person(0, 30, 3)
        for s in range(3):
            assert person.is_susceptible(s)
            assert person.get_health_state(s) == HealthState.SUSCEPTIBLE

    def test_become_exposed_records_event(self, home):
        person = Person(0, 30, 3)
        person.become_exposed(1, NO_SOURCE, home, 4)
        assert person.get_health_state(1) == HealthState.EXPOSED
        assert not person.is_susceptible(1)
        assert person.exposure_day[1] == 4
        assert person.exposures == [ExposureEvent(1, 4, home, NO_SOURCE)]

    def test_vector_borne_source(self, home):
        person = Person(0, 30, 3)
        person.become_exposed(0, NO_SOURCE, home, 0)
        event = person.exposures[0]
        assert event.source is InfectionSource.VECTOR
        assert event.is_vector_borne

    def test_host_source(self, home):
        infector = Person(1, 40, 3)
        person = Person(0, 30, 3)
        person.become_exposed(0, infector, home, 0)
        assert person.exposures[0].source is infector
        assert not person.exposures[0].is_vector_borne

    def test_become_unsusceptible(self):
        person = Person(0, 30, 3)
        person.become_unsusceptible(2)
        assert not person.is_susceptible(2)
        assert person.get_health_state(2) == HealthState.UNSUSCEPTIBLE

    def test_unsusceptible_does_not_clear_active_infection(self, home):
        person = Person(0, 30, 3)
        person.become_exposed(0, NO_SOURCE, home, 0)
        person.become_unsusceptible(0)
        assert person.get_health_state(0) == HealthState.EXPOSED

    def test_natural_history(self, home):
        person = Person(0, 30, 2)
        person.become_exposed(0, NO_SOURCE, home, 10)
        person.update_health(14, latent_period=5, infectious_period=3)
        assert person.get_health_state(0) == HealthState.EXPOSED
        person.update_health(15, latent_period=5, infectious_period=3)
        assert person.is_infectious(0)
        person.update_health(17, latent_period=5, infectious_period=3)
        assert person.is_infectious(0)
        person.update_health(18, latent_period=5, infectious_period=3)
        assert person.get_health_state(0) == HealthState.RECOVERED
        # untouched strain
        assert person.is_susceptible(1)

    def test_diagnostic_accessors(self):
        person = Person(17, 63, 1)
        assert person.get_id() == 17
        assert person.get_age() == 63

"""Filter/Predicate Engine: tests for predicates, combinators and live views."""

from datetime import date

import pytest

from contact_tracer.core.errors import PersonNotInfectedError
from contact_tracer.core.predicates import (
    FilteredView, all_of, any_of, apply_predicate, exposed_people_predicate,
    has_tag, high_risk_locations_predicate, is_infected, is_quarantined,
    name_matches_keywords, negate, show_all, show_none, visited_by_predicate, with_ids,
)
from contact_tracer.core.records import Location, Person, Visit
from contact_tracer.core.registry import LocationRegistry, PersonRegistry
from contact_tracer.core.visit_index import VisitIndex

ALICE = Person(id=1, name="Alice Pauline", phone="94351253", email="alice@example.com",
               address="123, Jurong West Ave 6", infection_status=True, tags={"friends"})
BENSON = Person(id=2, name="Benson Meier", phone="98765432", email="johnd@example.com",
                address="311, Clementi Ave 2", quarantine_status=True)
CARL = Person(id=3, name="Carl Kurz", phone="95352563", email="heinz@example.com",
              address="wall street")
MALL = Location(id=1, name="Jurong Point", address="1 Jurong West Central 2")
PARK = Location(id=2, name="East Coast Park", address="East Coast Park Service Rd")


def test_show_all_and_show_none():
    assert apply_predicate([ALICE, BENSON], show_all) == [ALICE, BENSON]
    assert apply_predicate([ALICE, BENSON], show_none) == []


def test_with_ids_keeps_source_order():
    assert apply_predicate([CARL, ALICE, BENSON], with_ids([1, 3])) == [CARL, ALICE]


@pytest.mark.parametrize("keywords, expected", [
    (["alice"], [ALICE]),
    (["KURZ", "meier"], [BENSON, CARL]),
    (["Ali"], []),
    (["Pauline Alice"], []),
    ([], []),
])
def test_name_keywords_match_whole_words_case_insensitively(keywords, expected):
    assert apply_predicate([ALICE, BENSON, CARL], name_matches_keywords(keywords)) == expected


def test_status_and_tag_predicates():
    people = [ALICE, BENSON, CARL]
    assert apply_predicate(people, is_infected) == [ALICE]
    assert apply_predicate(people, is_quarantined) == [BENSON]
    assert apply_predicate(people, has_tag("friends")) == [ALICE]


def test_combinators_are_explicit():
    people = [ALICE, BENSON, CARL]
    assert apply_predicate(people, any_of(is_infected, is_quarantined)) == [ALICE, BENSON]
    assert apply_predicate(people, all_of(is_infected, is_quarantined)) == []
    assert apply_predicate(people, negate(is_infected)) == [BENSON, CARL]
    assert apply_predicate(people, all_of()) == people


def test_domain_predicates_from_resolver_and_classifier():
    people = PersonRegistry([ALICE, BENSON, CARL])
    visits = VisitIndex([
        Visit(ALICE, PARK, date(2020, 9, 1)),
        Visit(BENSON, MALL, date(2020, 9, 1)),
        Visit(CARL, PARK, date(2020, 9, 2)),
    ])
    locations = [MALL, PARK]
    assert apply_predicate(locations, visited_by_predicate(people, visits, 1)) == [PARK]
    assert apply_predicate(
        [ALICE, BENSON, CARL], exposed_people_predicate(visits, [2]),
    ) == [ALICE, CARL]
    assert apply_predicate(
        locations, high_risk_locations_predicate(people, visits, threshold=0.4),
    ) == [PARK]
    with pytest.raises(PersonNotInfectedError):
        visited_by_predicate(people, visits, 2)


def test_filtered_view_reflects_later_mutations():
    registry = LocationRegistry([MALL])
    view = FilteredView(registry, name_matches_keywords(["park"]))
    assert view.items() == []
    registry.add(PARK)
    assert view.items() == [PARK]
    assert len(view) == 1
    view.set_predicate(show_all)
    assert view.items() == [MALL, PARK]

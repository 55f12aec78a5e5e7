"""Visit Index: tests for uniqueness, lookups and cascades.

Tests cover:
    - add / remove / set_visit failure modes
    - by_person / by_location / by_date keep insertion order
    - Cascades remove exactly the matching visits and return them
    - Removing a missing visit leaves the index unchanged
"""

from datetime import date

import pytest

from contact_tracer.core.errors import DuplicateVisitError, VisitNotFoundError
from contact_tracer.core.records import Location, Person, Visit
from contact_tracer.core.visit_index import VisitIndex, visits_are_unique

ALICE = Person(id=1, name="Alice Pauline", phone="94351253",
               email="alice@example.com", address="123, Jurong West Ave 6")
BOB = Person(id=2, name="Bob Choo", phone="98765432",
             email="bob@example.com", address="311, Clementi Ave 2")
MALL = Location(id=1, name="Jurong Point", address="1 Jurong West Central 2")
PARK = Location(id=2, name="East Coast Park", address="East Coast Park Service Rd")

SEP_1 = date(2020, 9, 1)
SEP_2 = date(2020, 9, 2)


def _index() -> VisitIndex:
    return VisitIndex([
        Visit(ALICE, MALL, SEP_1),
        Visit(BOB, PARK, SEP_1),
        Visit(ALICE, PARK, SEP_2),
        Visit(BOB, MALL, SEP_2),
    ])


# ─── add / remove / set_visit ────────────────────────────────────

def test_add_rejects_duplicate_triple():
    index = _index()
    with pytest.raises(DuplicateVisitError):
        index.add(Visit(ALICE, MALL, SEP_1))
    assert len(index) == 4


def test_constructor_rejects_duplicates():
    with pytest.raises(DuplicateVisitError):
        VisitIndex([Visit(ALICE, MALL, SEP_1), Visit(ALICE, MALL, SEP_1)])


def test_remove_missing_visit_leaves_index_unchanged():
    index = _index()
    before = index.list()
    with pytest.raises(VisitNotFoundError):
        index.remove(Visit(ALICE, MALL, date(2021, 1, 1)))
    assert index.list() == before
    assert index.version == 0


def test_remove_returns_former_position():
    index = _index()
    assert index.remove(Visit(ALICE, PARK, SEP_2)) == 2
    assert Visit(ALICE, PARK, SEP_2) not in index


def test_set_visit_replaces_in_place():
    index = _index()
    edited = Visit(ALICE, MALL, date(2020, 9, 5))
    index.set_visit(Visit(ALICE, MALL, SEP_1), edited)
    assert index.list()[0] == edited
    assert index.contains(edited)
    assert not index.contains(Visit(ALICE, MALL, SEP_1))


def test_set_visit_rejects_collision_with_other_visit():
    index = _index()
    with pytest.raises(DuplicateVisitError):
        index.set_visit(Visit(ALICE, MALL, SEP_1), Visit(BOB, PARK, SEP_1))


def test_set_visit_missing_target_raises_not_found():
    index = _index()
    with pytest.raises(VisitNotFoundError):
        index.set_visit(Visit(BOB, PARK, SEP_2), Visit(BOB, PARK, date(2020, 9, 9)))


def test_find_by_key():
    index = _index()
    assert index.find(2, 2, SEP_1) == Visit(BOB, PARK, SEP_1)
    with pytest.raises(VisitNotFoundError):
        index.find(2, 2, SEP_2)


# ─── lookups ─────────────────────────────────────────────────────

def test_lookups_preserve_insertion_order():
    index = _index()
    assert index.by_person(1) == (Visit(ALICE, MALL, SEP_1), Visit(ALICE, PARK, SEP_2))
    assert index.by_location(1) == (Visit(ALICE, MALL, SEP_1), Visit(BOB, MALL, SEP_2))
    assert index.by_date(SEP_2) == (Visit(ALICE, PARK, SEP_2), Visit(BOB, MALL, SEP_2))
    assert index.by_person(99) == ()


# ─── cascades ────────────────────────────────────────────────────

def test_cascade_delete_by_person():
    index = _index()
    removed = index.cascade_delete_by_person(1)
    assert removed == (Visit(ALICE, MALL, SEP_1), Visit(ALICE, PARK, SEP_2))
    assert all(v.person.id != 1 for v in index)
    assert len(index) == 2


def test_cascade_delete_by_location():
    index = _index()
    removed = index.cascade_delete_by_location(2)
    assert [v.key for v in removed] == [(2, 2, SEP_1), (1, 2, SEP_2)]
    assert index.by_location(2) == ()


def test_cascade_delete_by_date():
    index = _index()
    removed = index.cascade_delete_by_date(SEP_1)
    assert len(removed) == 2
    assert index.by_date(SEP_1) == ()
    assert index.list() == (Visit(ALICE, PARK, SEP_2), Visit(BOB, MALL, SEP_2))


def test_cascade_with_no_match_changes_nothing():
    index = _index()
    assert index.cascade_delete_by_date(date(1999, 1, 1)) == ()
    assert index.version == 0


def test_set_visits_replaces_contents_and_rejects_duplicates():
    index = _index()
    with pytest.raises(DuplicateVisitError):
        index.set_visits([Visit(ALICE, MALL, SEP_1), Visit(ALICE, MALL, SEP_1)])
    assert len(index) == 4
    index.set_visits([Visit(BOB, PARK, SEP_2)])
    assert index.list() == (Visit(BOB, PARK, SEP_2),)


def test_visits_are_unique_uses_key_triple():
    assert visits_are_unique([Visit(ALICE, MALL, SEP_1), Visit(ALICE, MALL, SEP_2)])
    assert not visits_are_unique([Visit(ALICE, MALL, SEP_1), Visit(ALICE, MALL, SEP_1)])

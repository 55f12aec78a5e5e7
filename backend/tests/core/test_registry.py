"""Entity Registries: tests for add/remove/set_entry/find_by_id and id allocation.

Tests cover:
    - Duplicate detection (full-equal, same identity, id collision, duplicate registration)
    - Insertion order, not id order
    - set_entry keeps position and rejects collisions with a different entry
    - Rejected operations leave no partial state and fire no notification
    - Allocator advances only on success and never reissues ids
"""

from dataclasses import replace

import pytest

from contact_tracer.core.domain_types import ChangeKind, EntityKind
from contact_tracer.core.errors import DuplicateEntityError, EntityNotFoundError
from contact_tracer.core.id_allocator import IdAllocator
from contact_tracer.core.records import Location, Person
from contact_tracer.core.registry import LocationRegistry, PersonRegistry


def _person(person_id: int, name: str = "Alice Pauline", phone: str = "94351253",
            email: str = "alice@example.com") -> Person:
    return Person(
        id=person_id, name=name, phone=phone, email=email,
        address="123, Jurong West Ave 6",
    )


def _build(name: str, phone: str, email: str):
    return lambda new_id: Person(
        id=new_id, name=name, phone=phone, email=email, address="1 Main Street",
    )


# ─── IdAllocator ─────────────────────────────────────────────────

def test_allocator_peek_has_no_side_effect():
    allocator = IdAllocator()
    assert allocator.peek() == 1
    assert allocator.peek() == 1


def test_allocator_commit_and_advance_past_never_go_backwards():
    allocator = IdAllocator()
    allocator.commit(1)
    allocator.advance_past([7, 3])
    assert allocator.peek() == 8
    allocator.commit(2)
    assert allocator.peek() == 8


# ─── add ─────────────────────────────────────────────────────────

def test_add_preserves_insertion_order_not_id_order():
    registry = PersonRegistry()
    registry.add(_person(3, name="Carl Kurz", phone="95352563", email="carl@example.com"))
    registry.add(_person(1))
    assert [p.id for p in registry.list()] == [3, 1]


def test_add_rejects_full_equal_entry():
    registry = PersonRegistry([_person(1)])
    with pytest.raises(DuplicateEntityError):
        registry.add(_person(1))
    assert len(registry) == 1


def test_add_rejects_same_person():
    registry = PersonRegistry([_person(1)])
    same_person = replace(_person(1), phone="11111111", address="Elsewhere 9")
    with pytest.raises(DuplicateEntityError):
        registry.add(same_person)


def test_add_rejects_id_collision():
    registry = PersonRegistry([_person(1)])
    with pytest.raises(DuplicateEntityError):
        registry.add(_person(1, name="Bob Choo", phone="98765432", email="bob@example.com"))


# ─── register ────────────────────────────────────────────────────

def test_register_assigns_increasing_ids():
    registry = PersonRegistry()
    first = registry.register(_build("Alice Pauline", "94351253", "alice@example.com"))
    second = registry.register(_build("Bob Choo", "98765432", "bob@example.com"))
    assert (first.id, second.id) == (1, 2)


def test_register_rejects_duplicate_under_new_id_without_consuming_id():
    registry = PersonRegistry()
    registry.register(_build("Alice Pauline", "94351253", "alice@example.com"))
    with pytest.raises(DuplicateEntityError):
        registry.register(_build("Alice Pauline", "94351253", "alice@example.com"))
    assert registry.allocator.peek() == 2


def test_register_never_reissues_removed_ids():
    registry = PersonRegistry()
    alice = registry.register(_build("Alice Pauline", "94351253", "alice@example.com"))
    registry.remove(alice)
    bob = registry.register(_build("Bob Choo", "98765432", "bob@example.com"))
    assert bob.id == 2


def test_injected_allocator_is_used():
    registry = LocationRegistry(allocator=IdAllocator(next_id=10))
    mall = registry.register(lambda new_id: Location(id=new_id, name="Mall", address="1 Road"))
    assert mall.id == 10


# ─── remove / find_by_id ─────────────────────────────────────────

def test_remove_missing_entry_raises_not_found():
    registry = PersonRegistry([_person(1)])
    with pytest.raises(EntityNotFoundError):
        registry.remove(replace(_person(1), address="Elsewhere 9"))
    assert len(registry) == 1


def test_find_by_id():
    alice = _person(1)
    registry = PersonRegistry([alice])
    assert registry.find_by_id(1) is alice
    with pytest.raises(EntityNotFoundError) as exc_info:
        registry.find_by_id(2)
    assert exc_info.value.entity_id == 2
    assert exc_info.value.entity_kind == "person"


# ─── set_entry ───────────────────────────────────────────────────

def test_set_entry_replaces_in_place():
    alice = _person(1)
    bob = _person(2, name="Bob Choo", phone="98765432", email="bob@example.com")
    registry = PersonRegistry([alice, bob])
    edited = replace(alice, address="New Address 5")
    registry.set_entry(alice, edited)
    assert registry.list() == (edited, bob)
    assert registry.find_by_id(1) is edited


def test_set_entry_to_itself_is_allowed():
    alice = _person(1)
    registry = PersonRegistry([alice])
    registry.set_entry(alice, alice)
    assert registry.list() == (alice,)


def test_set_entry_rejects_collision_with_other_entry():
    alice = _person(1)
    bob = _person(2, name="Bob Choo", phone="98765432", email="bob@example.com")
    registry = PersonRegistry([alice, bob])
    with pytest.raises(DuplicateEntityError):
        registry.set_entry(alice, replace(bob, address="Anywhere 3"))
    assert registry.list() == (alice, bob)


def test_set_entry_missing_target_raises_not_found():
    registry = PersonRegistry()
    with pytest.raises(EntityNotFoundError):
        registry.set_entry(_person(1), _person(1))


# ─── restore / load ──────────────────────────────────────────────

def test_restore_reinserts_at_position():
    alice = _person(1)
    bob = _person(2, name="Bob Choo", phone="98765432", email="bob@example.com")
    registry = PersonRegistry([alice, bob])
    registry.remove(alice)
    registry.restore(alice, 0)
    assert registry.list() == (alice, bob)


def test_load_advances_allocator_past_max_id():
    registry = PersonRegistry()
    registry.load([
        _person(4),
        _person(9, name="Bob Choo", phone="98765432", email="bob@example.com"),
    ])
    assert registry.allocator.peek() == 10


def test_load_rejects_duplicates_and_keeps_old_contents():
    alice = _person(1)
    registry = PersonRegistry([alice])
    with pytest.raises(DuplicateEntityError):
        registry.load([_person(5), _person(5)])
    assert registry.list() == (alice,)


# ─── notifications ───────────────────────────────────────────────

def test_committed_mutations_notify_subscribers():
    registry = PersonRegistry()
    changes = []
    registry.subscribe(changes.append)
    alice = _person(1)
    registry.add(alice)
    registry.remove(alice)
    assert [(c.entity_kind, c.kind) for c in changes] == [
        (EntityKind.PERSON, ChangeKind.ADDED),
        (EntityKind.PERSON, ChangeKind.REMOVED),
    ]
    assert registry.version == 2


def test_rejected_mutation_does_not_notify():
    registry = PersonRegistry([_person(1)])
    changes = []
    registry.subscribe(changes.append)
    with pytest.raises(DuplicateEntityError):
        registry.add(_person(1))
    assert changes == []
    assert registry.version == 0


def test_unsubscribe_stops_notifications():
    registry = PersonRegistry()
    changes = []
    registry.subscribe(changes.append)
    registry.unsubscribe(changes.append)
    registry.add(_person(1))
    assert changes == []

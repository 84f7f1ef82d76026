import random

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from kanban.exceptions import InvalidPositionError, NotFoundError
from kanban.models import Board, BoardList, Card, ChecklistItem
from kanban.services.positions import (Shift, append_position, removal_shifts, reorder_shifts,
                                       move_shifts, card_positions, list_positions,
                                       checklist_positions)


def apply_all(containers, shifts):
    for shift in shifts:
        containers[shift.container] = shift.apply(containers[shift.container])
    return containers


def test_append_position():
    assert append_position(None) == 0
    assert append_position(0) == 1
    assert append_position(6) == 7


def test_shift_covers_open_and_closed_ranges():
    assert Shift("l", 2, None, -1).covers(10)
    assert not Shift("l", 2, None, -1).covers(1)
    assert Shift("l", 1, 3, 1).covers(3)
    assert not Shift("l", 1, 3, 1).covers(4)


def test_reorder_later_decrements_between():
    shifts = reorder_shifts("l", 0, 2)
    assert shifts == [Shift("l", 1, 2, -1)]
    result = apply_all({"l": {"a": 0, "b": 1, "c": 2, "d": 3}}, shifts)["l"]
    result["a"] = 2
    assert result == {"b": 0, "c": 1, "a": 2, "d": 3}


def test_reorder_earlier_increments_between():
    shifts = reorder_shifts("l", 3, 1)
    assert shifts == [Shift("l", 1, 2, 1)]
    result = apply_all({"l": {"a": 0, "b": 1, "c": 2, "d": 3}}, shifts)["l"]
    result["d"] = 1
    assert sorted(result, key=result.get) == ["a", "d", "b", "c"]


def test_reorder_same_slot_is_noop():
    assert reorder_shifts("l", 2, 2) == []
    assert move_shifts("l", 2, "l", 2) == []


def test_removal_closes_gap():
    containers = {"l": {"a": 0, "c": 2}}
    assert apply_all(containers, removal_shifts("l", 1))["l"] == {"a": 0, "c": 1}


def test_move_across_containers():
    shifts = move_shifts("l", 1, "m", 0)
    assert shifts == [Shift("l", 2, None, -1), Shift("m", 0, None, 1)]
    containers = apply_all({"l": {"b": 0, "c": 2}, "m": {"x": 0, "y": 1}}, shifts)
    containers["m"]["a"] = 0
    assert containers == {"l": {"b": 0, "c": 1}, "m": {"a": 0, "x": 1, "y": 2}}


def test_random_moves_keep_sequences_dense():
    rng = random.Random(7)
    containers = {"l": {f"l{i}": i for i in range(5)}, "m": {f"m{i}": i for i in range(3)}}
    for _ in range(200):
        source = rng.choice([name for name, entries in containers.items() if entries])
        target = rng.choice(list(containers))
        entry = rng.choice(list(containers[source]))
        old = containers[source][entry]
        upper = len(containers[target]) - (1 if source == target else 0)
        new = rng.randint(0, upper)

        shifts = move_shifts(source, old, target, new)
        del containers[source][entry]
        apply_all(containers, shifts)
        containers[target][entry] = new

        for entries in containers.values():
            assert sorted(entries.values()) == list(range(len(entries)))


# Applied against the database


@pytest.fixture
def two_lists(session):
    board = Board(title="Board")
    session.add(board)
    session.flush()
    first = BoardList(board_id=board.id, title="L")
    list_positions.insert(session, first)
    second = BoardList(board_id=board.id, title="M")
    session.flush()
    list_positions.insert(session, second)
    session.commit()
    return first.id, second.id


def add_cards(session, list_id, titles):
    ids = {}
    for title in titles:
        card = Card(list_id=list_id, title=title)
        card_positions.insert(session, card)
        session.flush()
        ids[title] = card.id
    session.commit()
    return ids


def order(session, list_id):
    cards = session.exec(
        select(Card).where(Card.list_id == list_id, Card.archived == False).order_by(Card.position)
    ).all()
    assert [card.position for card in cards] == list(range(len(cards)))
    return [card.title for card in cards]


def test_sequential_inserts_get_dense_positions(session, two_lists):
    first, second = two_lists
    assert session.get(BoardList, first).position == 0
    assert session.get(BoardList, second).position == 1
    add_cards(session, first, ["A", "B", "C", "D"])
    assert order(session, first) == ["A", "B", "C", "D"]


def test_explicit_insert_position_must_be_append_slot(session, two_lists):
    first, _ = two_lists
    add_cards(session, first, ["A", "B"])
    with pytest.raises(InvalidPositionError):
        card_positions.insert(session, Card(list_id=first, title="X"), 0)
    card = card_positions.insert(session, Card(list_id=first, title="C"), 2)
    assert card.position == 2


def test_reorder_then_move_scenario(session, two_lists):
    first, second = two_lists
    ids = add_cards(session, first, ["A", "B", "C"])

    card_positions.move(session, ids["B"], 0)
    session.commit()
    assert order(session, first) == ["B", "A", "C"]

    card_positions.move(session, ids["A"], 0, second)
    session.commit()
    assert order(session, first) == ["B", "C"]
    assert order(session, second) == ["A"]
    assert session.get(Card, ids["A"]).list_id == second


def test_remove_closes_gap_in_order(session, two_lists):
    first, _ = two_lists
    ids = add_cards(session, first, ["A", "B", "C"])
    card_positions.remove(session, ids["B"])
    session.commit()
    assert order(session, first) == ["A", "C"]


def test_archived_cards_do_not_shift(session, two_lists):
    first, _ = two_lists
    ids = add_cards(session, first, ["A", "B", "C"])
    archived = session.get(Card, ids["C"])
    card_positions.detach(session, archived)
    archived.archived = True
    session.commit()
    assert order(session, first) == ["A", "B"]

    card_positions.remove(session, ids["A"])
    session.commit()
    add_cards(session, first, ["D"])
    assert order(session, first) == ["B", "D"]
    # Stale position left untouched
    assert session.get(Card, ids["C"]).position == 2


def test_move_rejects_out_of_range_position(session, two_lists):
    first, second = two_lists
    ids = add_cards(session, first, ["A", "B"])
    with pytest.raises(InvalidPositionError):
        card_positions.move(session, ids["A"], 2)
    with pytest.raises(InvalidPositionError):
        card_positions.move(session, ids["A"], 1, second)
    with pytest.raises(InvalidPositionError):
        card_positions.move(session, ids["A"], -1)
    session.rollback()
    assert order(session, first) == ["A", "B"]


def test_missing_entry_is_not_found_without_writes(session, two_lists):
    first, _ = two_lists
    add_cards(session, first, ["A", "B"])
    with pytest.raises(NotFoundError):
        card_positions.move(session, "missing", 0)
    with pytest.raises(NotFoundError):
        card_positions.remove(session, "missing")
    assert order(session, first) == ["A", "B"]


def test_checklist_positions_scoped_per_card(session, two_lists):
    first, _ = two_lists
    ids = add_cards(session, first, ["A", "B"])
    for card_id in ids.values():
        for title in ("one", "two"):
            checklist_positions.insert(session, ChecklistItem(card_id=card_id, title=title))
            session.flush()
    session.commit()
    items = session.exec(select(ChecklistItem).where(ChecklistItem.card_id == ids["B"])).all()
    assert sorted(item.position for item in items) == [0, 1]


def test_archived_entry_is_outside_the_ordering(session, two_lists):
    first, _ = two_lists
    ids = add_cards(session, first, ["A", "B", "C"])
    archived = session.get(Card, ids["A"])
    card_positions.detach(session, archived)
    archived.archived = True
    session.commit()
    assert order(session, first) == ["B", "C"]

    with pytest.raises(InvalidPositionError):
        card_positions.move(session, ids["A"], 1)
    with pytest.raises(InvalidPositionError):
        card_positions.detach(session, session.get(Card, ids["A"]))
    session.rollback()
    assert order(session, first) == ["B", "C"]

    card_positions.remove(session, ids["A"])
    session.commit()
    assert order(session, first) == ["B", "C"]


def test_failed_move_rolls_back_sibling_shifts(session, two_lists):
    first, second = two_lists
    ids = add_cards(session, first, ["A", "B", "C"])
    add_cards(session, second, ["X"])

    # Siblings shift before the target row fails its foreign key
    card_positions.move(session, ids["A"], 0, "missing")
    with pytest.raises(IntegrityError):
        session.commit()
    session.rollback()

    assert order(session, first) == ["A", "B", "C"]
    assert order(session, second) == ["X"]
    assert session.get(Card, ids["A"]).list_id == first

import pytest

from brokenphone.game import history
from brokenphone.game.errors import DuplicateSubmission, EntryMissing
from brokenphone.game.models import Player, Room


def _room(*pids):
    room = Room(id='ROOM01')
    for pid in pids:
        room.players[pid] = Player(id=pid, name=pid)
        room.order.append(pid)
    return room


def test_start_chain_rejects_second_prompt_from_same_owner():
    room = _room('A', 'B')
    history.start_chain(room, 'A', 'cat')
    with pytest.raises(DuplicateSubmission):
        history.start_chain(room, 'A', 'dog')
    assert len(room.history) == 1


def test_steps_must_follow_prompt_drawing_guess():
    room = _room('A', 'B', 'C')
    entry = history.start_chain(room, 'A', 'cat')

    with pytest.raises(EntryMissing):
        history.append_step(entry, 'guess', 'C', 'a dog?')

    history.append_step(entry, 'drawing', 'B', [{'points': [[0, 0]]}])
    with pytest.raises(DuplicateSubmission):
        history.append_step(entry, 'drawing', 'B', [])

    history.append_step(entry, 'guess', 'C', 'cat')
    assert [s.kind for s in entry.steps] == ['prompt', 'drawing', 'guess']
    assert [s.by for s in entry.steps] == ['A', 'B', 'C']


def test_placeholders_give_every_player_exactly_one_chain():
    room = _room('A', 'B', 'C')
    history.start_chain(room, 'B', 'dog')

    filled = history.fill_placeholders(room, lambda: 'ghost')

    assert sorted(e.owner for e in filled) == ['A', 'C']
    assert sorted(e.owner for e in room.history) == ['A', 'B', 'C']
    for entry in filled:
        assert entry.steps[0].placeholder
        assert entry.steps[0].data == 'ghost'
        assert entry.steps[0].by == entry.owner
    assert not history.find_entry(room, 'B').steps[0].placeholder


def test_count_reached_counts_chains_holding_a_step():
    room = _room('A', 'B')
    a = history.start_chain(room, 'A', 'cat')
    history.start_chain(room, 'B', 'dog')
    history.append_step(a, 'drawing', 'B', [])

    assert history.count_reached(room, 'prompt') == 2
    assert history.count_reached(room, 'drawing') == 1
    assert history.count_reached(room, 'guess') == 0


def test_serialized_history_uses_wire_field_names():
    room = _room('A', 'B')
    entry = history.start_chain(room, 'A', 'cat')
    history.append_step(entry, 'drawing', 'B', [{'color': '#fff', 'size': 6, 'points': [[1, 2]]}])

    assert history.serialize_history(room) == [
        {
            'owner': 'A',
            'sequence': [
                {'type': 'prompt', 'by': 'A', 'data': 'cat', 'placeholder': False},
                {'type': 'drawing', 'by': 'B', 'data': [{'color': '#fff', 'size': 6, 'points': [[1, 2]]}], 'placeholder': False},
            ],
        }
    ]

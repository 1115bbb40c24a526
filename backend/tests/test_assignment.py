import pytest

from brokenphone.game.assignment import drawer_for, guesser_for


def test_three_players_rotate_by_join_order():
    order = ['A', 'B', 'C']
    assert drawer_for(order, 'A').player_id == 'B'
    assert drawer_for(order, 'B').player_id == 'C'
    assert drawer_for(order, 'C').player_id == 'A'
    assert guesser_for(order, 'A').player_id == 'C'
    assert guesser_for(order, 'B').player_id == 'A'
    assert guesser_for(order, 'C').player_id == 'B'


@pytest.mark.parametrize('n', [3, 4, 5, 8])
def test_nobody_draws_or_guesses_their_own_chain(n):
    order = [f'p{i}' for i in range(n)]
    for owner in order:
        assert drawer_for(order, owner).player_id != owner
        assert guesser_for(order, owner).player_id != owner


def test_two_players_both_duties_go_to_the_other_player():
    order = ['A', 'B']
    assert drawer_for(order, 'A').player_id == 'B'
    assert guesser_for(order, 'A').player_id == 'B'
    assert drawer_for(order, 'B').player_id == 'A'
    assert guesser_for(order, 'B').player_id == 'A'


def test_departed_owner_resolves_to_no_duty():
    duty = drawer_for(['A', 'B'], 'C')
    assert not duty.assigned
    assert duty.player_id is None
    assert duty.owner_id == 'C'
    assert not duty.is_for('A')
    assert not guesser_for(['A', 'B'], 'C').assigned


def test_single_player_has_no_duties():
    assert not drawer_for(['A'], 'A').assigned
    assert not guesser_for([], 'A').assigned


def test_rotation_follows_current_order_after_departure():
    order = ['A', 'B', 'C', 'D']
    assert drawer_for(order, 'A').player_id == 'B'
    order.remove('B')
    assert drawer_for(order, 'A').player_id == 'C'
    assert guesser_for(order, 'A').player_id == 'D'

import numpy as np
import pytest

from tdgammon.core import ALL_21, Dice, DiceGen


def test_all_21_weights():
    assert len(ALL_21) == 21
    assert len({dice for dice, _ in ALL_21}) == 21
    assert sum(weight for _, weight in ALL_21) == 36
    doubles = [weight for dice, weight in ALL_21 if dice.is_double]
    assert doubles == [1.0] * 6
    assert sum(1 for dice, weight in ALL_21 if weight == 2.0) == 15


def test_dice_are_unordered():
    assert Dice(2, 5) == Dice(5, 2)
    assert Dice(2, 5).big == 5
    with pytest.raises(ValueError):
        Dice(0, 3)
    with pytest.raises(ValueError):
        Dice(7, 1)


def test_dice_gen_is_seedable():
    a = DiceGen(np.random.default_rng(11))
    b = DiceGen(np.random.default_rng(11))
    assert [a.roll() for _ in range(20)] == [b.roll() for _ in range(20)]


def test_first_roll_is_never_double():
    dice_gen = DiceGen(np.random.default_rng(0))
    assert not any(dice_gen.first_roll().is_double for _ in range(200))

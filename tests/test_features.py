import numpy as np
import torch

from tdgammon.core import BAR, NUM_PIPS, Hypergammon, Position
from tdgammon.features import INPUT_SIZE, encode_position, positions_to_numpy, positions_to_torch

HALF = 24 * 4


def test_start_position_encoding():
    features = encode_position(Hypergammon.new().position())
    assert features.shape == (INPUT_SIZE,)
    assert features.dtype == np.float32
    for point in (22, 23, 24):
        base = (point - 1) * 4
        assert features[base : base + 4].tolist() == [1.0, 0.0, 0.0, 0.0]
    assert features.sum() == 6.0


def test_encoding_swaps_sides_on_flip():
    pips = [0] * NUM_PIPS
    pips[7] = 5
    pips[BAR] = 1
    pips[3] = -2
    pips[0] = -1
    position = Position(tuple(pips), x_off=0, o_off=0)
    features = encode_position(position)
    flipped = encode_position(position.flip())
    assert np.array_equal(features[:HALF], flipped[HALF : 2 * HALF])
    assert np.array_equal(features[HALF : 2 * HALF], flipped[:HALF])
    assert features[6 * 4 : 7 * 4].tolist() == [1.0, 1.0, 1.0, 1.0]
    assert features[2 * HALF] == 0.5 and features[2 * HALF + 1] == 0.5


def test_off_counts():
    pips = [0] * NUM_PIPS
    pips[1] = 1
    pips[24] = -2
    features = encode_position(Position(tuple(pips), x_off=2, o_off=1))
    assert features[-2] == np.float32(2 / 3)
    assert features[-1] == np.float32(1 / 3)


def test_batch_helpers():
    positions = [Hypergammon.new().position()] * 3
    assert positions_to_numpy(positions).shape == (3, INPUT_SIZE)
    assert positions_to_numpy([]).shape == (0, INPUT_SIZE)
    tensor = positions_to_torch(positions, dtype=torch.float64)
    assert tensor.shape == (3, INPUT_SIZE)
    assert tensor.dtype == torch.float64

"""
Unit tests for data models (Fingerprint, Corner, HashStoreEntry).
"""

import math

import imagehash
import numpy as np
import pytest

from imgprint.config import HASH_MASK
from imgprint.errors import FingerprintParseError
from imgprint.models import (
    Corner,
    Fingerprint,
    HashStoreEntry,
    TaskStatus,
    score_order_key,
)


class TestFingerprint:
    """Test Fingerprint parsing, formatting and conversion."""

    def test_from_str(self):
        assert Fingerprint.from_str("9").value == 9

    def test_str_round_trip(self):
        fp = Fingerprint(17361641481138401520)
        assert Fingerprint.from_str(str(fp)) == fp

    def test_max_value(self):
        fp = Fingerprint.from_str(str(HASH_MASK))
        assert fp.value == HASH_MASK

    @pytest.mark.parametrize("text", ["", "abc", "-1", "1.5", " 9", "0x10", "١٢"])
    def test_malformed_string_raises(self, text):
        with pytest.raises(FingerprintParseError):
            Fingerprint.from_str(text)

    def test_out_of_range_raises(self):
        with pytest.raises(FingerprintParseError):
            Fingerprint.from_str(str(HASH_MASK + 1))

    def test_non_string_raises(self):
        with pytest.raises(FingerprintParseError):
            Fingerprint.from_str(9)

    def test_parse_error_is_value_error(self):
        """Callers catching ValueError also catch parse errors."""
        with pytest.raises(ValueError):
            Fingerprint.from_str("nope")

    def test_subtraction_is_hamming_distance(self):
        assert Fingerprint(7) - Fingerprint(8) == 4

    def test_to_hex(self):
        assert Fingerprint(255).to_hex() == "00000000000000ff"

    def test_imagehash_round_trip(self):
        fp = Fingerprint(0x8000_0000_0000_0001)
        ih = fp.to_imagehash()
        assert ih.hash.shape == (8, 8)
        assert ih.hash[0, 0] and ih.hash[7, 7]
        assert str(ih) == fp.to_hex()
        assert Fingerprint.from_imagehash(ih) == fp

    def test_from_imagehash_wrong_size(self):
        ih = imagehash.ImageHash(np.zeros((16, 16), dtype=bool))
        with pytest.raises(FingerprintParseError):
            Fingerprint.from_imagehash(ih)

    def test_hashable(self):
        assert len({Fingerprint(1), Fingerprint(1), Fingerprint(2)}) == 2


class TestCorner:
    """Test the score-only order and equality of corners."""

    def test_orders_by_score_only(self):
        assert Corner(index=99, score=1.0) < Corner(index=0, score=2.0)

    def test_nan_sorts_lowest(self):
        corners = [
            Corner(0, 1.0),
            Corner(1, float('nan')),
            Corner(2, float('-inf')),
            Corner(3, -5.0),
        ]
        ordered = sorted(corners)
        assert math.isnan(ordered[0].score)
        assert [c.index for c in ordered[1:]] == [2, 3, 0]

    def test_nan_keys_equal(self):
        assert score_order_key(float('nan')) == score_order_key(float('nan'))

    def test_max_ignores_nan(self):
        corners = [Corner(0, float('nan')), Corner(1, 0.5)]
        assert max(corners).index == 1

    def test_position(self):
        assert Corner(index=23, score=0.0).position(width=10) == (3, 2)

    def test_equality_follows_order(self):
        a, b = Corner(1, 5.0), Corner(2, 5.0)
        assert a <= b and b <= a
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_nan_corners_equal(self):
        assert Corner(0, float('nan')) == Corner(3, float('nan'))

    def test_different_scores_not_equal(self):
        assert Corner(0, 1.0) != Corner(0, 2.0)
        assert Corner(0, 1.0) != (0, 1.0)


class TestHashStoreEntry:
    """Test JSON conversion of store entries."""

    def test_to_json_uses_decimal_string(self):
        entry = HashStoreEntry(Fingerprint(9), "a.png")
        assert entry.to_json() == ["9", "a.png"]

    def test_from_json_string(self):
        entry = HashStoreEntry.from_json(["9", "a.png"])
        assert entry.fingerprint == Fingerprint(9)
        assert entry.path == "a.png"

    def test_from_json_integer(self):
        assert HashStoreEntry.from_json([9, "a.png"]).fingerprint == Fingerprint(9)

    @pytest.mark.parametrize("item", [
        ["9"],
        ["9", "a.png", "extra"],
        {"hash": "9"},
        ["x9", "a.png"],
        ["9", 5],
        [True, "a.png"],
    ])
    def test_from_json_malformed(self, item):
        with pytest.raises(FingerprintParseError):
            HashStoreEntry.from_json(item)


class TestTaskStatus:
    def test_terminal_states(self):
        assert not TaskStatus.IDLE.is_terminal
        assert not TaskStatus.HASHING.is_terminal
        assert TaskStatus.FINISHED.is_terminal
        assert TaskStatus.ERRORED.is_terminal
        assert TaskStatus.CANCELLED.is_terminal

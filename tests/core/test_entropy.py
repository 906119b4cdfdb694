import math
import string

import pytest

from hushscan.core.entropy import shannon_entropy, entropy_bonus, ENTROPY_THRESHOLD


def test_single_symbol_string_has_zero_entropy():
    assert shannon_entropy("aaaaaaaa") == 0.0


def test_even_two_symbol_split_is_one_bit():
    assert shannon_entropy("ab") == pytest.approx(1.0)
    assert shannon_entropy("aabb") == pytest.approx(1.0)


def test_distinct_symbols_reach_log2_of_alphabet():
    assert shannon_entropy("abcd") == pytest.approx(2.0)
    assert shannon_entropy(string.ascii_letters) == pytest.approx(math.log2(52))


def test_empty_string_is_zero():
    assert shannon_entropy("") == 0.0


def test_entropy_bonus_applies_at_threshold():
    # 23 distinct characters -> log2(23) ~= 4.52 bits
    assert shannon_entropy(string.ascii_letters[:23]) >= ENTROPY_THRESHOLD
    assert entropy_bonus(string.ascii_letters[:23]) == 2.0
    # 22 distinct characters -> log2(22) ~= 4.46 bits
    assert entropy_bonus(string.ascii_letters[:22]) == 0.0

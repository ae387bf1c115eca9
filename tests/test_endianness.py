import sys

import pytest

from nachosim.endianness import (
    short_to_host,
    short_to_machine,
    word_to_host,
    word_to_machine,
)

WORDS = [0, 1, 0x01020304, 0x456789AB, 0xFFFFFFFF, 0x80000000]
SHORTS = [0, 1, 0x0102, 0x8000, 0xFFFF]


@pytest.mark.parametrize("word", WORDS)
def test_word_round_trip(word):
    assert word_to_host(word_to_machine(word)) == word
    assert word_to_machine(word_to_host(word)) == word


@pytest.mark.parametrize("value", SHORTS)
def test_short_round_trip(value):
    assert short_to_host(short_to_machine(value)) == value


@pytest.mark.parametrize("word", WORDS)
def test_machine_word_is_little_endian_in_memory(word):
    stored = word_to_machine(word).to_bytes(4, sys.byteorder)
    assert stored == word.to_bytes(4, "little")


@pytest.mark.parametrize("value", SHORTS)
def test_machine_short_is_little_endian_in_memory(value):
    stored = short_to_machine(value).to_bytes(2, sys.byteorder)
    assert stored == value.to_bytes(2, "little")


@pytest.mark.parametrize("word", WORDS)
def test_word_results_stay_in_range(word):
    assert 0 <= word_to_host(word) <= 0xFFFFFFFF


def test_negative_word_is_masked():
    assert word_to_machine(-1) == 0xFFFFFFFF


def test_negative_short_is_masked():
    assert short_to_machine(-1) == 0xFFFF
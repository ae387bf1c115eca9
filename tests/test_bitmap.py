import io

import pytest

from nachosim.bitmap import Bitmap
from nachosim.utility import BITS_IN_WORD


def test_new_bitmap_is_clear():
    bitmap = Bitmap(40)
    assert bitmap.count_clear() == 40
    assert not any(bitmap.test(i) for i in range(40))
    assert len(bitmap) == 40


def test_zero_bits_rejected():
    with pytest.raises(ValueError):
        Bitmap(0)


def test_mark_test_clear():
    bitmap = Bitmap(10)
    bitmap.mark(4)
    assert bitmap.test(4)
    assert bitmap.count_clear() == 9
    bitmap.clear(4)
    assert not bitmap.test(4)
    assert bitmap.count_clear() == 10


@pytest.mark.parametrize("which", [-1, 10, 100])
def test_out_of_range(which):
    bitmap = Bitmap(10)
    with pytest.raises(IndexError):
        bitmap.mark(which)
    with pytest.raises(IndexError):
        bitmap.test(which)
    with pytest.raises(IndexError):
        bitmap.clear(which)


def test_find_allocates_lowest_clear():
    bitmap = Bitmap(5)
    bitmap.mark(0)
    bitmap.mark(2)
    assert bitmap.find() == 1
    assert bitmap.test(1)
    assert bitmap.find() == 3


def test_find_on_full_returns_none():
    bitmap = Bitmap(3)
    assert [bitmap.find() for _ in range(3)] == [0, 1, 2]
    assert bitmap.find() is None
    assert bitmap.count_clear() == 0


def test_storage_rounds_up_to_words():
    bitmap = Bitmap(BITS_IN_WORD + 1)
    assert bitmap.num_words == 2
    assert len(bitmap.to_bytes()) == 8


def test_word_layout_is_little_endian():
    bitmap = Bitmap(2 * BITS_IN_WORD)
    bitmap.mark(0)
    bitmap.mark(BITS_IN_WORD)
    data = bitmap.to_bytes()
    assert int.from_bytes(data[:4], "little") == 1
    assert int.from_bytes(data[4:], "little") == 1


def test_bytes_round_trip():
    source = Bitmap(50)
    for i in (0, 7, 8, 31, 32, 49):
        source.mark(i)
    copy = Bitmap(50)
    copy.load_bytes(source.to_bytes())
    assert [copy.test(i) for i in range(50)] == [source.test(i) for i in range(50)]


def test_load_wrong_length_rejected():
    with pytest.raises(ValueError):
        Bitmap(10).load_bytes(b"\x00")


def test_dump_lists_set_bits():
    bitmap = Bitmap(5)
    bitmap.mark(1)
    bitmap.mark(3)
    out = io.StringIO()
    bitmap.dump(out)
    assert out.getvalue() == "Bitmap bits set:\n1 3 \n"
import pytest

from nachosim.itemlist import ItemList


def make(*items):
    lst = ItemList()
    for item in items:
        lst.append(item)
    return lst


def test_append_and_prepend_order():
    lst = make("b", "c")
    lst.prepend("a")
    assert list(lst) == ["a", "b", "c"]
    assert len(lst) == 3


def test_head_does_not_remove():
    lst = make("x", "y")
    assert lst.head() == "x"
    assert list(lst) == ["x", "y"]


def test_head_of_empty_raises():
    with pytest.raises(IndexError):
        ItemList().head()


def test_pop_empty_returns_none():
    lst = ItemList()
    assert lst.pop() is None
    assert lst.is_empty()


def test_pop_takes_front():
    lst = make("x", "y")
    assert lst.pop() == "x"
    assert lst.pop() == "y"
    assert lst.is_empty()


def test_sorted_insert_orders_by_key():
    lst = ItemList()
    for item, key in [("c", 30), ("a", 10), ("b", 20), ("d", 40)]:
        lst.sorted_insert(item, key)
    assert list(lst) == ["a", "b", "c", "d"]


def test_sorted_insert_is_stable_for_equal_keys():
    lst = ItemList()
    lst.sorted_insert("first", 5)
    lst.sorted_insert("second", 5)
    lst.sorted_insert("early", 1)
    assert list(lst) == ["early", "first", "second"]


def test_sorted_pop_returns_key():
    lst = ItemList()
    lst.sorted_insert("late", 70)
    lst.sorted_insert("soon", 7)
    assert lst.sorted_pop() == ("soon", 7)
    assert lst.sorted_pop() == ("late", 70)
    assert lst.sorted_pop() is None


@pytest.mark.parametrize("victim", ["a", "b", "c"])
def test_remove_any_position(victim):
    lst = make("a", "b", "c")
    lst.remove(victim)
    remaining = [x for x in ["a", "b", "c"] if x != victim]
    assert list(lst) == remaining
    lst.append("z")
    assert list(lst) == remaining + ["z"]


def test_remove_missing_is_silent():
    lst = make("a")
    lst.remove("nope")
    assert list(lst) == ["a"]


def test_remove_only_first_occurrence():
    lst = make("a", "b", "a")
    lst.remove("a")
    assert list(lst) == ["b", "a"]


def test_has():
    lst = make(1, 2)
    assert lst.has(2)
    assert not lst.has(3)


def test_apply_visits_in_order():
    seen = []
    make("p", "q", "r").apply(seen.append)
    assert seen == ["p", "q", "r"]
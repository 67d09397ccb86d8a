"""Tests for memoized state selectors."""
from __future__ import annotations

from unittest.mock import Mock

import pytest

from action_selector import create_selector


def test_single_selector_is_returned_as_is():
    select = lambda state: state["a"]
    assert create_selector(select) is select


def test_result_is_memoized_on_input_identity():
    items = ("x", "y")
    result_fn = Mock(side_effect=lambda values: len(values))
    select_count = create_selector(lambda state: state["items"], result_fn=result_fn)

    assert select_count({"items": items}) == 2
    assert select_count({"items": items}) == 2
    result_fn.assert_called_once_with(items)
    assert select_count.cache_info()[:2] == (1, 1)


def test_deep_comparison_reuses_equal_inputs():
    result_fn = Mock(side_effect=lambda values: sum(values))
    select_sum = create_selector(lambda state: state["values"], result_fn=result_fn, deep=True)

    select_sum({"values": [1, 2]})
    select_sum({"values": [1, 2]})

    result_fn.assert_called_once()


def test_two_item_tuple_state_is_passed_through_whole():
    select = create_selector(lambda state: state[0], lambda state: state[1], result_fn=lambda a, b: a + b)
    assert select((3, 4)) == 7


def test_introspection_and_cache_clear():
    dep = lambda state: state
    result_fn = lambda value: value
    select = create_selector(dep, result_fn=result_fn, maxsize=1)

    select("a")
    select("b")
    assert select.cache_info()[3] == 1
    assert select.result_func is result_fn
    assert select.dependencies == [dep]

    select.cache_clear()
    assert select.cache_info() == (0, 0, 1, 0)


def test_errors_propagate():
    select = create_selector(lambda state: state["missing"], result_fn=lambda value: value)
    with pytest.raises(KeyError):
        select({})

    failing = create_selector(lambda state: state, result_fn=lambda value: 1 / 0)
    with pytest.raises(ZeroDivisionError):
        failing(1)

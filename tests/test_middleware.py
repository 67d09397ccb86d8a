"""Tests for ActionSelectorMiddleware."""
from __future__ import annotations

import logging
from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from action_selector import (
    ACTION_SELECTOR, PLACEHOLDER, Action, ActionSelectorMiddleware, InvalidTargetError,
    LoggerMiddleware, action_selector_middleware, create_action_selector, create_placeholder,
    get_placeholder,
)


def descriptor(payload, selectors=(), args=()):
    return {
        "type": ACTION_SELECTOR,
        "payload": payload,
        "meta": {"selectors": list(selectors), "args": list(args)},
    }


def test_unknown_action_is_forwarded_to_next(recording_store, next_dispatch):
    handle = action_selector_middleware(recording_store)(next_dispatch)
    action = Action("unknown")

    result = handle(action)

    next_dispatch.assert_called_once_with(action)
    assert result == "next-result"
    assert recording_store.dispatched == []
    assert recording_store.state_reads == 0


def test_errors_from_next_propagate(recording_store):
    next_dispatch = Mock(side_effect=ValueError("downstream"))
    handle = action_selector_middleware(recording_store)(next_dispatch)

    with pytest.raises(ValueError, match="downstream"):
        handle(Action("unknown"))


def test_invalid_payload_raises_before_reading_state(next_dispatch):
    store = Mock()
    handle = action_selector_middleware(store)(next_dispatch)

    with pytest.raises(InvalidTargetError) as exc_info:
        handle(descriptor(None))

    assert "NoneType" in str(exc_info.value)
    store.get_state.assert_not_called()
    store.dispatch.assert_not_called()
    next_dispatch.assert_not_called()


def test_descriptor_without_selectors_and_args(recording_store, next_dispatch, action_creator):
    handle = action_selector_middleware(recording_store)(next_dispatch)

    handle(descriptor(action_creator))

    action_creator.assert_called_once_with()
    assert recording_store.dispatched == [Action("dummy_action", ())]
    next_dispatch.assert_not_called()


def test_injects_selector_output_and_constants(recording_store, next_dispatch, action_creator):
    handle = action_selector_middleware(recording_store)(next_dispatch)

    handle(descriptor(action_creator, [lambda state: "dep1", "constant", get_placeholder]))

    action_creator.assert_called_once_with("dep1", "constant", None)


def test_injects_args_by_position(recording_store, next_dispatch, action_creator):
    handle = action_selector_middleware(recording_store)(next_dispatch)
    selectors = [
        lambda state: "dep1", get_placeholder, "const1", lambda state: "dep2",
        PLACEHOLDER, lambda state: "dep3", "const2",
    ]

    handle(descriptor(action_creator, selectors, ["arg1", "arg2", "arg3", "arg4"]))

    action_creator.assert_called_once_with(
        "dep1", "arg1", "const1", "dep2", "arg2", "dep3", "const2", "arg3", "arg4"
    )


def test_selectors_read_the_store_state_once(recording_store, next_dispatch, action_creator):
    handle = action_selector_middleware(recording_store)(next_dispatch)
    selectors = [lambda state: state["session"]["user_id"], lambda state: state["todos"]["count"]]

    handle(descriptor(action_creator, selectors))

    assert recording_store.state_reads == 1
    action_creator.assert_called_once_with("u-1", 2)


def test_returns_store_dispatch_result(next_dispatch, action_creator):
    store = Mock()
    store.get_state.return_value = {}
    store.dispatch.return_value = "dispatched"
    handle = action_selector_middleware(store)(next_dispatch)

    assert handle(descriptor(action_creator, [PLACEHOLDER], ["x"])) == "dispatched"
    store.dispatch.assert_called_once_with(Action("dummy_action", ("x",)))


def test_falls_back_to_state_property(next_dispatch, action_creator):
    dispatched = []
    store = SimpleNamespace(state={"n": 3}, dispatch=dispatched.append)
    handle = action_selector_middleware(store)(next_dispatch)

    handle(descriptor(action_creator, [lambda state: state["n"]]))

    assert dispatched == [Action("dummy_action", (3,))]


def test_extendable_placeholder_end_to_end(recording_store, next_dispatch, action_creator):
    handle = action_selector_middleware(recording_store)(next_dispatch)
    marker = create_placeholder({"owner": lambda state: state["session"]["user_id"], "done": False})
    add_todo = create_action_selector(marker, action_creator)

    handle(add_todo({"text": "buy milk", "done": True}))

    action_creator.assert_called_once_with({"owner": "u-1", "done": True, "text": "buy milk"})
    assert dict(marker.fields)["done"] is False


def test_extendable_placeholder_resolves_against_fresh_state(recording_store, next_dispatch, action_creator):
    handle = action_selector_middleware(recording_store)(next_dispatch)
    add_todo = create_action_selector(
        create_placeholder({"owner": lambda state: state["session"]["user_id"]}), action_creator
    )

    handle(add_todo({}))
    recording_store.set_state({"session": {"user_id": "u-2"}})
    handle(add_todo({}))

    assert [call.args for call in action_creator.call_args_list] == [({"owner": "u-1"},), ({"owner": "u-2"},)]


def test_nested_extendable_placeholder_reaches_creator_as_plain_dict(recording_store, next_dispatch, action_creator):
    handle = action_selector_middleware(recording_store)(next_dispatch)
    marker = create_placeholder({
        "author": create_placeholder({"id": lambda state: state["session"]["user_id"]}),
    })

    handle(create_action_selector(marker, action_creator)({"text": "hi"}))

    action_creator.assert_called_once_with({"author": {"id": "u-1"}, "text": "hi"})


def test_nested_descriptors_read_fresh_state_at_each_level(recording_store, next_dispatch, action_creator):
    store = recording_store
    handle = action_selector_middleware(store)(next_dispatch)

    def redispatch(action):
        store.dispatched.append(action)
        return handle(action)

    store.dispatch = redispatch

    get_user = lambda state: state["session"]["user_id"]
    inner = create_action_selector(get_user, PLACEHOLDER, action_creator)

    def switch_user_then_defer(user_id):
        store.set_state({"session": {"user_id": "u-2"}})
        return inner(user_id)

    outer = create_action_selector(get_user, switch_user_then_defer)

    assert handle(outer()) == "next-result"
    assert store.state_reads == 2
    action_creator.assert_called_once_with("u-2", "u-1")
    assert len(store.dispatched) == 2
    assert store.dispatched[1] == Action("dummy_action", ("u-2", "u-1"))
    next_dispatch.assert_called_once_with(Action("dummy_action", ("u-2", "u-1")))


def test_custom_action_type_only_matches_its_own_descriptors(recording_store, next_dispatch, action_creator):
    handle = ActionSelectorMiddleware("@@custom")(recording_store)(next_dispatch)

    handle(create_action_selector(action_creator)("x"))
    next_dispatch.assert_called_once()

    handle(create_action_selector(action_creator, action_type="@@custom")("y"))
    action_creator.assert_called_once_with("y")


@pytest.mark.parametrize("meta", [["selectors"], "args", 3])
def test_non_mapping_meta_raises_type_error(recording_store, next_dispatch, action_creator, meta):
    handle = action_selector_middleware(recording_store)(next_dispatch)

    with pytest.raises(TypeError, match=type(meta).__name__):
        handle({"type": ACTION_SELECTOR, "payload": action_creator, "meta": meta})

    action_creator.assert_not_called()
    assert recording_store.state_reads == 0
    assert recording_store.dispatched == []


def test_missing_or_none_meta_means_no_selectors(recording_store, next_dispatch, action_creator):
    handle = action_selector_middleware(recording_store)(next_dispatch)

    handle({"type": ACTION_SELECTOR, "payload": action_creator})
    handle({"type": ACTION_SELECTOR, "payload": action_creator, "meta": None})

    assert action_creator.call_count == 2
    assert recording_store.dispatched == [Action("dummy_action", ()), Action("dummy_action", ())]


def test_action_creator_errors_propagate(recording_store, next_dispatch):
    def failing(*args):
        raise KeyError("missing")

    handle = action_selector_middleware(recording_store)(next_dispatch)

    with pytest.raises(KeyError):
        handle(create_action_selector(failing)())
    assert recording_store.dispatched == []


def test_logger_middleware_logs_dispatch(caplog):
    mw = LoggerMiddleware()

    with caplog.at_level(logging.DEBUG, logger="action_selector.middleware"):
        with mw.action_context(Action("[Todo] Add"), {"todos": ()}) as context:
            context["next_state"] = {"todos": ("a",)}

    messages = [record.getMessage() for record in caplog.records]
    assert "dispatching [Todo] Add" in messages
    assert any(message.startswith("state after [Todo] Add") for message in messages)


def test_logger_middleware_logs_errors(caplog):
    mw = LoggerMiddleware()

    with caplog.at_level(logging.ERROR, logger="action_selector.middleware"):
        with pytest.raises(RuntimeError):
            with mw.action_context(Action("[Todo] Add"), {}):
                raise RuntimeError("reducer failed")

    assert "error in [Todo] Add: reducer failed" in caplog.text


def test_logger_middleware_skips_state_conversion_above_debug(caplog, monkeypatch):
    to_dict = Mock(side_effect=AssertionError("state converted"))
    monkeypatch.setattr("action_selector.middleware.to_dict", to_dict)
    mw = LoggerMiddleware()

    with caplog.at_level(logging.INFO, logger="action_selector.middleware"):
        with mw.action_context(Action("[Todo] Add"), {"todos": ()}) as context:
            context["next_state"] = {"todos": ("a",)}

    to_dict.assert_not_called()
    assert "dispatching [Todo] Add" in caplog.text

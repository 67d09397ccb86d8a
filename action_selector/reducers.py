from typing import Any, Callable, Dict, TypeVar

from .actions import Action

S = TypeVar("S")
Reducer = Callable[[S, Action[Any]], S]


def create_reducer(initial_state: S, *handlers) -> Reducer[S]:
    """
    創建一個 reducer 函式，用於處理狀態變更。

    Args:
        initial_state: 初始狀態。
        *handlers: 一系列 (action_type, handler_fn) 元組或使用 on 函式創建的處理器。

    Returns:
        一個 reducer 函式，根據 action 的類型執行對應的處理邏輯。
    """
    action_handlers = {}

    for handler in handlers:
        if isinstance(handler, tuple) and len(handler) == 2:
            action_type, handler_fn = handler
            action_handlers[action_type] = handler_fn
        else:
            action_handlers.update(handler)

    def reducer(state: S = initial_state, action: Action = None) -> S:
        if action is None:
            return state
        handler = action_handlers.get(getattr(action, 'type', None))
        if handler:
            return handler(state, action)
        return state

    reducer.initial_state = initial_state
    reducer.handlers = action_handlers

    return reducer


def on(action_creator_or_type, handler):
    """
    創建一個 action 類型與處理函式的映射。

    Args:
        action_creator_or_type: Action 創建器函式或 Action 類型字串。
        handler: 處理該 Action 的函式，接收 (state, action) 並返回新狀態。

    Returns:
        一個包含 {action_type: handler} 的字典。
    """
    if callable(action_creator_or_type) and hasattr(action_creator_or_type, 'type'):
        action_type = action_creator_or_type.type
    else:
        action_type = str(action_creator_or_type)

    return {action_type: handler}


class ReducerManager:
    """
    管理 store 中所有特性模組的 reducers。

    Attributes:
        _feature_reducers: 儲存每個特性模組的 reducer。
        _state: 儲存最新的整個 root state。
    """
    def __init__(self):
        self._feature_reducers: Dict[str, Reducer] = {}
        self._state: Dict[str, Any] = {}

    def add_reducer(self, feature_key: str, reducer: Reducer):
        """
        添加一個 reducer 到指定的特性模組，並以其初始狀態初始化該切片。
        """
        self._feature_reducers[feature_key] = reducer
        self._state = {**self._state, feature_key: reducer.initial_state}

    def add_reducers(self, reducers: Dict[str, Reducer]):
        for key, r in reducers.items():
            self.add_reducer(key, r)

    def remove_reducer(self, feature_key: str):
        if feature_key in self._feature_reducers:
            del self._feature_reducers[feature_key]
            self._state = {k: v for k, v in self._state.items() if k != feature_key}

    def get_reducers(self) -> Dict[str, Reducer]:
        return self._feature_reducers.copy()

    def reduce(self, state: Dict[str, Any] = None, action: Action = None) -> Dict[str, Any]:
        """
        使用所有註冊的 reducers 處理 action 並返回新狀態。

        Args:
            state: 當前的 root state，為 None 時使用內部保存的狀態。
            action: 要處理的 action。

        Returns:
            新的 root state；沒有任何切片變化時返回原本的 state 物件。
        """
        if state is None:
            state = self._state

        new_state = {}
        changed = len(state) != len(self._feature_reducers)
        for feature_key, reducer in self._feature_reducers.items():
            prev_substate = state.get(feature_key, reducer.initial_state)
            next_substate = reducer(prev_substate, action)
            new_state[feature_key] = next_substate
            if next_substate is not prev_substate or feature_key not in state:
                changed = True

        # 沒有任何切片變化時保留原本的 state 物件
        if not changed:
            new_state = state

        self._state = new_state
        return new_state

"""
Action 定義模組。

此模組提供 Action 類別以及創建 Action 的功能。
Actions 是描述狀態變更意圖的不可變對象；除了 type 與 payload 之外，
還可攜帶 meta，action selector 以 meta 傳遞 selectors 與呼叫參數。
"""
from typing import Any, Callable, Dict, Generic, Optional, Union

from immutables import Map

from .types import P


class Action(Generic[P]):
    """
    表示一個有類型、可選負載與可選 meta 的動作。

    泛型參數:
        P: 負載的類型

    屬性:
        type: 動作的類型字符串
        payload: 動作的負載數據（可選）
        meta: 動作的附加資訊（可選）
    """
    __slots__ = ('type', 'payload', 'meta')

    def __init__(self, type: str, payload: Optional[P] = None, meta: Any = None):
        super().__setattr__('type', type)
        super().__setattr__('payload', payload)
        super().__setattr__('meta', meta)

    def __setattr__(self, name, value):
        if name not in self.__slots__:
            raise AttributeError(f"'{type(self).__name__}' object has no attribute '{name}'")
        if hasattr(self, name):
            raise AttributeError(f"Cannot modify immutable instance attribute '{name}'")
        super().__setattr__(name, value)

    def __eq__(self, other):
        if not isinstance(other, Action):
            return False
        return (
            self.type == other.type
            and self.payload == other.payload
            and self.meta == other.meta
        )

    def __hash__(self):
        return hash((self.type, self.payload, self.meta))

    def __repr__(self):
        if self.meta is None:
            return f"Action(type='{self.type}', payload={repr(self.payload)})"
        return f"Action(type='{self.type}', payload={repr(self.payload)}, meta={repr(self.meta)})"


def _process_payload(payload: Any) -> Any:
    """將字典 payload 轉換為不可變的 Map。"""
    if isinstance(payload, dict):
        return Map(payload)
    return payload


def create_action(action_type: str, prepare_fn: Optional[Callable[..., Any]] = None) -> Callable[..., Action[Any]]:
    """
    創建一個 Action 生成器函數。

    Args:
        action_type: Action 的類型標識符
        prepare_fn: 可選的預處理函數，用於在創建 Action 前處理輸入參數

    Returns:
        一個可調用的函數，用於生成指定類型的 Action

    範例:
        >>> add = create_action("[Counter] Add", lambda amount: amount)
        >>> add(5)  # 返回 Action(type="[Counter] Add", payload=5)
        >>> move = create_action("[Cursor] Move")
        >>> move(1, 2)  # 返回 Action(type="[Cursor] Move", payload=Map({0: 1, 1: 2}))
    """
    def action_creator(*args: Any, **kwargs: Any) -> Action[Any]:
        if prepare_fn:
            return Action(action_type, _process_payload(prepare_fn(*args, **kwargs)))
        if len(args) == 1 and not kwargs:
            return Action(action_type, _process_payload(args[0]))
        if args or kwargs:
            payload: Dict[Union[int, str], Any] = dict(zip(range(len(args)), args))
            payload.update(kwargs)
            return Action(action_type, _process_payload(payload))
        return Action(action_type)

    # 添加 type 屬性以便於識別
    action_creator.type = action_type  # type: ignore

    return action_creator


# 根 Actions
init_store = create_action("[Root] Init Store")
update_reducer = create_action("[Root] Update Reducer")

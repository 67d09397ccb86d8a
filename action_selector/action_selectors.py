"""
Action Selector 建立模組。

action selector 把 action creator 與一組 selectors 綁在一起；呼叫它並不會
立即建立 action，而是返回一個描述用的 Action，交由
ActionSelectorMiddleware 在分發時以最新 state 解析 selectors 後再呼叫
action creator。
"""
from typing import Any, Iterable, List, Mapping, Tuple

from immutables import Map

from .actions import Action
from .errors import InvalidTargetError
from .types import ActionCreator, SelectorEntry

ACTION_SELECTOR = "@@redux_action_selector"


class ActionSelector:
    """
    延遲執行的 action creator。

    呼叫時返回 Action(type=action_type, payload=result_func,
    meta=Map(selectors=..., args=...))。

    屬性:
        result_func: 原始的 action creator
        dependencies: selector 列表（未解析，順序與傳入時相同）
        action_type: 產生的描述 Action 的類型
    """

    def __init__(self, selectors: Iterable[SelectorEntry], result_func: ActionCreator,
                 *, action_type: str = ACTION_SELECTOR):
        """
        Args:
            selectors: selector 列表
            result_func: action creator，必須可調用
            action_type: 描述 Action 的類型

        Raises:
            InvalidTargetError: result_func 不可調用
        """
        if not callable(result_func):
            raise InvalidTargetError(
                f"Action selector expects a callable result function, got {type(result_func).__name__}",
                target=result_func,
                action_type=action_type,
            )
        self._result_func = result_func
        self._selectors: Tuple[SelectorEntry, ...] = tuple(selectors)
        self._action_type = action_type
        self.__name__ = getattr(result_func, '__name__', type(self).__name__)
        self.__doc__ = getattr(result_func, '__doc__', None)

    @classmethod
    def from_selectors(cls, selectors: Iterable[SelectorEntry], result_func: ActionCreator,
                       *, action_type: str = ACTION_SELECTOR) -> "ActionSelector":
        """以明確的 selector 列表建立。"""
        return cls(selectors, result_func, action_type=action_type)

    @classmethod
    def of(cls, result_func: ActionCreator, *selectors: SelectorEntry,
           action_type: str = ACTION_SELECTOR) -> "ActionSelector":
        """以 action creator 加上不定數量的 selectors 建立。"""
        return cls(selectors, result_func, action_type=action_type)

    @property
    def result_func(self) -> ActionCreator:
        return self._result_func

    @property
    def dependencies(self) -> List[SelectorEntry]:
        return list(self._selectors)

    @property
    def action_type(self) -> str:
        return self._action_type

    def __call__(self, *args: Any) -> Action[ActionCreator]:
        return Action(
            self._action_type,
            self._result_func,
            Map(selectors=self._selectors, args=tuple(args)),
        )

    def __repr__(self):
        return f"ActionSelector({self.__name__}, dependencies={list(self._selectors)!r})"


def create_action_selector(*funcs: Any, action_type: str = ACTION_SELECTOR) -> ActionSelector:
    """
    創建一個 action selector。

    最後一個位置參數為 action creator；之前的參數若是單一的 list/tuple，
    則視為 selector 列表，否則這些參數本身就是 selectors。

    Args:
        *funcs: (sel1, sel2, ..., action_creator) 或 ([sel1, sel2, ...], action_creator)
        action_type: 描述 Action 的類型

    Returns:
        ActionSelector

    Raises:
        InvalidTargetError: 沒有傳入參數或最後一個參數不可調用

    範例:
        >>> add_todo = create_action("[Todo] Add", lambda owner, text: {"owner": owner, "text": text})
        >>> add_todo_for_user = create_action_selector(
        ...     lambda state: state["session"]["user_id"],
        ...     PLACEHOLDER,
        ...     add_todo,
        ... )
        >>> store.dispatch(add_todo_for_user("buy milk"))
    """
    if not funcs:
        raise InvalidTargetError(
            "Action selector expects a callable result function, got nothing",
            action_type=action_type,
        )
    *selectors, result_func = funcs
    if len(selectors) == 1 and isinstance(selectors[0], (list, tuple)):
        selectors = selectors[0]
    return ActionSelector(selectors, result_func, action_type=action_type)


def is_action_selector_action(action: Any, action_type: str = ACTION_SELECTOR) -> bool:
    """判斷 action 是否為 action selector 產生的描述 Action（支援 Action 物件與 dict）。"""
    return action_field(action, 'type') == action_type


def action_field(action: Any, name: str, default: Any = None) -> Any:
    """讀取 action 的欄位；Action 物件以屬性讀取，dict 風格的 action 以鍵讀取。"""
    if isinstance(action, Mapping):
        return action.get(name, default)
    return getattr(action, name, default)

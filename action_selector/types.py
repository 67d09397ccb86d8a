"""
Action Selector 的共用類型定義。

集中定義 middleware 形狀、store 協議與 selector 相關的類型別名。
"""
from typing import Any, Callable, Protocol, TypeVar, Union, runtime_checkable

from typing_extensions import TypedDict

S = TypeVar("S")  # 狀態類型
P = TypeVar("P")  # 負載類型

# ———— Dispatch / Middleware ————
DispatchFunction = Callable[[Any], Any]
NextDispatch = Callable[[Any], Any]
MiddlewareFunction = Callable[[NextDispatch], DispatchFunction]


@runtime_checkable
class Store(Protocol[S]):
    """middleware 所需的最小 store 介面（pystorex 風格，以 state 屬性讀取狀態）。"""

    @property
    def state(self) -> S: ...

    def dispatch(self, action: Any) -> Any: ...


@runtime_checkable
class ReduxStore(Protocol[S]):
    """Redux 風格的 store 介面，以 get_state() 讀取狀態。"""

    def get_state(self) -> S: ...

    def dispatch(self, action: Any) -> Any: ...


AnyStore = Union[Store[Any], ReduxStore[Any]]


class ActionContext(TypedDict, total=False):
    action: Any
    prev_state: Any
    next_state: Any
    result: Any
    error: Any


# ———— Selector / Action Creator ————
SelectorEntry = Any  # 常數、selector 函數、placeholder 或 extendable placeholder
ActionCreator = Callable[..., Any]

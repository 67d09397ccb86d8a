"""
Action Selector：以 selectors 延遲注入參數的 action creator。

在 dispatch 時才以當下的 state 解析 selectors，把結果與呼叫參數
組合後呼叫原本的 action creator，並將產生的 action 重新 dispatch。
"""

from .errors import ActionSelectorError, InvalidPlaceholderError, InvalidTargetError
from .actions import Action, create_action
from .placeholders import (
    PLACEHOLDER, ExtendablePlaceholder, Placeholder, ResolvedExtension,
    create_placeholder, get_placeholder, is_placeholder
)
from .resolver import resolve, resolve_all
from .partial import BoundActionCreator, bind
from .action_selectors import (
    ACTION_SELECTOR, ActionSelector, create_action_selector, is_action_selector_action
)
from .middleware import (
    BaseMiddleware, LoggerMiddleware, ActionSelectorMiddleware, action_selector_middleware
)
from .store_selectors import create_selector
from .reducers import create_reducer, on, ReducerManager
from .store import Store, create_store

__version__ = "0.1.0"

# 匯出所有公開 API
__all__ = [
    # Errors
    "ActionSelectorError", "InvalidTargetError", "InvalidPlaceholderError",

    # Actions
    "Action", "create_action",

    # Placeholders
    "PLACEHOLDER", "Placeholder", "ExtendablePlaceholder", "ResolvedExtension",
    "create_placeholder", "get_placeholder", "is_placeholder",

    # Resolution
    "resolve", "resolve_all", "bind", "BoundActionCreator",

    # Action Selectors
    "ACTION_SELECTOR", "ActionSelector", "create_action_selector", "is_action_selector_action",

    # Middleware
    "BaseMiddleware", "LoggerMiddleware", "ActionSelectorMiddleware", "action_selector_middleware",

    # Selectors
    "create_selector",

    # Reducers
    "create_reducer", "on", "ReducerManager",

    # Store
    "Store", "create_store",
]

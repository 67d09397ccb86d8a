"""
Action Selector 的中介軟體定義模組。

ActionSelectorMiddleware 攔截 action selector 產生的描述 Action，
以當下的 state 快照解析 selectors、把呼叫參數填入 placeholder，
呼叫原本的 action creator，並將其結果重新 dispatch。
其他 action 原樣交給下一層。
"""
import contextlib
import logging
from typing import Any, Generator, Mapping, Optional

from .action_selectors import ACTION_SELECTOR, action_field
from .errors import InvalidTargetError
from .immutable_utils import to_dict
from .partial import bind
from .resolver import resolve_all
from .types import ActionContext, AnyStore, DispatchFunction, MiddlewareFunction, NextDispatch

logger = logging.getLogger(__name__)


# ———— Base Middleware ————
class BaseMiddleware:
    """
    基礎中介類，定義所有中介可能實現的鉤子。

    只實作鉤子的中介會由 Store 包裹在 dispatch 外層；
    實作 __call__(store) 的中介則被視為 middleware 工廠。
    """

    def on_next(self, action: Any, prev_state: Any) -> None:
        """
        在 action 發送給 reducer 之前調用。

        Args:
            action: 正在 dispatch 的 Action
            prev_state: dispatch 之前的 store.state
        """
        pass

    def on_complete(self, next_state: Any, action: Any) -> None:
        """
        在 reducer 處理完 action 之後調用。

        Args:
            next_state: dispatch 之後的最新 store.state
            action: 剛剛 dispatch 的 Action
        """
        pass

    def on_error(self, error: Exception, action: Any) -> None:
        """
        如果 dispatch 過程中拋出異常，則調用此鉤子。

        Args:
            error: 拋出的異常
            action: 導致異常的 Action
        """
        pass

    def teardown(self) -> None:
        """當 Store 清理資源時調用。"""
        pass

    @contextlib.contextmanager
    def action_context(self, action: Any, prev_state: Any) -> Generator[ActionContext, None, None]:
        """
        以上下文管理器的形式包裝 on_next、on_complete 和 on_error 鉤子。

        呼叫端在上下文內完成 dispatch 後，把結果與新狀態寫入 context，
        離開時若 next_state 不為 None 則調用 on_complete。

        Args:
            action: 要分發的 Action
            prev_state: 分發前的狀態

        Yields:
            用於在上下文內外傳遞數據的字典
        """
        context: ActionContext = {
            'action': action,
            'prev_state': prev_state,
            'next_state': None,
            'result': None,
            'error': None,
        }
        self.on_next(action, prev_state)
        try:
            yield context
            if context['next_state'] is not None:
                self.on_complete(context['next_state'], action)
        except Exception as err:
            context['error'] = err
            self.on_error(err, action)
            raise


# ———— LoggerMiddleware ————
class LoggerMiddleware(BaseMiddleware):
    """
    日誌中介，記錄每個 action 發送前和發送後的 state。

    使用場景:
    - 偵錯時需要觀察每次 state 的變化。
    - 確認 action selector 重新 dispatch 出的 action 與順序。
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Args:
            logger: 使用的 logger，預設為本模組的 logger
        """
        self.logger = logger or logging.getLogger(__name__)

    def on_next(self, action: Any, prev_state: Any) -> None:
        action_type = action_field(action, 'type')
        self.logger.info("dispatching %s", action_type)
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("state before %s: %s", action_type, to_dict(prev_state))

    def on_complete(self, next_state: Any, action: Any) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("state after %s: %s", action_field(action, 'type'), to_dict(next_state))

    def on_error(self, error: Exception, action: Any) -> None:
        self.logger.error("error in %s: %s", action_field(action, 'type'), error)


# ———— ActionSelectorMiddleware ————
class ActionSelectorMiddleware(BaseMiddleware):
    """
    解析 action selector 描述 Action 的中介軟體。

    處理流程:
    1. 類型不符: 直接返回 next_dispatch(action) 的結果
    2. 驗證 payload 可調用，否則拋出 InvalidTargetError（不讀取 state、不 dispatch）
    3. 讀取一次 state 快照並依序解析 meta.selectors
    4. 以 meta.args 呼叫綁定後的 action creator
    5. 以 store.dispatch 重新分發結果並返回其結果

    範例:
        ```python
        store = create_store()
        store.apply_middleware(ActionSelectorMiddleware)

        add_todo_for_user = create_action_selector(
            lambda state: state["session"]["user_id"], PLACEHOLDER, add_todo
        )
        store.dispatch(add_todo_for_user("buy milk"))
        ```
    """

    def __init__(self, action_type: str = ACTION_SELECTOR):
        """
        Args:
            action_type: 要攔截的描述 Action 類型
        """
        self.action_type = action_type

    def __call__(self, store: AnyStore) -> MiddlewareFunction:
        """
        配置 ActionSelector 中介軟體。

        Args:
            store: 提供 get_state() 或 state，以及 dispatch() 的 store

        Returns:
            配置函數，接收 next_dispatch 並返回新的 dispatch 函數
        """
        def middleware(next_dispatch: NextDispatch) -> DispatchFunction:
            def dispatch(action: Any) -> Any:
                if action_field(action, 'type') != self.action_type:
                    return next_dispatch(action)
                return self.handle(store, action)
            return dispatch
        return middleware

    def handle(self, store: AnyStore, action: Any) -> Any:
        """
        解析並重新 dispatch 一個描述 Action。

        Args:
            store: store 實例
            action: 類型符合的描述 Action

        Returns:
            store.dispatch 的返回值

        Raises:
            InvalidTargetError: payload 不可調用
            TypeError: meta 不是映射
        """
        result_func = action_field(action, 'payload')
        if not callable(result_func):
            raise InvalidTargetError(
                f"Action selector payload must be callable, got {type(result_func).__name__}",
                target=result_func,
                action_type=self.action_type,
            )

        meta = action_field(action, 'meta')
        if meta is None:
            meta = {}
        elif not isinstance(meta, Mapping):
            raise TypeError(f"Action selector meta must be a mapping, got {type(meta).__name__}")
        selectors = meta.get('selectors', ())
        args = meta.get('args', ())

        state = get_state(store)
        template = resolve_all(selectors, state)
        new_action = bind(result_func, template)(*args)
        logger.debug(
            "action selector %s resolved %d selector(s) with %d arg(s)",
            getattr(result_func, '__name__', result_func), len(template), len(args),
        )
        return store.dispatch(new_action)


def get_state(store: AnyStore) -> Any:
    """讀取 store 的 state 快照；優先使用 get_state()，否則讀取 state 屬性。"""
    getter = getattr(store, 'get_state', None)
    if callable(getter):
        return getter()
    return store.state


# 預設實例，可直接以函數形式使用: action_selector_middleware(store)(next_dispatch)
action_selector_middleware = ActionSelectorMiddleware()

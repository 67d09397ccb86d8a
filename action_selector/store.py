import inspect
import logging
from typing import Any, Callable, Dict, Generic, TypeVar

from reactivex import Observable, Subject
from reactivex import operators as ops

from .actions import Action, init_store, update_reducer
from .reducers import Reducer, ReducerManager

S = TypeVar("S")

logger = logging.getLogger(__name__)


class Store(Generic[S]):
    """
    狀態容器，管理應用狀態並通知訂閱者狀態變更。

    作為 ActionSelectorMiddleware 的參考 store：提供 state / get_state()
    讀取快照，dispatch() 經過中介軟體鏈分發 action。
    """

    def __init__(self):
        self._reducer_manager = ReducerManager()
        self._state: Dict[str, Any] = {}
        # 動作流與狀態流
        self._action_subject = Subject()
        self._state_subject = Subject()
        self._middleware = []
        self._raw_dispatch = self._dispatch_core
        # 構建中介軟體鏈後的 dispatch 方法
        self.dispatch = self._apply_middleware_chain()

        self._action_subject.subscribe(
            on_next=lambda action: self._update_state(
                self._reducer_manager.reduce(self._state, action)
            )
        )

    def _update_state(self, new_state):
        """
        更新內部狀態並通知訂閱者。

        Args:
            new_state: 新的狀態。
        """
        old_state = self._state
        self._state = new_state
        self._state_subject.on_next((old_state, new_state))

    def _dispatch_core(self, action):
        """
        核心的 dispatch 方法，將動作傳遞給動作流。

        Returns:
            傳入的 Action。
        """
        self._action_subject.on_next(action)
        return action

    def _apply_middleware_chain(self):
        """
        構建中介軟體鏈，將中介軟體按順序包裹在 dispatch 方法外層。

        可調用的中介（函數或實作 __call__ 的物件）視為工廠: mw(store)(next_dispatch)；
        只實作鉤子的物件則以 action_context 包裹。
        """
        dispatch = self._raw_dispatch
        for mw in reversed(self._middleware):
            if callable(mw):
                dispatch = mw(self)(dispatch)
            else:
                dispatch = self._wrap_obj_middleware(mw, dispatch)
        return dispatch

    def _wrap_obj_middleware(self, mw: Any, next_dispatch: Callable[[Action], Any]):
        """
        包裹鉤子型中介軟體。

        Args:
            mw: 中介軟體物件，需實現 action_context 或 on_next、on_complete 和 on_error 方法。
            next_dispatch: 下一層的 dispatch 方法。
        """
        if hasattr(mw, "action_context"):
            def dispatch(action):
                with mw.action_context(action, self._state) as context:
                    result = next_dispatch(action)
                    context['result'] = result
                    context['next_state'] = self._state
                    return result

            return dispatch

        def dispatch(action):
            mw.on_next(action, self._state)
            try:
                result = next_dispatch(action)
                mw.on_complete(self._state, action)
                return result
            except Exception as err:
                mw.on_error(err, action)
                raise

        return dispatch

    def apply_middleware(self, *middlewares):
        """
        一次註冊多個中介軟體，並重建 dispatch 鏈。

        Args:
            *middlewares: 要註冊的中介軟體，可以是類或實例。
        """
        for m in middlewares:
            inst = m() if inspect.isclass(m) else m
            self._middleware.append(inst)
        self.dispatch = self._apply_middleware_chain()

    def select(self, selector: Callable[[S], Any] = None) -> Observable:
        """
        選擇狀態的一部分進行觀察。

        Args:
            selector: 一個函數，接收整個狀態並返回希望觀察的部分。

        Returns:
            一個可觀察對象，發送 (selector(old_state), selector(new_state))，
            只在選取的部分變化時發出。
        """
        if selector is None:
            return self._state_subject.pipe(ops.distinct_until_changed(lambda x: x[1]))

        return self._state_subject.pipe(
            ops.map(
                lambda state_tuple: (selector(state_tuple[0]), selector(state_tuple[1]))
            ),
            ops.distinct_until_changed(lambda x: x[1]),
        )

    @property
    def state(self) -> S:
        """當前狀態的快照。"""
        return self._state

    def get_state(self) -> S:
        """返回當前狀態的快照（Redux 風格的存取方式）。"""
        return self._state

    def register_root(self, root_reducers: Dict[str, Reducer]):
        """
        註冊應用的根級 reducers。

        Args:
            root_reducers: 特性鍵名到 reducer 的映射字典。
        """
        self._reducer_manager.add_reducers(root_reducers)
        self._state = self._reducer_manager.reduce(None, init_store())
        return self

    def register_feature(self, feature_key: str, reducer: Reducer):
        """
        註冊一個特性模組的 reducer。

        Args:
            feature_key: 特性模組的鍵名。
            reducer: 特性模組的 reducer。
        """
        self._reducer_manager.add_reducer(feature_key, reducer)
        self._state = self._reducer_manager.reduce(self._state, update_reducer())
        return self

    def unregister_feature(self, feature_key: str):
        """
        卸載一個特性模組的 reducer，並從狀態中移除其切片。

        Args:
            feature_key: 特性模組的鍵名。
        """
        self._reducer_manager.remove_reducer(feature_key)
        self._state = self._reducer_manager.reduce(self._state, update_reducer())
        return self

    def teardown(self) -> None:
        """清理中介軟體並結束狀態流。"""
        for mw in self._middleware:
            teardown = getattr(mw, 'teardown', None)
            if callable(teardown):
                teardown()
        self._action_subject.on_completed()
        self._state_subject.on_completed()
        logger.debug("store torn down")

    def __enter__(self) -> "Store[S]":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.teardown()


def create_store() -> Store:
    """
    創建一個新的 Store 實例。

    Returns:
        Store: 新創建的 Store 實例。
    """
    return Store()

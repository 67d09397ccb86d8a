"""
Action Selector 範例：待辦事項應用

action creator 所需的使用者 id 與預設標籤由 selectors 從 state 注入，
呼叫端只需提供待辦事項內容。
"""
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from pydantic import BaseModel

from action_selector import (
    PLACEHOLDER, ActionSelectorMiddleware, LoggerMiddleware, create_action,
    create_action_selector, create_placeholder, create_reducer, create_selector,
    create_store, on,
)
from action_selector.immutable_utils import to_dict


# ====== 1. 定義 Actions ======
add_todo = create_action("[Todo] Add", lambda todo: todo)
login = create_action("[Session] Login", lambda user_id: user_id)


class TodoPatch(BaseModel):
    text: str
    priority: int = 1


# ====== 2. 定義 Reducers ======
todos_reducer = create_reducer(
    (),
    on(add_todo, lambda state, action: state + (action.payload,)),
)
session_reducer = create_reducer(
    {"user_id": None, "default_tag": "inbox"},
    on(login, lambda state, action: {**state, "user_id": action.payload}),
)

# ====== 3. 定義 Selectors ======
get_session = lambda state: state["session"]
get_user_id = create_selector(get_session, result_fn=lambda session: session["user_id"])
get_default_tag = create_selector(get_session, result_fn=lambda session: session["default_tag"])

# ====== 4. 定義 Action Selectors ======
# (owner, text) -> owner 由 state 注入，text 由呼叫參數填入
add_todo_for_user = create_action_selector(
    get_user_id,
    PLACEHOLDER,
    lambda owner, text: add_todo({"owner": owner, "text": text}),
)

# extendable placeholder: 解析出的欄位與呼叫參數合併，呼叫參數優先
add_tagged_todo = create_action_selector(
    [create_placeholder({"owner": get_user_id, "tag": get_default_tag})],
    add_todo,
)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    store = create_store()
    store.register_root({"todos": todos_reducer, "session": session_reducer})
    store.apply_middleware(LoggerMiddleware, ActionSelectorMiddleware)

    store.select(lambda state: state["todos"]).subscribe(
        on_next=lambda t: print(f"待辦數量: {len(t[0])} -> {len(t[1])}")
    )

    store.dispatch(login("alice"))
    store.dispatch(add_todo_for_user("買牛奶"))
    store.dispatch(add_tagged_todo(TodoPatch(text="寫報告", priority=3)))
    store.dispatch(add_tagged_todo({"text": "整理桌面", "tag": "home"}))

    print("\n==== 最終狀態 ====")
    print(to_dict(store.state))

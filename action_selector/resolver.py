"""
基於 functools.singledispatch 的 selector 解析模組。

根據 selector entry 的類型選擇解析方式:
- Placeholder: 原樣轉交，等到呼叫時才由參數填入
- ExtendablePlaceholder: 逐欄位解析，產生新的 ResolvedExtension
- 可調用對象: 以 state 快照呼叫
- 其他: 視為常數原樣返回
"""
import functools
import logging
from typing import Any, Iterable, Tuple

from immutables import Map

from .placeholders import PLACEHOLDER, ExtendablePlaceholder, Placeholder, ResolvedExtension, is_placeholder
from .types import SelectorEntry

logger = logging.getLogger(__name__)


@functools.singledispatch
def resolve(entry: SelectorEntry, state: Any) -> Any:
    """
    針對 state 快照解析單一 selector entry。

    Args:
        entry: selector 函數、常數、placeholder 或 extendable placeholder
        state: state 快照

    Returns:
        解析後的值；placeholder 會原樣返回 PLACEHOLDER
    """
    if is_placeholder(entry):
        return PLACEHOLDER
    if callable(entry):
        return entry(state)
    return entry


@resolve.register
def _resolve_placeholder(entry: Placeholder, state: Any) -> Placeholder:
    return entry


@resolve.register
def _resolve_extendable(entry: ExtendablePlaceholder, state: Any) -> ResolvedExtension:
    # 每次解析都建立新的 Map，原本的欄位設定保持不變
    return ResolvedExtension(Map({key: resolve(sub, state) for key, sub in entry.fields.items()}))


def resolve_all(entries: Iterable[SelectorEntry], state: Any) -> Tuple[Any, ...]:
    """
    依序解析整個 selector 列表，所有 entry 共用同一個 state 快照。

    Args:
        entries: selector 列表
        state: state 快照

    Returns:
        與 entries 順序相同的解析結果 tuple
    """
    template = tuple(resolve(entry, state) for entry in entries)
    logger.debug("resolved %d selector(s)", len(template))
    return template

import logging
import time
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


def create_selector(*selectors: Callable[[Any], Any], result_fn: Optional[Callable[..., Any]] = None,
                    deep: bool = False, ttl: Optional[float] = None, maxsize: int = 128) -> Callable[[Any], Any]:
    """
    創建一個複合選擇器，支援記憶化、深淺比較與TTL控制

    返回的選擇器可直接作為 action selector 的 selector entry 使用。
    state 原樣交給每個輸入選擇器；Store.select 已分別對新舊狀態套用選擇器。

    Args:
        *selectors: 多個輸入選擇器，這些函數會從 state 中提取對應的值
        result_fn: 處理輸出結果的函數，將多個選擇器的輸出進行處理
        deep: 是否進行深度比較（預設為 False）
        ttl: 快取有效時間（秒），若超過此時間則重新計算，預設為無限
        maxsize: 緩存的最大條目數，預設為128

    Returns:
        經過快取優化的 selector 函數，帶有 result_func、dependencies、
        cache_info() 與 cache_clear()
    """
    # 如果沒有 result_fn 且只有一個選擇器，直接返回該選擇器
    if not result_fn and len(selectors) == 1:
        return selectors[0]

    if not result_fn:
        result_fn = lambda *args: args

    cache: List[Tuple[float, Tuple[Any, ...], Any]] = []
    stats = {"hits": 0, "misses": 0}

    def selector(state: Any) -> Any:
        nonlocal cache

        inputs = tuple(select(state) for select in selectors)
        now = time.time()

        if ttl is not None:
            cache = [item for item in cache if now - item[0] <= ttl]

        for _, cached_inputs, cached_result in cache:
            if deep:
                matched = _safe_deep_equals(inputs, cached_inputs)
            else:
                matched = len(inputs) == len(cached_inputs) and all(
                    a is b for a, b in zip(inputs, cached_inputs)
                )
            if matched:
                stats["hits"] += 1
                return cached_result

        stats["misses"] += 1
        try:
            result = result_fn(*inputs)
        except Exception:
            logger.exception("selector result function failed")
            raise

        while len(cache) >= maxsize:
            cache.pop(0)
        cache.append((now, inputs, result))
        return result

    def cache_info():
        return (stats["hits"], stats["misses"], maxsize, len(cache))

    def cache_clear():
        cache.clear()
        stats["hits"] = stats["misses"] = 0

    selector.cache_info = cache_info  # type: ignore
    selector.cache_clear = cache_clear  # type: ignore
    selector.result_func = result_fn  # type: ignore
    selector.dependencies = list(selectors)  # type: ignore

    return selector


def _safe_deep_equals(a: Any, b: Any) -> bool:
    """安全的深度比較，無法比較時返回False"""
    if a is b:
        return True
    if type(a) != type(b):
        return False
    if isinstance(a, (str, int, float, bool, type(None))):
        return a == b
    if isinstance(a, dict):
        if len(a) != len(b):
            return False
        return all(key in b and _safe_deep_equals(a[key], b[key]) for key in a)
    if isinstance(a, (list, tuple)):
        if len(a) != len(b):
            return False
        return all(_safe_deep_equals(x, y) for x, y in zip(a, b))
    try:
        return bool(a == b)
    except Exception:
        return False

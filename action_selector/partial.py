"""
Placeholder 驅動的部分套用 (partial application)。

給定目標函數與已解析的參數模板，產生一個新的可調用對象；
呼叫時依出現順序把參數填入模板中的 placeholder，剩餘參數附加在最後。
"""
from typing import Any, Callable, Iterable, Sequence

from .placeholders import ResolvedExtension, is_placeholder


class BoundActionCreator:
    """
    綁定了參數模板的 action creator。

    屬性:
        func: 目標函數
        template: 已解析的參數模板
        placeholder_count: 模板中會消耗呼叫參數的位置數量
    """
    __slots__ = ('func', 'template', 'placeholder_count')

    def __init__(self, func: Callable[..., Any], template: Iterable[Any]):
        self.func = func
        self.template = tuple(template)
        self.placeholder_count = sum(1 for entry in self.template if _consumes_arg(entry))

    def build_args(self, args: Sequence[Any]) -> list:
        """
        根據模板與呼叫參數組出最終的參數列表。

        參數不足時，未被填入的 placeholder 得到 None；
        extendable placeholder 則只保留解析出的欄位。

        Args:
            args: 呼叫時的位置參數

        Returns:
            傳給目標函數的參數列表
        """
        cursor = 0
        final = []
        for entry in self.template:
            if is_placeholder(entry):
                final.append(args[cursor] if cursor < len(args) else None)
                cursor += 1
            elif isinstance(entry, ResolvedExtension):
                final.append(entry.extend(args[cursor] if cursor < len(args) else None))
                cursor += 1
            else:
                final.append(entry)
        final.extend(args[cursor:])
        return final

    def __call__(self, *args: Any) -> Any:
        return self.func(*self.build_args(args))

    def __repr__(self):
        name = getattr(self.func, '__name__', repr(self.func))
        return f"BoundActionCreator(func={name}, template={self.template!r})"


def _consumes_arg(entry: Any) -> bool:
    return is_placeholder(entry) or isinstance(entry, ResolvedExtension)


def bind(func: Callable[..., Any], template: Iterable[Any]) -> BoundActionCreator:
    """
    將目標函數與已解析的模板綁定。

    Args:
        func: 目標函數（action creator）
        template: resolve_all() 產生的參數模板

    Returns:
        BoundActionCreator，呼叫時返回 func 的結果

    範例:
        >>> bound = bind(lambda *a: a, ["dep1", PLACEHOLDER, "const1"])
        >>> bound("argA", "argB")
        ('dep1', 'argA', 'const1', 'argB')
    """
    return BoundActionCreator(func, template)

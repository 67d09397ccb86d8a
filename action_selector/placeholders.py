"""
Placeholder 定義模組。

placeholder 在 selector 列表中保留一個參數位置，該位置在 action selector
被呼叫時由呼叫參數依序填入，而不是從 state 計算。

提供兩種形式:
- PLACEHOLDER: 單純的位置標記，直接以呼叫參數替換。
- ExtendablePlaceholder: 攜帶「欄位 -> selector」映射，解析後得到的欄位字典
  會與對應的呼叫參數淺層合併（呼叫參數的欄位優先）。
"""
from typing import Any, Iterator, Mapping, Tuple, Union

from immutables import Map

from .errors import InvalidPlaceholderError
from .immutable_utils import as_fields, freeze_mapping

_MISSING = object()


class Placeholder:
    """
    單例位置標記。

    以 `is` 比較即可判斷；重複建立永遠返回同一個實例。
    """
    __slots__ = ()
    _instance = None

    def __new__(cls) -> "Placeholder":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "PLACEHOLDER"

    def __reduce__(self):
        return (Placeholder, ())


PLACEHOLDER = Placeholder()


class _FrozenFields:
    """不可變欄位容器的共用實作。"""
    __slots__ = ('fields',)

    def __init__(self, fields: Map):
        object.__setattr__(self, 'fields', fields)

    def __setattr__(self, name, value):
        raise AttributeError(f"Cannot modify immutable instance attribute '{name}'")

    def __eq__(self, other):
        if type(other) is not type(self):
            return False
        return self.fields == other.fields

    def __hash__(self):
        return hash((type(self).__name__, self.fields))

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        return iter(self.fields.items())

    def __len__(self) -> int:
        return len(self.fields)

    def __repr__(self):
        inner = ", ".join(f"{k}={v!r}" for k, v in self.fields.items())
        return f"{type(self).__name__}({inner})"


class ExtendablePlaceholder(_FrozenFields):
    """
    可擴展的 placeholder，fields 為「欄位名稱 -> selector entry」的不可變映射。

    解析時不會修改 fields，而是產生新的 ResolvedExtension。
    """
    __slots__ = ()


class ResolvedExtension(_FrozenFields):
    """ExtendablePlaceholder 針對某個 state 快照解析後的結果，fields 保存已計算的值。"""
    __slots__ = ()

    def extend(self, arg: Any = None) -> dict:
        """
        將解析後的欄位與呼叫參數淺層合併。

        Args:
            arg: 呼叫時傳入的物件，可以是 dict、Map、pydantic 模型或 None

        Returns:
            合併後的新字典；同名欄位以 arg 為準。巢狀的 ResolvedExtension
            會遞迴展開為普通字典
        """
        merged = {
            key: value.extend() if isinstance(value, ResolvedExtension) else value
            for key, value in self.fields.items()
        }
        merged.update(as_fields(arg))
        return merged


PlaceholderMarker = Union[Placeholder, ExtendablePlaceholder]


def create_placeholder(field_selectors: Any = _MISSING) -> PlaceholderMarker:
    """
    建立 placeholder。

    Args:
        field_selectors: 可選的「欄位名稱 -> selector entry」映射；
            省略時返回單純的 PLACEHOLDER

    Returns:
        PLACEHOLDER 或 ExtendablePlaceholder

    Raises:
        InvalidPlaceholderError: field_selectors 不是映射（包括明確傳入 None），
            或欄位值為單純的 placeholder（巢狀欄位沒有可消耗的呼叫參數）

    範例:
        >>> create_placeholder() is PLACEHOLDER
        True
        >>> ext = create_placeholder({"user_id": lambda state: state["session"]["user_id"]})
    """
    if field_selectors is _MISSING:
        return PLACEHOLDER
    if not isinstance(field_selectors, Mapping):
        raise InvalidPlaceholderError(
            f"Placeholder field selectors must be a mapping, got {type(field_selectors).__name__}",
            config=field_selectors,
        )
    for key, value in field_selectors.items():
        if is_placeholder(value):
            raise InvalidPlaceholderError(
                f"Placeholder field '{key}' cannot be a positional placeholder",
                config=field_selectors,
                field=key,
            )
    return ExtendablePlaceholder(freeze_mapping(field_selectors))


def get_placeholder() -> Placeholder:
    """返回單純的位置標記 PLACEHOLDER。"""
    return PLACEHOLDER


def is_placeholder(entry: Any) -> bool:
    """
    判斷 entry 是否為單純的位置標記。

    除了 PLACEHOLDER 本身，舊寫法直接把 get_placeholder 函數放進 selector 列表，
    也視為 placeholder。
    """
    return entry is PLACEHOLDER or entry is get_placeholder

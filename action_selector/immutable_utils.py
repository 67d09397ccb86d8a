# action_selector/immutable_utils.py
from typing import Any, Dict, Mapping

from immutables import Map
from pydantic import BaseModel


def freeze_mapping(obj: Mapping[Any, Any]) -> Map:
    """將映射淺層轉為不可變 Map（值保持原樣，selector 函數不會被轉換）"""
    if isinstance(obj, Map):
        return obj
    return Map(obj)


def to_dict(obj: Any) -> Any:
    """將 Map 及其巢狀結構轉換為普通字典"""
    if isinstance(obj, BaseModel):
        return to_dict(obj.model_dump())
    if isinstance(obj, Map):
        return {k: to_dict(v) for k, v in obj.items()}
    elif isinstance(obj, dict):
        return {k: to_dict(v) for k, v in obj.items()}
    elif isinstance(obj, tuple):
        return [to_dict(i) for i in obj]
    elif isinstance(obj, frozenset):
        return {to_dict(i) for i in obj}
    return obj


def as_fields(obj: Any) -> Dict[Any, Any]:
    """
    取得物件的頂層欄位作為普通字典（淺層，不遞迴轉換值）。

    None 視為沒有欄位；pydantic 模型取其 model_dump()；其他映射直接複製。
    不是映射的值交給 dict() 處理，無法轉換時拋出 TypeError。
    """
    if obj is None:
        return {}
    if isinstance(obj, BaseModel):
        return dict(obj.model_dump())
    return dict(obj)

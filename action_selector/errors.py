"""
Action Selector 錯誤處理模組。

定義 action selector 在建立與分發過程中可能拋出的異常。
所有異常都攜帶結構化的 details，便於日誌記錄與錯誤報告。
"""
import traceback as _traceback
from typing import Any, Dict, Optional


class ActionSelectorError(Exception):
    """所有 Action Selector 異常的基礎類。"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        初始化異常。

        Args:
            message: 錯誤訊息
            details: 與錯誤相關的結構化資訊
        """
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})
        self.traceback = "".join(_traceback.format_stack()[:-1])

    def to_dict(self) -> Dict[str, Any]:
        """
        將異常轉換為字典，用於日誌或報告。

        Returns:
            包含錯誤類型、訊息與詳細資訊的字典
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": dict(self.details),
            "traceback": self.traceback,
        }

    def __str__(self) -> str:
        return self.message


class InvalidTargetError(ActionSelectorError, TypeError):
    """action creator（目標函數）不可調用時拋出。"""

    def __init__(self, message: str, target: Any = None, action_type: Optional[str] = None, **kwargs: Any) -> None:
        details = {"target_type": type(target).__name__, **kwargs}
        if action_type is not None:
            details["action_type"] = action_type
        super().__init__(message, details)


class InvalidPlaceholderError(ActionSelectorError, ValueError):
    """placeholder 的欄位設定不是映射 (mapping) 時拋出。"""

    def __init__(self, message: str, config: Any = None, **kwargs: Any) -> None:
        super().__init__(message, {"config_type": type(config).__name__, **kwargs})

"""
PyResourceX 錯誤處理模組。

所有由本庫主動拋出的異常都繼承自 ResourceXError。
Reducer 在處理一般 action 時不會拋出異常，異常只出現在配置與 action 建立階段。
"""
import traceback
from typing import Any, Dict, Optional


class ResourceXError(Exception):
    """所有 PyResourceX 異常的基礎類。"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.traceback = traceback.format_exc()

    def to_dict(self) -> Dict[str, Any]:
        """
        將異常轉換為字典，方便記錄或序列化。

        Returns:
            包含異常類型、訊息與細節的字典
        """
        return {
            "type": type(self).__name__,
            "message": self.message,
            "details": dict(self.details),
        }

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} {self.details}"
        return self.message


class ConfigurationError(ResourceXError):
    """配置相關的錯誤，例如缺少資源名稱或無效的選項。"""

    def __init__(self, message: str, component: str, config_key: Optional[str] = None, **kwargs: Any):
        details = {"component": component, "config_key": config_key}
        details.update(kwargs)
        super().__init__(message, details)
        self.component = component
        self.config_key = config_key


class ActionError(ResourceXError):
    """與 Action 建立相關的錯誤。"""

    def __init__(self, message: str, action_type: str, payload: Any = None, **kwargs: Any):
        details = {"action_type": action_type, "payload": payload}
        details.update(kwargs)
        super().__init__(message, details)
        self.action_type = action_type
        self.payload = payload

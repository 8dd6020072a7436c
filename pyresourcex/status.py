"""
請求狀態追蹤。

每個操作（fetch/create/update/destroy）都有一個 OperationStatus，
其狀態機為：

    idle --START--> pending --SUCCESS--> succeeded
                            --FAILURE--> failed
    任何狀態 --RESET--> idle

START 沒有前置條件，重複的 START 會直接覆蓋前一次的狀態。
失敗後 pending 仍為 True，表示該次請求並未正常結束。
"""
from typing import Any, Iterable, Optional

from immutables import Map
from pydantic import BaseModel, ConfigDict


class OperationStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    pending: Optional[bool] = None
    busy: bool = False
    success: Optional[bool] = None
    payload: Any = None

    @property
    def idle(self) -> bool:
        return self.pending is None and self.success is None and not self.busy


IDLE = OperationStatus()


def is_blank(value: Any) -> bool:
    """
    判斷負載是否為「空」：None、False、數值 0 或空字串。

    空列表與空映射不算空，因此回傳零筆資料的請求仍會被標記為成功。
    """
    if value is None or value is False:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, str):
        return value == ""
    return False


def create_status(operations: Iterable[str]) -> Map:
    """為每個操作建立預設（idle）狀態，鍵為小寫的操作名稱。"""
    return Map({op.lower(): IDLE for op in operations})


def started(payload: Any) -> OperationStatus:
    return OperationStatus(pending=True, busy=True, success=None, payload=payload)


def succeeded(payload: Any) -> OperationStatus:
    return OperationStatus(pending=False, busy=False, success=True, payload=payload)


def failed(payload: Any) -> OperationStatus:
    return OperationStatus(pending=True, busy=False, success=False, payload=payload)


def set_status(status: Map, operation: str, value: OperationStatus) -> Map:
    return status.set(operation.lower(), value)

"""
PyResourceX 共用的類型定義。
"""
from typing import Any, Callable, Optional, TypeVar

S = TypeVar("S")  # 狀態類型
P = TypeVar("P")  # 負載類型

# 選項中的鉤子函數
OnUpdate = Callable[[Optional[Any], Any], Any]
ChangesetReducer = Callable[[Optional[Any], Any], Any]
PayloadReducer = Callable[[str, Any, Any], Any]

Reducer = Callable[[Optional[S], Any], S]
StateSelector = Callable[[Any], Any]

DispatchFunction = Callable[[Any], Any]
NextDispatch = DispatchFunction
MiddlewareFunction = Callable[[NextDispatch], DispatchFunction]
GetState = Callable[[], Any]
ThunkFunction = Callable[[DispatchFunction, GetState], Any]

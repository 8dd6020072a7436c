"""
PyResourceX：以 action 驅動的 CRUD 資源狀態正規化。

每個資源切片保存 results（識別碼順序）、entities（識別碼 -> 實體）、
每個操作的請求狀態、回應的 meta，以及每個表單的暫存變更。
"""

from .errors import ResourceXError, ActionError, ConfigurationError
from .actions import (
    Action, ActionType, Operation, Domain, Method, ResourceActions,
    create_action, create_resource_actions, parse_action_type,
    DEFAULT_FORM, DEFAULT_OPERATIONS,
)
from .options import ResourceOptions
from .status import OperationStatus, IDLE
from .entity_adapter import EntityAdapter, create_entity_adapter
from .reducers import resource_reducer, initial_resource_state, ReducerManager
from .middleware import BaseMiddleware, LoggerMiddleware, ThunkMiddleware
from .store import Store, create_store, StoreModule
from .store_selectors import (
    create_selector, select_feature, select_results, select_entities, select_all,
    select_by_id, select_status, select_meta, select_changeset, select_is_busy,
)
from .immutable_utils import to_immutable, to_dict

__all__ = [
    # Errors
    "ResourceXError", "ActionError", "ConfigurationError",

    # Actions
    "Action", "ActionType", "Operation", "Domain", "Method", "ResourceActions",
    "create_action", "create_resource_actions", "parse_action_type",
    "DEFAULT_FORM", "DEFAULT_OPERATIONS",

    # Reducers
    "ResourceOptions", "OperationStatus", "IDLE",
    "EntityAdapter", "create_entity_adapter",
    "resource_reducer", "initial_resource_state", "ReducerManager",

    # Middleware
    "BaseMiddleware", "LoggerMiddleware", "ThunkMiddleware",

    # Store
    "Store", "create_store", "StoreModule",

    # Selectors
    "create_selector", "select_feature", "select_results", "select_entities",
    "select_all", "select_by_id", "select_status", "select_meta",
    "select_changeset", "select_is_busy",

    # Immutable Utils
    "to_immutable", "to_dict",
]

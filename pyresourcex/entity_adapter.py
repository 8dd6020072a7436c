import logging
from collections.abc import Hashable, Mapping
from typing import Any, Optional, Tuple

from immutables import Map

from .immutable_utils import to_immutable
from .options import replace_entity
from .status import is_blank
from .types import OnUpdate

__all__ = [
    "create_entity_adapter",
    "EntityAdapter",
]

logger = logging.getLogger(__name__)


def _as_sequence(data: Any) -> Tuple[Any, ...]:
    """單一物件包裝為單元素元組；列表與元組保持原順序。"""
    if isinstance(data, (list, tuple)):
        return tuple(data)
    return (data,)


def _is_identifier(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


class EntityAdapter:
    """
    對集合（results + entities）進行正規化操作的工具。

    results 是識別碼的元組，順序即首次出現的順序；
    entities 是識別碼到實體的 Map。兩者的鍵始終一一對應。
    所有方法都返回新的狀態，不會修改傳入的狀態。
    """

    def __init__(self, id_attribute: str = "id", on_update: OnUpdate = replace_entity):
        """
        初始化 EntityAdapter。
        :param id_attribute: 實體識別碼的欄位名稱
        :param on_update: (舊實體, 新實體) -> 合併後的實體
        """
        self.id_attribute = id_attribute
        self.on_update = on_update

    def get_initial_state(self, state: Optional[Mapping] = None) -> Map:
        """
        生成初始狀態：{'results': (), 'entities': Map(), **state}
        :param state: 可選的額外欄位
        :return: 初始化後的狀態 Map
        """
        base = Map(results=(), entities=Map())
        if state:
            base = base.update(state)
        return base

    def select_id(self, entity: Any) -> Any:
        """
        讀取實體的識別碼。映射使用鍵，其他物件使用屬性。
        :return: 識別碼，找不到時為 None
        """
        if isinstance(entity, (Map, Mapping)):
            return entity.get(self.id_attribute)
        return getattr(entity, self.id_attribute, None)

    # —— UPSERT / REMOVE —— #

    def upsert_many(self, data: Any, state: Map) -> Map:
        """
        新增或更新實體。新的識別碼附加到 results 末尾，既有識別碼位置不變。
        缺少識別碼的實體會被略過並記錄警告。
        :param data: 單一實體或實體列表
        :param state: 當前狀態
        :return: 更新後的狀態
        """
        results = list(state["results"])
        known = set(results)
        with state["entities"].mutate() as mm:
            for entity in _as_sequence(data):
                ent_id = self.select_id(entity)
                if is_blank(ent_id) or not isinstance(ent_id, Hashable):
                    logger.warning("Missing '%s' unable to add data to store", self.id_attribute)
                    continue
                if ent_id not in known:
                    known.add(ent_id)
                    results.append(ent_id)
                mm[ent_id] = to_immutable(self.on_update(mm.get(ent_id), entity))
            entities = mm.finish()
        return state.update(results=tuple(results), entities=entities)

    def remove_many(self, data: Any, state: Map) -> Map:
        """
        依識別碼移除實體。元素可以是識別碼本身（字串或數字）或帶識別碼的實體。
        不存在的識別碼會被忽略。
        :param data: 單一元素或元素列表
        :param state: 當前狀態
        :return: 更新後的狀態
        """
        results = list(state["results"])
        with state["entities"].mutate() as mm:
            for item in _as_sequence(data):
                ent_id = item if _is_identifier(item) else self.select_id(item)
                if not isinstance(ent_id, Hashable):
                    continue
                if ent_id in results:
                    results.remove(ent_id)
                if ent_id in mm:
                    del mm[ent_id]
            entities = mm.finish()
        return state.update(results=tuple(results), entities=entities)


def create_entity_adapter(id_attribute: str = "id", on_update: OnUpdate = replace_entity) -> EntityAdapter:
    """
    快速工廠方法：創建 EntityAdapter。
    """
    return EntityAdapter(id_attribute, on_update)

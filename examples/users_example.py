from pathlib import Path
import logging
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from pyresourcex import (
    LoggerMiddleware,
    StoreModule,
    ThunkMiddleware,
    create_resource_actions,
    resource_reducer,
    select_all,
    select_changeset,
    select_feature,
    select_status,
    to_dict,
)

# ====== 1. 定義 Actions 與 Reducers ======
users = create_resource_actions("users")
posts = create_resource_actions("posts")


def merge_user(previous, incoming):
    # 保留舊欄位，新欄位覆蓋
    return {**(previous or {}), **incoming}


users_reducer = resource_reducer("users", on_update=merge_user)
posts_reducer = resource_reducer(
    "posts",
    entity_reducer=lambda op, payload, meta: payload["items"] if op == "FETCH" else payload,
)

# ====== 2. 建立 Store ======
store = StoreModule.register_root({"users": users_reducer, "posts": posts_reducer})
store.apply_middleware(ThunkMiddleware, LoggerMiddleware)


# ====== 3. 模擬 API ======
class FakeApi:
    def list_users(self):
        return [{"id": 1, "name": "Ada"}, {"id": 2, "name": "Linus"}]

    def list_posts(self):
        return {"items": [{"id": 10, "title": "hello"}], "total": 1}


def fetch_users(api):
    def thunk(dispatch, get_state):
        dispatch(users.fetch_start())
        try:
            dispatch(users.fetch_success(api.list_users(), meta={"page": 1}))
        except ConnectionError as e:
            dispatch(users.fetch_failure(str(e)))
    return thunk


def fetch_posts(api):
    def thunk(dispatch, get_state):
        dispatch(posts.fetch_start())
        dispatch(posts.fetch_success(api.list_posts()))
    return thunk


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    select_users = select_feature("users")
    store.select(lambda root: select_all(select_users(root))).subscribe(
        on_next=lambda t: print(f"使用者變化: {len(t[0])} -> {len(t[1])}")
    )

    api = FakeApi()
    store.dispatch(fetch_users(api))
    store.dispatch(fetch_posts(api))

    # 表單編輯
    store.dispatch(users.merge_changeset({"name": "Ada L."}, form="edit-1"))
    store.dispatch(users.update_success({"id": 1, "email": "ada@example.com"}))
    store.dispatch(users.destroy_success(2))

    users_state = store.state["users"]
    print("\n==== 最終狀態 ====")
    print([to_dict(u) for u in select_all(users_state)])
    print(to_dict(select_changeset("edit-1")(users_state)))
    print(select_status("fetch")(users_state))
    print(to_dict(store.state["posts"]["entities"]))

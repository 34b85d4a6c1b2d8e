import warnings

import pytest
from sqlalchemy.exc import SAWarning

from infrastructure.context import LabelingScope
from infrastructure.database.repositories import CategoryRepository, LabelRepository
from infrastructure.errors import NotFoundError


@pytest.mark.asyncio
async def test_upsert_item_creates_label_once_and_is_idempotent(db_session, scope):
    repo = LabelRepository(db_session, scope)

    first_id = await repo.upsert_item("pro-choice", "post-1")
    second_id = await repo.upsert_item("pro-choice", "post-1")
    await repo.upsert_item("pro-choice", "post-2")

    assert first_id == second_id
    record = await repo.get_label("pro-choice")
    assert record is not None
    assert record.items == ["post-1", "post-2"]


@pytest.mark.asyncio
async def test_items_for_keeps_insertion_order(db_session, scope):
    repo = LabelRepository(db_session, scope)
    for item_id in ("b", "a", "c"):
        await repo.upsert_item("taxes", item_id)

    assert await repo.items_for("taxes") == ["b", "a", "c"]


@pytest.mark.asyncio
async def test_items_for_unknown_label_raises_not_found(db_session, scope):
    repo = LabelRepository(db_session, scope)

    with pytest.raises(NotFoundError) as excinfo:
        await repo.items_for("nobody-uses-this")

    assert str(excinfo.value) == "No items have label nobody-uses-this!"


@pytest.mark.asyncio
async def test_labels_for_item_without_labels_is_empty(db_session, scope):
    repo = LabelRepository(db_session, scope)

    assert await repo.labels_for("post-404") == []


@pytest.mark.asyncio
async def test_remove_item_deletes_emptied_labels_and_their_category_links(db_session, scope):
    labels = LabelRepository(db_session, scope)
    categories = CategoryRepository(db_session, scope)

    solo_id = await labels.upsert_item("solo", "post-1")
    shared_id = await labels.upsert_item("shared", "post-1")
    await labels.upsert_item("shared", "post-2")
    await categories.attach_labels("Sports", [solo_id, shared_id])

    deleted = await labels.remove_item("post-1")

    assert deleted == [solo_id]
    assert await labels.get_label("solo") is None
    assert await labels.items_for("shared") == ["post-2"]
    assert await categories.labels_in("Sports") == [shared_id]


@pytest.mark.asyncio
async def test_remove_item_with_label_filter_only_touches_those_labels(db_session, scope):
    repo = LabelRepository(db_session, scope)
    await repo.upsert_item("keep", "post-1")
    await repo.upsert_item("drop", "post-1")

    await repo.remove_item("post-1", ["drop"])

    assert await repo.labels_for("post-1") == ["keep"]


@pytest.mark.asyncio
async def test_remove_item_with_empty_filter_is_noop(db_session, scope):
    repo = LabelRepository(db_session, scope)
    await repo.upsert_item("keep", "post-1")

    assert await repo.remove_item("post-1", []) == []
    assert await repo.labels_for("post-1") == ["keep"]


@pytest.mark.asyncio
async def test_label_values_follow_requested_order(db_session, scope):
    repo = LabelRepository(db_session, scope)
    a = await repo.upsert_item("a", "post-1")
    b = await repo.upsert_item("b", "post-1")
    c = await repo.upsert_item("c", "post-1")

    assert await repo.label_values([c, a, b, a]) == ["c", "a", "b"]


@pytest.mark.asyncio
async def test_namespaces_do_not_share_labels(db_session, scope):
    posts = LabelRepository(db_session, scope)
    comments = LabelRepository(db_session, LabelingScope(namespace="comment"))

    await posts.upsert_item("climate", "post-1")

    with pytest.raises(NotFoundError):
        await comments.items_for("climate")
    assert await comments.labels_for("post-1") == []


@pytest.mark.asyncio
async def test_label_recreated_in_same_session_after_deletion(db_session, scope):
    repo = LabelRepository(db_session, scope)
    await repo.upsert_item("comeback", "post-1")
    assert (await repo.get_label("comeback")).items == ["post-1"]

    await repo.remove_item("post-1")
    with warnings.catch_warnings():
        warnings.simplefilter("error", SAWarning)
        await repo.upsert_item("comeback", "post-2")
        record = await repo.get_label("comeback")

    assert record.items == ["post-2"]
    assert await repo.labels_for("post-1") == []

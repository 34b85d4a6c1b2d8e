import logging
from typing import NoReturn

from fastapi import APIRouter, Depends, HTTPException, Response, status

from infrastructure.errors import (
    InvalidCategoryError,
    LabelingError,
    NotFoundError,
    OracleFailure,
)
from routers.dependencies import get_labeling_service
from schemas.requests.labels import ItemLabelsRequest
from services.labeling import LabelingService

router = APIRouter()
logger = logging.getLogger(__name__)


def _raise_http(exc: LabelingError) -> NoReturn:
    if isinstance(exc, NotFoundError):
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    if isinstance(exc, InvalidCategoryError):
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    if isinstance(exc, OracleFailure):
        logger.exception("Oracle failure: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    logger.exception("Labeling failed: %s", exc)
    raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.post("/items/{item_id}/labels", summary="Attach labels to an item")
async def add_item_labels(
    item_id: str,
    payload: ItemLabelsRequest,
    service: LabelingService = Depends(get_labeling_service),
):
    try:
        result = await service.add_labels_for_item(item_id, payload.labels)
    except LabelingError as exc:
        _raise_http(exc)
    return {"message": result.message}


@router.put("/items/{item_id}/labels", summary="Replace the labels of an item")
async def update_item_labels(
    item_id: str,
    payload: ItemLabelsRequest,
    service: LabelingService = Depends(get_labeling_service),
):
    try:
        result = await service.update_labels_for_item(item_id, payload.labels)
    except LabelingError as exc:
        _raise_http(exc)
    return {"message": result.message}


@router.delete(
    "/items/{item_id}/labels",
    summary="Detach an item from every label",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_item_labels(
    item_id: str,
    service: LabelingService = Depends(get_labeling_service),
):
    await service.remove_item_from_label(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/items/{item_id}/labels", summary="List the labels of an item")
async def get_item_labels(
    item_id: str,
    service: LabelingService = Depends(get_labeling_service),
):
    labels = await service.get_labels_for_item(item_id)
    return {"item_id": item_id, "labels": labels}


@router.get("/labels/{label}/items", summary="List the items carrying a label")
async def get_label_items(
    label: str,
    service: LabelingService = Depends(get_labeling_service),
):
    try:
        items = await service.get_items_with_label(label)
    except LabelingError as exc:
        _raise_http(exc)
    return {"label": label, "items": items}


@router.get("/categories", summary="List categories that currently hold labels")
async def list_categories(service: LabelingService = Depends(get_labeling_service)):
    return {"categories": await service.get_all_categories()}


@router.get(
    "/categories/{category}/opposing",
    summary="Pair items holding opposing viewpoints within a category",
)
async def get_opposing_items(
    category: str,
    service: LabelingService = Depends(get_labeling_service),
):
    try:
        pairs = await service.get_opposing_item_views(category)
    except LabelingError as exc:
        _raise_http(exc)
    return {
        "category": category,
        "pairs": [pair.model_dump() for pair in pairs],
    }

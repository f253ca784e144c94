"""
Weight entry routes: log, list and delete body weight measurements.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
from datetime import date
import logging

from .. import schemas
from ..errors import NotFoundError, StorageError, ValidationError
from ..repositories import WeightRepository, get_weight_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/weight", tags=["Weight"])


@router.post("", response_model=schemas.WeightEntryResponse)
def save_weight(
    payload: schemas.WeightCreate,
    weights: WeightRepository = Depends(get_weight_repository)
):
    """
    Log a weight for a date. A second entry for the same date replaces the first.

    - **userId**, **weight** (kg), **date**: required
    """
    if payload.user_id is None or payload.weight is None or payload.date is None:
        raise ValidationError("userId, weight and date are required.")

    try:
        entry = weights.upsert(payload.user_id, payload.weight, payload.date)
        result = schemas.WeightEntry.model_validate(entry)
    except SQLAlchemyError:
        logger.exception(f"Error saving weight entry for user {payload.user_id}")
        raise StorageError("Failed to save weight entry")

    return schemas.WeightEntryResponse(entry=result)


@router.get("/{user_id}", response_model=schemas.WeightEntryList)
def list_weights(
    user_id: int,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    weights: WeightRepository = Depends(get_weight_repository)
):
    """
    Get a user's weight entries, oldest first.

    - **startDate** / **endDate**: optional inclusive bounds
    """
    try:
        if start_date or end_date:
            rows = weights.find_by_user_in_range(user_id, start_date, end_date)
        else:
            rows = weights.find_by_user(user_id)
        entries = [schemas.WeightEntry.model_validate(r) for r in rows]
    except SQLAlchemyError:
        logger.exception(f"Error fetching weight entries for user {user_id}")
        raise StorageError("Failed to fetch weight entries")

    return schemas.WeightEntryList(entries=entries)


@router.delete("/entries/{entry_id}", response_model=schemas.Message)
def delete_weight(
    entry_id: int,
    weights: WeightRepository = Depends(get_weight_repository)
):
    """Delete a weight entry."""
    try:
        deleted = weights.delete(entry_id)
    except SQLAlchemyError:
        logger.exception(f"Error deleting weight entry {entry_id}")
        raise StorageError("Failed to delete weight entry")

    if not deleted:
        raise NotFoundError("Weight entry not found")
    return schemas.Message(message="Weight entry deleted")

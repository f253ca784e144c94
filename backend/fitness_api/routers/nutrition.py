"""
Nutrition routes: meal entries, daily totals and the macro estimate stub.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
from datetime import date
import logging

from .. import schemas
from ..errors import NotFoundError, StorageError, ValidationError
from ..repositories import NutritionRepository, get_nutrition_repository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/nutrition", tags=["Nutrition"])

# Fixed macro breakdown until a real estimator exists
ESTIMATE_MACROS = {"calories": 500, "protein": 30, "carbs": 50, "fat": 15}


@router.post("", response_model=schemas.NutritionEntryResponse)
def create_nutrition_entry(
    payload: schemas.NutritionCreate,
    nutrition: NutritionRepository = Depends(get_nutrition_repository)
):
    """
    Log a meal. Several meals per day are allowed.

    - **userId**, **meal**, **date**: required
    - **calories**, **protein**, **carbs**, **fat**: default to 0
    """
    if payload.user_id is None or not payload.meal or payload.date is None:
        raise ValidationError("userId, meal and date are required.")

    try:
        entry = nutrition.create(
            user_id=payload.user_id,
            meal=payload.meal,
            date=payload.date,
            calories=payload.calories,
            protein=payload.protein,
            carbs=payload.carbs,
            fat=payload.fat,
        )
        result = schemas.NutritionEntry.model_validate(entry)
    except SQLAlchemyError:
        logger.exception(f"Error saving nutrition entry for user {payload.user_id}")
        raise StorageError("Failed to save nutrition entry")

    return schemas.NutritionEntryResponse(entry=result)


@router.post("/estimate", response_model=schemas.NutritionEstimateResponse)
def estimate_nutrition(payload: schemas.NutritionEstimateRequest):
    """Estimate macros for a meal description (fixed values for now)."""
    if not payload.meal:
        raise ValidationError("Missing meal description")
    return schemas.NutritionEstimateResponse(
        estimate=schemas.NutritionEstimate(meal=payload.meal, **ESTIMATE_MACROS)
    )


@router.get("/{user_id}", response_model=schemas.NutritionEntryList)
def list_nutrition_entries(
    user_id: int,
    on_date: Optional[date] = Query(None, alias="date"),
    nutrition: NutritionRepository = Depends(get_nutrition_repository)
):
    """
    Get a user's nutrition entries, newest first.

    - **date**: optional, restrict to a single day
    """
    try:
        if on_date:
            rows = nutrition.find_by_user_and_date(user_id, on_date)
        else:
            rows = nutrition.find_by_user(user_id)
        entries = [schemas.NutritionEntry.model_validate(r) for r in rows]
    except SQLAlchemyError:
        logger.exception(f"Error fetching nutrition entries for user {user_id}")
        raise StorageError("Failed to fetch nutrition entries")

    return schemas.NutritionEntryList(entries=entries)


@router.get("/{user_id}/totals", response_model=schemas.DailyNutritionTotals)
def get_daily_totals(
    user_id: int,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    nutrition: NutritionRepository = Depends(get_nutrition_repository)
):
    """
    Per-day calorie and macro totals.

    - **startDate**, **endDate**: required, inclusive
    """
    if start_date is None or end_date is None:
        raise ValidationError("startDate and endDate are required.")
    if start_date > end_date:
        raise ValidationError("startDate must not be after endDate.")

    try:
        totals = nutrition.daily_totals(user_id, start_date, end_date)
    except SQLAlchemyError:
        logger.exception(f"Error computing nutrition totals for user {user_id}")
        raise StorageError("Failed to fetch nutrition totals")

    return schemas.DailyNutritionTotals(
        totals=[schemas.DailyNutritionTotal(**row) for row in totals]
    )


@router.delete("/entries/{entry_id}", response_model=schemas.Message)
def delete_nutrition_entry(
    entry_id: int,
    nutrition: NutritionRepository = Depends(get_nutrition_repository)
):
    """Delete a nutrition entry."""
    try:
        deleted = nutrition.delete(entry_id)
    except SQLAlchemyError:
        logger.exception(f"Error deleting nutrition entry {entry_id}")
        raise StorageError("Failed to delete nutrition entry")

    if not deleted:
        raise NotFoundError("Nutrition entry not found")
    return schemas.Message(message="Nutrition entry deleted")

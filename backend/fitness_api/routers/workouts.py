"""
Workout routes: plan generation and workout logs.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional
import logging

from .. import schemas
from ..errors import NotFoundError, StorageError, ValidationError
from ..llm.planner import DEFAULT_EXPERIENCE, DEFAULT_GOAL, PlanGenerator, get_plan_generator
from ..repositories import (
    WorkoutLogRepository,
    WorkoutPlanRepository,
    get_workout_log_repository,
    get_workout_plan_repository,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Workouts"])


# ---------- Workout plans ----------

@router.get("/workout-plan", response_model=schemas.WorkoutPlanResponse)
def get_workout_plan(
    goal: Optional[str] = Query(None),
    experience: Optional[str] = Query(None),
    user_id: Optional[int] = Query(None, alias="userId"),
    generator: PlanGenerator = Depends(get_plan_generator),
    plans: WorkoutPlanRepository = Depends(get_workout_plan_repository)
):
    """
    Generate a one-week workout plan.

    - **goal**: e.g. "strength", "fat loss" (default: general fitness)
    - **experience**: e.g. "beginner" (default)
    - **userId**: when given, the plan replaces the user's stored plan
    """
    goal = goal or DEFAULT_GOAL
    experience = experience or DEFAULT_EXPERIENCE
    plan = generator.generate(goal, experience)

    if user_id is not None:
        try:
            plans.upsert(user_id, goal, experience, plan)
        except SQLAlchemyError:
            logger.exception(f"Error storing workout plan for user {user_id}")
            raise StorageError("Failed to generate workout plan")

    return schemas.WorkoutPlanResponse(plan=plan)


@router.get("/workout-plan/{user_id}", response_model=schemas.StoredWorkoutPlanResponse)
def get_saved_workout_plan(
    user_id: int,
    plans: WorkoutPlanRepository = Depends(get_workout_plan_repository)
):
    """Get the plan most recently generated for a user."""
    try:
        row = plans.find_by_user(user_id)
        stored = schemas.StoredWorkoutPlan.model_validate(row) if row else None
    except SQLAlchemyError:
        logger.exception(f"Error fetching workout plan for user {user_id}")
        raise StorageError("Failed to fetch workout plan")

    if stored is None:
        raise NotFoundError("No workout plan found for this user")
    return schemas.StoredWorkoutPlanResponse(plan=stored)


# ---------- Workout logs ----------

@router.post("/workout-log", response_model=schemas.WorkoutLogCreated)
def create_workout_log(
    payload: schemas.WorkoutLogCreate,
    logs: WorkoutLogRepository = Depends(get_workout_log_repository)
):
    """
    Record a completed workout.

    - **userId**, **date**: required
    - **exercises**: list of {name, sets, reps, weight, rpe}; may be empty
    """
    if payload.user_id is None or payload.date is None or payload.exercises is None:
        raise ValidationError("userId, date and exercises are required.")

    try:
        log = logs.create(
            payload.user_id,
            payload.date,
            [exercise.model_dump() for exercise in payload.exercises],
        )
        workout_log = schemas.WorkoutLog.model_validate(log)
    except SQLAlchemyError:
        logger.exception(f"Error saving workout log for user {payload.user_id}")
        raise StorageError("Failed to save workout log")

    return schemas.WorkoutLogCreated(message="Workout logged", workout_log=workout_log)


@router.get("/workout-log/{user_id}", response_model=schemas.WorkoutLogList)
def list_workout_logs(
    user_id: int,
    logs: WorkoutLogRepository = Depends(get_workout_log_repository)
):
    """Get all workout logs of a user, newest first, with their exercises."""
    try:
        rows = [schemas.WorkoutLog.model_validate(log) for log in logs.find_by_user(user_id)]
    except SQLAlchemyError:
        logger.exception(f"Error fetching workout logs for user {user_id}")
        raise StorageError("Failed to fetch workout logs")

    return schemas.WorkoutLogList(logs=rows)


@router.delete("/workout-log/entries/{log_id}", response_model=schemas.Message)
def delete_workout_log(
    log_id: int,
    logs: WorkoutLogRepository = Depends(get_workout_log_repository)
):
    """Delete a workout log together with its exercises."""
    try:
        deleted = logs.delete(log_id)
    except SQLAlchemyError:
        logger.exception(f"Error deleting workout log {log_id}")
        raise StorageError("Failed to delete workout log")

    if not deleted:
        raise NotFoundError("Workout log not found")
    return schemas.Message(message="Workout log deleted")

"""
Pydantic schemas for request/response validation.

Wire format is camelCase (``userId``, ``createdAt``) for the mobile client;
snake_case keys are accepted on input as well.
"""
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Annotated, Literal, Optional, Union
from datetime import date as dt_date, datetime


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============ User / Auth Schemas ============

class RegisterRequest(CamelModel):
    """Schema for user registration. Presence is checked by the auth flow."""
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(CamelModel):
    """Schema for login request."""
    email: Optional[str] = None
    password: Optional[str] = None


class PublicUser(CamelModel):
    """Public user record - never carries the password hash."""
    id: int
    name: str
    email: str


class AuthResponse(CamelModel):
    """Token plus the user it was issued for."""
    token: str
    user: PublicUser


class UserResponse(CamelModel):
    user: PublicUser


# ============ Workout Plan Schemas ============

class PlanDay(CamelModel):
    day: str
    focus: str
    exercises: list[str] = Field(default_factory=list)


class AIPlan(CamelModel):
    """Plan text produced by the completion service, verbatim."""
    type: Literal["ai"] = "ai"
    content: str


class StaticPlan(CamelModel):
    """Built-in fallback plan, structured by day with a text rendering."""
    type: Literal["static"] = "static"
    content: str
    days: list[PlanDay]


PlanData = Annotated[Union[AIPlan, StaticPlan], Field(discriminator="type")]


class WorkoutPlanResponse(CamelModel):
    plan: PlanData


class StoredWorkoutPlan(CamelModel):
    id: int
    user_id: int
    goal: str
    experience: str
    plan_data: PlanData
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StoredWorkoutPlanResponse(CamelModel):
    plan: StoredWorkoutPlan


# ============ Workout Log Schemas ============

class ExerciseIn(CamelModel):
    """One exercise line. Missing sets/reps default to 1 when stored."""
    name: Optional[str] = None
    sets: Optional[int] = Field(None, ge=0)
    reps: Optional[int] = Field(None, ge=0)
    weight: Optional[float] = Field(None, ge=0)
    rpe: Optional[float] = Field(None, ge=0, le=10)


class WorkoutLogCreate(CamelModel):
    user_id: Optional[int] = None
    date: Optional[dt_date] = None
    exercises: Optional[list[ExerciseIn]] = None


class WorkoutExercise(CamelModel):
    id: int
    name: str
    sets: int
    reps: int
    weight: Optional[float] = None
    rpe: Optional[float] = None


class WorkoutLog(CamelModel):
    id: int
    user_id: int
    date: dt_date
    created_at: Optional[datetime] = None
    exercises: list[WorkoutExercise] = Field(default_factory=list)


class WorkoutLogCreated(CamelModel):
    message: str
    workout_log: WorkoutLog


class WorkoutLogList(CamelModel):
    logs: list[WorkoutLog]


# ============ Weight Schemas ============

class WeightCreate(CamelModel):
    user_id: Optional[int] = None
    weight: Optional[float] = Field(None, gt=0, le=1000)  # kg
    date: Optional[dt_date] = None


class WeightEntry(CamelModel):
    id: int
    user_id: int
    weight: float
    date: dt_date
    created_at: Optional[datetime] = None


class WeightEntryResponse(CamelModel):
    entry: WeightEntry


class WeightEntryList(CamelModel):
    entries: list[WeightEntry]


# ============ Nutrition Schemas ============

class NutritionCreate(CamelModel):
    """Macros are optional and stored as 0 when missing."""
    user_id: Optional[int] = None
    meal: Optional[str] = None
    calories: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fat: Optional[float] = Field(None, ge=0)
    date: Optional[dt_date] = None


class NutritionEntry(CamelModel):
    id: int
    user_id: int
    meal: str
    calories: float
    protein: float
    carbs: float
    fat: float
    date: dt_date
    created_at: Optional[datetime] = None


class NutritionEntryResponse(CamelModel):
    entry: NutritionEntry


class NutritionEntryList(CamelModel):
    entries: list[NutritionEntry]


class DailyNutritionTotal(CamelModel):
    date: dt_date
    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float


class DailyNutritionTotals(CamelModel):
    totals: list[DailyNutritionTotal]


class NutritionEstimateRequest(CamelModel):
    meal: Optional[str] = None


class NutritionEstimate(CamelModel):
    meal: str
    calories: float
    protein: float
    carbs: float
    fat: float


class NutritionEstimateResponse(CamelModel):
    estimate: NutritionEstimate


# ============ Misc ============

class Message(CamelModel):
    message: str


class HealthStatus(CamelModel):
    status: str
    database: str

"""
Entity access: one repository per table family.

Each repository wraps the request's SQLAlchemy session. SQLAlchemy errors
propagate unchanged; routers decide how to report them.
"""
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from fastapi import Depends
from sqlalchemy import desc, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from . import models
from .database import get_db
from .schemas import PlanData

# INSERT ... ON CONFLICT DO UPDATE constructs, per backend
UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert_insert(db: Session, model):
    """Dialect ``insert()`` for ``model`` that supports ``on_conflict_do_update``."""
    dialect = db.get_bind().dialect.name
    try:
        return UPSERT_INSERTS[dialect](model)
    except KeyError:
        raise NotImplementedError(f"Upsert is not supported on {dialect}")


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.email == email).first()

    def find_by_id(self, user_id: int) -> Optional[models.User]:
        return self.db.query(models.User).filter(models.User.id == user_id).first()

    def create(self, name: str, email: str, password_hash: str) -> models.User:
        user = models.User(name=name, email=email, password_hash=password_hash)
        self.db.add(user)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(user)
        return user


class WorkoutLogRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: int, date: date, exercises: Iterable[Dict[str, Any]]) -> models.WorkoutLog:
        """
        Insert a workout log and its exercises as one unit.

        The parent row is flushed first to get its id, then one child row per
        exercise. Any failure rolls the whole unit back and re-raises.
        """
        log = models.WorkoutLog(user_id=user_id, date=date)
        try:
            self.db.add(log)
            self.db.flush()

            for exercise in exercises:
                sets = exercise.get("sets")
                reps = exercise.get("reps")
                self.db.add(models.WorkoutExercise(
                    workout_log_id=log.id,
                    name=exercise.get("name"),
                    sets=sets if sets is not None else 1,
                    reps=reps if reps is not None else 1,
                    weight=exercise.get("weight"),
                    rpe=exercise.get("rpe"),
                ))
            self.db.flush()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        self.db.refresh(log)
        return log

    def find_by_user(self, user_id: int) -> List[models.WorkoutLog]:
        return (
            self.db.query(models.WorkoutLog)
            .options(selectinload(models.WorkoutLog.exercises))
            .filter(models.WorkoutLog.user_id == user_id)
            .order_by(desc(models.WorkoutLog.date), desc(models.WorkoutLog.id))
            .all()
        )

    def find_by_id(self, log_id: int) -> Optional[models.WorkoutLog]:
        return (
            self.db.query(models.WorkoutLog)
            .options(selectinload(models.WorkoutLog.exercises))
            .filter(models.WorkoutLog.id == log_id)
            .first()
        )

    def delete(self, log_id: int) -> bool:
        log = self.db.query(models.WorkoutLog).filter(models.WorkoutLog.id == log_id).first()
        if not log:
            return False
        try:
            # exercises go with it through the delete-orphan cascade
            self.db.delete(log)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return True


class WeightRepository:
    def __init__(self, db: Session):
        self.db = db

    def upsert(self, user_id: int, weight: float, date: date) -> models.WeightEntry:
        """
        Insert the entry, or overwrite the weight already logged for that date.

        A single INSERT ... ON CONFLICT statement, so two first writes for the
        same date cannot both insert.
        """
        stmt = upsert_insert(self.db, models.WeightEntry).values(
            user_id=user_id, weight=weight, date=date
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "date"],
            set_={"weight": stmt.excluded.weight},
        )
        try:
            self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        return self.db.query(models.WeightEntry).filter(
            models.WeightEntry.user_id == user_id,
            models.WeightEntry.date == date
        ).one()

    def find_by_user(self, user_id: int) -> List[models.WeightEntry]:
        return (
            self.db.query(models.WeightEntry)
            .filter(models.WeightEntry.user_id == user_id)
            .order_by(models.WeightEntry.date)
            .all()
        )

    def find_by_user_in_range(
        self,
        user_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[models.WeightEntry]:
        query = self.db.query(models.WeightEntry).filter(models.WeightEntry.user_id == user_id)
        if start_date:
            query = query.filter(models.WeightEntry.date >= start_date)
        if end_date:
            query = query.filter(models.WeightEntry.date <= end_date)
        return query.order_by(models.WeightEntry.date).all()

    def delete(self, entry_id: int) -> bool:
        try:
            deleted = self.db.query(models.WeightEntry).filter(models.WeightEntry.id == entry_id).delete()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return deleted > 0


class NutritionRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        user_id: int,
        meal: str,
        date: date,
        calories: Optional[float] = None,
        protein: Optional[float] = None,
        carbs: Optional[float] = None,
        fat: Optional[float] = None,
    ) -> models.NutritionEntry:
        entry = models.NutritionEntry(
            user_id=user_id,
            meal=meal,
            calories=calories or 0,
            protein=protein or 0,
            carbs=carbs or 0,
            fat=fat or 0,
            date=date,
        )
        self.db.add(entry)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(entry)
        return entry

    def find_by_user(self, user_id: int) -> List[models.NutritionEntry]:
        return (
            self.db.query(models.NutritionEntry)
            .filter(models.NutritionEntry.user_id == user_id)
            .order_by(desc(models.NutritionEntry.date), desc(models.NutritionEntry.created_at), desc(models.NutritionEntry.id))
            .all()
        )

    def find_by_user_and_date(self, user_id: int, date: date) -> List[models.NutritionEntry]:
        return (
            self.db.query(models.NutritionEntry)
            .filter(models.NutritionEntry.user_id == user_id, models.NutritionEntry.date == date)
            .order_by(desc(models.NutritionEntry.created_at), desc(models.NutritionEntry.id))
            .all()
        )

    def daily_totals(self, user_id: int, start_date: date, end_date: date) -> List[Dict[str, Any]]:
        """Per-date macro sums between two dates (inclusive), newest first."""
        rows = (
            self.db.query(
                models.NutritionEntry.date,
                func.sum(models.NutritionEntry.calories).label("total_calories"),
                func.sum(models.NutritionEntry.protein).label("total_protein"),
                func.sum(models.NutritionEntry.carbs).label("total_carbs"),
                func.sum(models.NutritionEntry.fat).label("total_fat"),
            )
            .filter(
                models.NutritionEntry.user_id == user_id,
                models.NutritionEntry.date >= start_date,
                models.NutritionEntry.date <= end_date,
            )
            .group_by(models.NutritionEntry.date)
            .order_by(desc(models.NutritionEntry.date))
            .all()
        )
        return [
            {
                "date": r.date,
                "total_calories": float(r.total_calories or 0),
                "total_protein": float(r.total_protein or 0),
                "total_carbs": float(r.total_carbs or 0),
                "total_fat": float(r.total_fat or 0),
            }
            for r in rows
        ]

    def delete(self, entry_id: int) -> bool:
        try:
            deleted = self.db.query(models.NutritionEntry).filter(models.NutritionEntry.id == entry_id).delete()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return deleted > 0


class WorkoutPlanRepository:
    def __init__(self, db: Session):
        self.db = db

    def upsert(self, user_id: int, goal: str, experience: str, plan: PlanData) -> models.WorkoutPlan:
        """Store the plan as the user's only plan, replacing any previous one."""
        stmt = upsert_insert(self.db, models.WorkoutPlan).values(
            user_id=user_id,
            goal=goal,
            experience=experience,
            plan_data=plan.model_dump(mode="json"),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={
                "goal": stmt.excluded.goal,
                "experience": stmt.excluded.experience,
                "plan_data": stmt.excluded.plan_data,
                "updated_at": func.now(),
            },
        )
        try:
            self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        return self.db.query(models.WorkoutPlan).filter(models.WorkoutPlan.user_id == user_id).one()

    def find_by_user(self, user_id: int) -> Optional[models.WorkoutPlan]:
        return self.db.query(models.WorkoutPlan).filter(models.WorkoutPlan.user_id == user_id).first()

    def delete(self, plan_id: int) -> bool:
        try:
            deleted = self.db.query(models.WorkoutPlan).filter(models.WorkoutPlan.id == plan_id).delete()
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return deleted > 0


# ---------- FastAPI dependency providers ----------

def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_workout_log_repository(db: Session = Depends(get_db)) -> WorkoutLogRepository:
    return WorkoutLogRepository(db)


def get_weight_repository(db: Session = Depends(get_db)) -> WeightRepository:
    return WeightRepository(db)


def get_nutrition_repository(db: Session = Depends(get_db)) -> NutritionRepository:
    return NutritionRepository(db)


def get_workout_plan_repository(db: Session = Depends(get_db)) -> WorkoutPlanRepository:
    return WorkoutPlanRepository(db)

"""
SQLAlchemy models for the fitness tracker tables.
"""
from sqlalchemy import Column, Integer, String, Float, Date, ForeignKey, DateTime, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .database import Base


class User(Base):
    """User model matching the 'users' table."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    workout_logs = relationship("WorkoutLog", back_populates="user", cascade="all, delete-orphan")
    weight_entries = relationship("WeightEntry", back_populates="user", cascade="all, delete-orphan")
    nutrition_entries = relationship("NutritionEntry", back_populates="user", cascade="all, delete-orphan")
    workout_plan = relationship("WorkoutPlan", back_populates="user", uselist=False, cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"


class WorkoutLog(Base):
    """A completed workout session; owns its exercise rows."""
    __tablename__ = "workout_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="workout_logs")
    exercises = relationship(
        "WorkoutExercise",
        back_populates="workout_log",
        cascade="all, delete-orphan",
        order_by="WorkoutExercise.id",
    )

    def __repr__(self):
        return f"<WorkoutLog(id={self.id}, user_id={self.user_id}, date={self.date})>"


class WorkoutExercise(Base):
    """One exercise line of a workout log."""
    __tablename__ = "workout_exercises"

    id = Column(Integer, primary_key=True, index=True)
    workout_log_id = Column(Integer, ForeignKey("workout_logs.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column("exercise_name", String(255), nullable=False)
    sets = Column(Integer, nullable=False, default=1)
    reps = Column(Integer, nullable=False, default=1)
    weight = Column(Float)  # optional, kg
    rpe = Column(Float)  # optional, 1-10

    # Relationships
    workout_log = relationship("WorkoutLog", back_populates="exercises")

    def __repr__(self):
        return f"<WorkoutExercise(id={self.id}, name={self.name})>"


class WeightEntry(Base):
    """Body weight measurement, at most one per user and date."""
    __tablename__ = "weight_entries"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_weight_entries_user_date"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    weight = Column(Float, nullable=False)  # in kg
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="weight_entries")

    def __repr__(self):
        return f"<WeightEntry(id={self.id}, user_id={self.user_id}, weight={self.weight})>"


class NutritionEntry(Base):
    """Nutrition entry matching the 'nutrition_entries' table."""
    __tablename__ = "nutrition_entries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    meal = Column(String(255), nullable=False)
    calories = Column(Float, nullable=False, default=0)
    protein = Column(Float, nullable=False, default=0)  # grams
    carbs = Column(Float, nullable=False, default=0)  # grams
    fat = Column(Float, nullable=False, default=0)  # grams
    date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="nutrition_entries")

    def __repr__(self):
        return f"<NutritionEntry(id={self.id}, user_id={self.user_id}, meal={self.meal})>"


class WorkoutPlan(Base):
    """Latest generated plan of a user; plan_data holds a serialized plan variant."""
    __tablename__ = "workout_plans"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    goal = Column(String(100), nullable=False)
    experience = Column(String(50), nullable=False)
    plan_data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="workout_plan")

    def __repr__(self):
        return f"<WorkoutPlan(id={self.id}, user_id={self.user_id}, goal={self.goal})>"

from __future__ import annotations
import logging
from typing import Any, Optional

from openai import OpenAI

from ..config import settings
from ..errors import ExternalServiceError
from ..schemas import AIPlan, PlanData, PlanDay, StaticPlan

logger = logging.getLogger(__name__)

DEFAULT_GOAL = "general fitness"
DEFAULT_EXPERIENCE = "beginner"

SYSTEM_PROMPT = "You are a helpful fitness coach."

STATIC_WEEK = [
    PlanDay(day="Monday", focus="Full body circuit (3 rounds)", exercises=[
        "Squats: 15 reps",
        "Push-ups: 12 reps",
        "Lunges: 10 reps per leg",
        "Plank: 30 seconds",
    ]),
    PlanDay(day="Tuesday", focus="Rest or light cardio 20-30 minutes"),
    PlanDay(day="Wednesday", focus="Upper body", exercises=[
        "Dumbbell bench press: 3x12",
        "Bent-over row: 3x12",
        "Shoulder press: 3x12",
        "Bicep curls: 3x15",
    ]),
    PlanDay(day="Thursday", focus="Rest"),
    PlanDay(day="Friday", focus="Lower body", exercises=[
        "Deadlift: 3x10",
        "Bulgarian split squats: 3x12 per leg",
        "Leg curls: 3x15",
        "Calf raises: 3x20",
    ]),
    PlanDay(day="Saturday", focus="Core & conditioning", exercises=[
        "Mountain climbers: 3x30 seconds",
        "Russian twists: 3x20",
        "Bicycle crunches: 3x20",
        "Jump rope or brisk walk: 15 minutes",
    ]),
    PlanDay(day="Sunday", focus="Rest or active recovery (yoga, stretching)"),
]


def render_days(days: list[PlanDay]) -> str:
    blocks = []
    for d in days:
        lines = [f"{d.day}: {d.focus}"]
        lines.extend(f"  - {e}" for e in d.exercises)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def static_plan() -> StaticPlan:
    return StaticPlan(content=render_days(STATIC_WEEK), days=list(STATIC_WEEK))


def build_prompt(goal: str, experience: str) -> str:
    return (
        f"You are an AI personal trainer. Create a one-week workout plan for a {experience} "
        f"user whose goal is {goal}. List each day with exercises, sets, reps and rest intervals."
    )


class PlanGenerator:
    """Asks the completion service for a weekly plan; falls back to the static week."""

    def __init__(self, client: Optional[Any] = None, model: Optional[str] = None):
        self.model = model or (settings.model_id or "gpt-4o")
        if client is None and settings.openai_api_key:
            client = OpenAI(api_key=settings.openai_api_key)
        self.client = client

    def _complete(self, goal: str, experience: str) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(goal, experience)},
                ],
                temperature=0.7,
            )
            text = response.choices[0].message.content
        except Exception as e:
            raise ExternalServiceError(f"Completion request failed: {e}") from e
        if not text or not text.strip():
            raise ExternalServiceError("Completion returned no content")
        return text.strip()

    def generate(self, goal: str = DEFAULT_GOAL, experience: str = DEFAULT_EXPERIENCE) -> PlanData:
        if self.client is None:
            logger.info("No OpenAI API key configured, serving static plan")
            return static_plan()
        try:
            return AIPlan(content=self._complete(goal, experience))
        except ExternalServiceError as e:
            logger.warning(f"Plan generation failed, falling back to static plan: {e.message}")
            return static_plan()


def generate_plan(goal: str = DEFAULT_GOAL, experience: str = DEFAULT_EXPERIENCE, client: Optional[Any] = None) -> PlanData:
    """One attempt at an AI plan, static plan otherwise. Never raises for provider failures."""
    return PlanGenerator(client=client).generate(goal, experience)


def get_plan_generator() -> PlanGenerator:
    return PlanGenerator()

"""
LLM-backed workout plan generation.

- PlanGenerator: one chat completion request per plan, no retries
- Static fallback: a fixed 7-day plan served when no API key is set or the call fails
"""

"""Services module."""

from .ai_planner import MenuPlanner
from .gemini import GeminiClient
from .retry import RetryPolicy, call_with_retry
from .session import PlannerSession

__all__ = ["MenuPlanner", "GeminiClient", "RetryPolicy", "call_with_retry", "PlannerSession"]

"""Menu Planner: AI family meal plans, recipe details and shopping lists."""

__version__ = "1.0.0"

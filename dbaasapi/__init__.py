"""Models, admission checks and policy helpers for database-as-a-service resources."""

__version__ = "0.6.0"

__all__ = ["constants", "meta", "models", "reconciler", "webhooks"]
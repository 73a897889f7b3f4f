"""Queue, submission and review business logic."""

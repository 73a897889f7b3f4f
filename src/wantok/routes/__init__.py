"""HTTP routes exposing the queue and review workflow."""

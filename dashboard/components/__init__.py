"""Dashboard view components."""

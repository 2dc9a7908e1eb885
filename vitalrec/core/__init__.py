"""Core models and error types shared across vitalrec."""

"""Core configuration, logging, models and exceptions for sesctl."""

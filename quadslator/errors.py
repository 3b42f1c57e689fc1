#!/usr/bin/env python3
# ABOUTME: Exception hierarchy shared by the clients, preset store and workflow.
# ABOUTME: Every error is caught at an operation boundary and shown to the user.


class QuadslatorError(Exception):
    """Base class for all Quadslator errors."""


class ValidationError(QuadslatorError):
    """A required field was empty or otherwise invalid."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class GenerationError(QuadslatorError):
    """The generation service failed or returned non-conforming data."""


class StorageReadError(QuadslatorError):
    """Persisted presets could not be read or were corrupt."""


class StorageWriteError(QuadslatorError):
    """Presets could not be written to persistent storage."""

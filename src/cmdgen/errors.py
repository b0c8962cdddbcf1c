"""Application-level exception types for cmdgen."""

from __future__ import annotations


class CmdgenError(Exception):
    """Base exception for cmdgen."""


class ConfigurationError(CmdgenError):
    """Base exception for configuration and startup validation errors."""


class ModelNotConfiguredError(ConfigurationError):
    """Raised when model configuration is missing."""


class InvalidModelFormatError(ConfigurationError):
    """Raised when model format is not provider:model."""


class ApiKeyNotConfiguredError(ConfigurationError):
    """Raised when an API key is required but missing."""


class GenerationError(CmdgenError):
    """Raised when the generation backend fails or returns unusable output."""


class ValidationEngineError(CmdgenError):
    """Raised when a validation check cannot run (spawn or temp-file failure)."""


class ClarificationError(CmdgenError):
    """Base exception for clarification protocol violations."""


class DuplicateQuestionError(ClarificationError):
    """Raised when the model repeats a clarification question."""


class QuestionBudgetExceededError(ClarificationError):
    """Raised when the model asks more clarification questions than allowed."""


class ClarificationUnavailableError(ClarificationError):
    """Raised when the model asks a question but nobody can answer it."""


class ClarificationAbortedError(ClarificationError):
    """Raised when the user aborts a clarification prompt."""


class AttemptsExhaustedError(CmdgenError):
    """Raised when no valid command was produced within the attempt budget."""


class SessionError(CmdgenError):
    """Base exception for session persistence errors."""


class SessionNotFoundError(SessionError):
    """Raised when a session file does not exist."""


class SessionStoreError(SessionError):
    """Raised when a session file cannot be read or written."""


class ClipboardError(CmdgenError):
    """Raised when the generated command cannot be copied."""


class ModelCatalogError(CmdgenError):
    """Raised when the model list cannot be fetched or the model cache cannot be read or written."""

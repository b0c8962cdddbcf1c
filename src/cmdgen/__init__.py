"""cmdgen - natural language to one validated shell command."""

from .engine import HandleResult, RequestEngine
from .postprocess import PostProcessPipeline, default_post_processor
from .validation import ShellCommandValidator, ValidationReport, validate_command

__version__ = "0.1.0"

__all__ = [
    "HandleResult",
    "PostProcessPipeline",
    "RequestEngine",
    "ShellCommandValidator",
    "ValidationReport",
    "default_post_processor",
    "validate_command",
]

"""Domain models for the spreadsheet -> PDF batch filler.

This package contains the dataclasses passed between the reader, the
template engine, the services and the CLI.
"""

from .config_models import FillerConfig
from .error_record import ErrorRecord
from .generation_result import GenerationResult
from .record import Record

__all__ = [
    # Configuration models
    "FillerConfig",
    # Processing models
    "Record",
    "ErrorRecord",
    "GenerationResult",
]

"""Validation of loosely typed configuration into a PipelineRequest."""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from .exceptions import InvalidParameterError
from .models import PipelineRequest


def _field_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "config"


def parse_request(config: Any) -> PipelineRequest:
    """
    Validate a configuration mapping into a PipelineRequest in one step.

    Keys follow the configuration object of the original host API
    (``format``, ``crop``, ``size``, ``watermark``, ``output_format``,
    ``quality``); the request's own field names are accepted as well.
    Geometry fields are required, never defaulted to zero.

    Args:
        config: Mapping, typically decoded from JSON

    Returns:
        Validated, immutable PipelineRequest

    Raises:
        InvalidParameterError: On the first invalid or missing field
    """
    if isinstance(config, PipelineRequest):
        return config
    if not isinstance(config, Mapping):
        raise InvalidParameterError(
            "config", f"must be an object, got {type(config).__name__}"
        )

    try:
        return PipelineRequest.model_validate(dict(config))
    except ValidationError as exc:
        first = exc.errors()[0]
        raise InvalidParameterError(_field_path(first["loc"]), first["msg"]) from exc


def read_config(path: Union[str, Path]) -> dict:
    """Read a JSON configuration object from disk without validating it."""
    try:
        config = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise InvalidParameterError("config", f"cannot read {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise InvalidParameterError("config", f"invalid JSON in {path}: {exc}") from exc

    if not isinstance(config, dict):
        raise InvalidParameterError(
            "config", f"must be a JSON object, got {type(config).__name__}"
        )
    return config


def load_request(path: Union[str, Path]) -> PipelineRequest:
    """Read a JSON configuration file and validate it."""
    return parse_request(read_config(path))

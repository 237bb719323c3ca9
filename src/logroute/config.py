"""
Pydantic configuration schemas for the dispatcher.

A configuration file lists the loggers to register, each with its options,
priority filter and categories:

    loggers:
      - options: {logger: formattedtext, text_file: deprecated.log}
        priorities: [WARNING, NOTICE]
        categories: [deprecated]
      - options: {logger: echo}
        priorities: ALL

Usage:
    config = DispatchConfig.from_yaml("logging.yaml")
    Dispatcher.instance().configure(config)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator

from logroute.keys import fingerprint
from logroute.records import Priority


class LoggerSpec(BaseModel):
    """One logger registration."""
    options: dict[str, Any] = Field(default_factory=dict)
    priorities: Union[int, str, list[Union[int, str]]] = "ALL"
    categories: Optional[Union[str, list[str]]] = None

    @field_validator("priorities")
    @classmethod
    def validate_priorities(cls, v):
        Priority.from_value(v)  # Raises ValueError on unknown names
        return v

    @property
    def priority_mask(self) -> Priority:
        return Priority.from_value(self.priorities)

    @property
    def fingerprint(self) -> str:
        return fingerprint(self.options)


class DispatchConfig(BaseModel):
    loggers: list[LoggerSpec] = Field(default_factory=list)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "DispatchConfig":
        """Load and validate from a YAML file."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.from_yaml_string(raw)

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "DispatchConfig":
        """Load and validate from a YAML string. An empty document is an empty config."""
        data = yaml.safe_load(yaml_string) or {}
        return cls.model_validate(data)

    @classmethod
    def from_dict(cls, data: dict) -> "DispatchConfig":
        return cls.model_validate(data)

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)

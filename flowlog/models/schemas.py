from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict


LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARN", "ERROR"]

LOG_LEVELS: frozenset[str] = frozenset({"TRACE", "DEBUG", "INFO", "WARN", "ERROR"})


class LocationInfo(BaseModel):
    """Where in the pipeline an event originated.

    Only the container name is required; dynamically built flows have no
    file or line.
    """

    model_config = ConfigDict(frozen=True)

    container_name: str
    file_name: str | None = None
    line_number: int | None = None

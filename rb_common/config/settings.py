"""Runtime settings for view sessions and hosts."""

from __future__ import annotations

import os
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from rb_common.config.env import parse_bool_env, parse_int_env
from rb_common.errors import ConfigurationError, wrap_error

_ENV_PREFIX = "RB_"


class BrowserSettings(BaseModel):
    """Tunables shared by the view session, renderers and hosts."""

    model_config = ConfigDict(extra="ignore")

    max_depth: int = Field(
        default=64, ge=1, description="Deepest schema nesting rendered before a node is marked unrenderable"
    )
    auto_select: bool = Field(
        default=True, description="Request details for the preselected option on init"
    )
    track_requests: bool = Field(
        default=True, description="Attach request tokens to select intents and drop stale responses"
    )
    all_scopes_label: str = Field(default="All Namespaces", min_length=1)
    prune_empty_columns: bool = Field(
        default=True, description="Drop result columns that are empty in every row"
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BrowserSettings":
        """Build settings from ``RB_*`` environment variables.

        Unset variables keep their defaults; values that fail to parse raise
        ConfigurationError.
        """
        env = os.environ if environ is None else environ
        data: dict[str, Any] = {}
        raw_depth = env.get(f"{_ENV_PREFIX}MAX_DEPTH")
        if raw_depth is not None:
            depth = parse_int_env(raw_depth)
            if depth is None:
                raise ConfigurationError(
                    "RB_MAX_DEPTH must be an integer", context={"value": raw_depth}
                )
            data["max_depth"] = depth
        for field_name in ("auto_select", "track_requests", "prune_empty_columns"):
            flag = parse_bool_env(env.get(f"{_ENV_PREFIX}{field_name.upper()}"))
            if flag is not None:
                data[field_name] = flag
        label = env.get(f"{_ENV_PREFIX}ALL_SCOPES_LABEL")
        if label is not None:
            data["all_scopes_label"] = label
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise wrap_error(
                ConfigurationError, "Invalid browser settings", context={"values": data}, cause=exc
            ) from exc

"""
Settings model produced by the configuration phase.

Pure-data fields stay validated; `hooks` may carry live objects (Hook
instances or classes), so arbitrary types are allowed. Unknown keys are kept
(`extra="allow"`) because hooks read their own sections from the settings.
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReadinessSettings(BaseModel):
    poll_interval_ms: float = Field(default=150, gt=0, description="Polling interval for hooks without a ready latch")
    timeout_ms: float = Field(default=10_000, gt=0, description="Watchdog: maximum wait for every hook to become ready")
    initialize_timeout_ms: Optional[float] = Field(default=None, gt=0, description="Optional cap on a single hook's initialize()")

    model_config = ConfigDict(extra="forbid")


class LoaderSettings(BaseModel):
    env: str = "default"
    hooks: Union[Dict[str, Any], bool] = Field(default_factory=dict, description="identity -> definition, or False to skip hook loading")
    load_hooks: Optional[Any] = Field(default=None, alias="loadHooks", description="Allow-list of hook identities")
    host: Optional[str] = None
    explicit_host: Optional[str] = Field(default=None, alias="explicitHost")
    port: int = 1337
    routes: Dict[str, str] = Field(default_factory=dict, description="route -> 'identity.handler'")
    globals: Dict[str, bool] = Field(default_factory=dict, description="names to expose on builtins once loaded")
    readiness: ReadinessSettings = Field(default_factory=ReadinessSettings)
    log_level: Optional[str] = None

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    @field_validator("hooks")
    @classmethod
    def _hooks_true_means_defaults(cls, v: Union[Dict[str, Any], bool]) -> Union[Dict[str, Any], bool]:
        if v is True:
            return {}
        return v

    @property
    def hooks_enabled(self) -> bool:
        return self.hooks is not False

    @property
    def hook_overrides(self) -> Dict[str, Any]:
        return self.hooks if isinstance(self.hooks, dict) else {}

# ui_query/utils/config.py
from __future__ import annotations

import functools
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ui_query.core.poller import ElementPoller, PollerKind


# ---------- Enums ----------

class BrowserType(str, Enum):
    chromium = "chromium"
    firefox = "firefox"
    webkit = "webkit"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# ---------- Settings ----------

class Settings(BaseSettings):
    """
    Central configuration for UI Query.

    Values load in this order of precedence:
      1) Environment variables
      2) .env file in project root
      3) Defaults below
    """

    # ---- Polling defaults (inherited by every session / query / waiter) ----
    POLLER: PollerKind = Field(default=PollerKind.no_wait, description="Default polling strategy")
    POLL_TIMEOUT_MS: int = Field(default=20000, ge=0)
    POLL_INTERVAL_MS: int = Field(default=500, ge=0)
    POLL_MAX_ATTEMPTS: int = Field(default=0, ge=0)
    IGNORE_ERRORS: bool = Field(default=True, description="Treat remote errors as 'not yet satisfied'")

    # ---- Browser configuration (CLI only) ----
    HEADLESS: bool = Field(default=True, description="Run the browser headless")
    BROWSER_TYPE: BrowserType = Field(default=BrowserType.chromium, description="Playwright browser")
    VIEWPORT_WIDTH: int = Field(default=1366, ge=320, le=7680)
    VIEWPORT_HEIGHT: int = Field(default=768, ge=320, le=4320)
    SLOW_MO: int = Field(default=0, ge=0, description="Slow down actions (ms) for debugging")
    USER_AGENT: Optional[str] = Field(default=None)
    PAGE_LOAD_TIMEOUT: int = Field(default=60000, ge=1000)

    # ---- Logging ----
    LOG_LEVEL: LogLevel = Field(default=LogLevel.INFO)
    LOG_TO_FILE: bool = Field(default=False)
    LOG_FILE: Path = Field(default=Path("./ui-query.log"))
    COLORIZED_OUTPUT: bool = Field(default=True)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # ignore unknown envs to keep things flexible
    )

    @field_validator("LOG_FILE", mode="after")
    @classmethod
    def _absolutize_log_file(cls, v: Path):
        return v if v.is_absolute() else Path.cwd() / v

    def default_poller(self) -> ElementPoller:
        """Build the ElementPoller described by the POLL_* fields."""
        if self.POLLER == PollerKind.fixed_count:
            return ElementPoller.fixed_count(self.POLL_INTERVAL_MS, self.POLL_MAX_ATTEMPTS)
        if self.POLLER == PollerKind.timeout_with_interval:
            return ElementPoller.timeout_with_interval(self.POLL_TIMEOUT_MS, self.POLL_INTERVAL_MS)
        return ElementPoller.no_wait()

    # Convenience: Playwright launch options dict
    def playwright_launch_kwargs(self) -> dict:
        return {
            "headless": self.HEADLESS,
            "slow_mo": self.SLOW_MO,
        }

    # Convenience: Playwright new_context kwargs
    def playwright_context_kwargs(self) -> dict:
        ctx = {"viewport": {"width": self.VIEWPORT_WIDTH, "height": self.VIEWPORT_HEIGHT}}
        if self.USER_AGENT:
            ctx["user_agent"] = self.USER_AGENT
        return ctx


# --------- Public accessor (memoized) ---------

@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Load and cache settings once per process.
    Call `get_settings.cache_clear()` if you need to reload after changing env.
    """
    return Settings()


# --------- Explicit wait configuration handed to sessions / queries / waiters ---------

class WaitConfig(BaseModel):
    """Default polling strategy and error tolerance inherited by waits and queries."""

    model_config = ConfigDict(frozen=True)

    poller: ElementPoller = Field(default_factory=ElementPoller.no_wait)
    ignore_errors: bool = True

    @classmethod
    def from_settings(cls, s: Settings) -> "WaitConfig":
        return cls(poller=s.default_poller(), ignore_errors=s.IGNORE_ERRORS)

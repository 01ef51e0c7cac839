"""
Suite configuration.

Centralises the target URL, timeouts, browser matrix selection and
runner policy (retries, workers, reports).  Uses
``pydantic_settings.BaseSettings`` for environment variable binding
with the ``MENU_E2E_`` prefix; a ``.env`` file in the working
directory is loaded first.
"""

from __future__ import annotations

import functools
import pathlib
from urllib import parse

import dotenv
import pydantic
import pydantic_settings

from menu_e2e.models.browser import DeviceProfileName
from menu_e2e.utils import logger

log = logger.create_logger("Config")

DEFAULT_BASE_URL = "https://www.greggs.com/menu"


class SuiteSettings(pydantic_settings.BaseSettings):
    """Runtime settings for the end-to-end suite.

    Attributes:
        base_url: Menu page every suite starts from.
        ci: Set from the conventional ``CI`` variable; drives
            retry and worker defaults.
        device_profile: Key into ``DEVICE_CONFIGS``.
        gate_timeout_ms: Total budget for the consent gate.
        storage_state_path: Where ``capture-state`` writes and the
            context initializer reads browser storage.
    """

    model_config = pydantic_settings.SettingsConfigDict(env_prefix="MENU_E2E_", extra="ignore", populate_by_name=True)

    base_url: str = DEFAULT_BASE_URL
    ci: bool = pydantic.Field(default=False, validation_alias="CI")
    headless: bool = True
    live: bool = False
    device_profile: DeviceProfileName = "desktop-chrome"

    action_timeout_ms: int = 10_000
    navigation_timeout_ms: int = 130_000
    test_timeout_s: int = 130
    gate_timeout_ms: int = 10_000
    readiness_timeout_ms: int = 10_000

    retries: int | None = None
    workers: str | None = None

    storage_state_path: pathlib.Path = pathlib.Path("storage-state.json")
    reuse_storage_state: bool = False
    results_dir: pathlib.Path = pathlib.Path("test-results")

    @pydantic.field_validator("base_url")
    @classmethod
    def _require_absolute_url(cls, value: str) -> str:
        parsed = parse.urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"base_url must be an absolute http(s) URL, got {value!r}")
        return value

    @property
    def site_root(self) -> str:
        """Scheme and host of :attr:`base_url`, e.g. ``https://www.greggs.com``."""
        parsed = parse.urlparse(self.base_url)
        return f"{parsed.scheme}://{parsed.netloc}"

    @property
    def cookie_domain(self) -> str:
        """Cookie domain for the site, e.g. ``.greggs.com``."""
        host = parse.urlparse(self.base_url).hostname or ""
        return "." + host.removeprefix("www.")

    @property
    def effective_retries(self) -> int:
        """Whole-test re-executions: 2 in CI, 0 locally unless overridden."""
        if self.retries is not None:
            return self.retries
        return 2 if self.ci else 0

    @property
    def effective_workers(self) -> str:
        """xdist worker count: 1 in CI, ``auto`` locally unless overridden."""
        if self.workers:
            return self.workers
        return "1" if self.ci else "auto"

    def storage_state_for_context(self) -> str | None:
        """Return the storage-state path to load, or ``None``.

        The snapshot is only used when reuse is enabled and a previous
        ``capture-state`` run actually produced the file.
        """
        if not self.reuse_storage_state:
            return None
        if not self.storage_state_path.is_file():
            log.debug("Storage state reuse enabled but file missing", {"path": str(self.storage_state_path)})
            return None
        return str(self.storage_state_path)


@functools.lru_cache(maxsize=1)
def get_settings() -> SuiteSettings:
    """Load settings once per process (``.env`` first, then the environment)."""
    dotenv.load_dotenv()
    settings = SuiteSettings()
    log.debug(
        "Settings loaded",
        {"baseUrl": settings.base_url, "ci": settings.ci, "profile": settings.device_profile},
    )
    return settings

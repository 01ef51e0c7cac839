"""
Command-line entry point.

``menu-e2e run`` executes the browser suites once per selected device
profile, each in its own pytest process writing its reports under
``<results_dir>/<profile>/``.  ``menu-e2e capture-state`` records a
consent-answered storage snapshot for later runs to reuse.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import pathlib
import subprocess
import sys
from collections.abc import Sequence

from menu_e2e import config
from menu_e2e.browser import device_configs
from menu_e2e.consent import storage_state
from menu_e2e.utils import logger

log = logger.create_logger("Runner")

REPORT_FORMATS = ("html", "json", "junit")
DEFAULT_TEST_PATH = "tests/e2e"

# CLI option -> settings environment variable.
_ENV_OVERRIDES = {
    "action_timeout": "MENU_E2E_ACTION_TIMEOUT_MS",
    "navigation_timeout": "MENU_E2E_NAVIGATION_TIMEOUT_MS",
    "gate_timeout": "MENU_E2E_GATE_TIMEOUT_MS",
    "base_url": "MENU_E2E_BASE_URL",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="menu-e2e", description="End-to-end browser tests for the online menu")
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Run the browser suites")
    run.add_argument(
        "--profile",
        action="append",
        choices=[*device_configs.DEVICE_CONFIGS, "all"],
        help="Device profile to run (repeatable; 'all' runs the whole matrix)",
    )
    run.add_argument("--workers", help="Parallel workers (an integer, or 'auto')")
    run.add_argument("--retries", type=int, help="Re-executions of a failing test")
    run.add_argument("--timeout", type=int, help="Per-test timeout in seconds")
    run.add_argument("--action-timeout", type=int, help="Default action timeout in ms")
    run.add_argument("--navigation-timeout", type=int, help="Default navigation timeout in ms")
    run.add_argument("--gate-timeout", type=int, help="Consent gate budget in ms")
    run.add_argument("--base-url", help="Menu URL to test against")
    run.add_argument(
        "--report",
        action="append",
        choices=REPORT_FORMATS,
        help="Report format to write (repeatable; default: all)",
    )
    run.add_argument("--live", action="store_true", help="Include suites that hit the live site")
    run.add_argument("--headed", action="store_true", help="Show the browser window")
    run.add_argument("-k", dest="keyword", help="Only run tests matching this expression")

    capture = subparsers.add_parser("capture-state", help="Save a storage-state snapshot with consent answered")
    capture.add_argument("--profile", default="desktop-chrome", choices=list(device_configs.DEVICE_CONFIGS))
    capture.add_argument("--output", help="Where to write the snapshot")

    return parser


def selected_profiles(options: argparse.Namespace, settings: config.SuiteSettings) -> list[str]:
    """Profiles to run, in matrix order, without duplicates."""
    requested = options.profile or [settings.device_profile]
    if "all" in requested:
        return list(device_configs.DEVICE_CONFIGS)
    return list(dict.fromkeys(requested))


def build_pytest_args(options: argparse.Namespace, settings: config.SuiteSettings, profile: str) -> list[str]:
    """Translate CLI options into one pytest invocation for *profile*."""
    out_dir = settings.results_dir / profile
    reports = options.report or list(REPORT_FORMATS)

    args = [DEFAULT_TEST_PATH, f"--device-profile={profile}"]

    workers = options.workers or settings.effective_workers
    if workers not in ("0", "1"):
        args += ["-n", workers]

    retries = settings.effective_retries if options.retries is None else options.retries
    if retries > 0:
        args.append(f"--reruns={retries}")

    args.append(f"--timeout={options.timeout or settings.test_timeout_s}")

    if "html" in reports:
        args += [f"--html={out_dir / 'report.html'}", "--self-contained-html"]
    if "json" in reports:
        args += ["--json-report", f"--json-report-file={out_dir / 'results.json'}"]
    if "junit" in reports:
        args.append(f"--junitxml={out_dir / 'junit.xml'}")

    if options.live or settings.live:
        args.append("--live")
    if options.keyword:
        args += ["-k", options.keyword]

    extra = [a for a in getattr(options, "pytest_args", None) or [] if a != "--"]
    return args + extra


def env_overrides(options: argparse.Namespace) -> dict[str, str]:
    """Settings that must reach the test processes through the environment."""
    env = {var: str(getattr(options, opt)) for opt, var in _ENV_OVERRIDES.items() if getattr(options, opt, None) is not None}
    if getattr(options, "headed", False):
        env["MENU_E2E_HEADLESS"] = "false"
    return env


def _run(options: argparse.Namespace) -> int:
    overrides = env_overrides(options)
    os.environ.update(overrides)
    config.get_settings.cache_clear()
    settings = config.get_settings()

    profiles = selected_profiles(options, settings)
    log.section(f"Running {len(profiles)} profile(s)")

    worst = 0
    for profile in profiles:
        log.subsection(profile)
        args = build_pytest_args(options, settings, profile)
        log.debug("pytest arguments", {"args": " ".join(args)})
        log.start_timer(profile)
        # Fresh interpreter per profile.
        code = subprocess.run([sys.executable, "-m", "pytest", *args], check=False).returncode
        elapsed = log.end_timer(profile, f"{profile} finished")
        if code == 0:
            log.success("Profile passed", {"profile": profile, "ms": int(elapsed)})
        else:
            log.error("Profile failed", {"profile": profile, "exitCode": code})
        worst = max(worst, code)
    return worst


def _capture_state(options: argparse.Namespace) -> int:
    settings = config.get_settings()
    if options.output:
        settings = settings.model_copy(update={"storage_state_path": pathlib.Path(options.output)})
    path = asyncio.run(storage_state.capture_storage_state(settings, options.profile))
    return 0 if path else 1


def parse_options(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse *argv*; unrecognised arguments of ``run`` are handed to pytest."""
    parser = build_parser()
    options, extra = parser.parse_known_args(argv)
    if extra and options.command != "run":
        parser.error(f"unrecognized arguments: {' '.join(extra)}")
    options.pytest_args = extra
    return options


def main(argv: Sequence[str] | None = None) -> int:
    options = parse_options(argv)
    logger.start_log_file(f"menu-e2e-{options.command}")
    try:
        if options.command == "capture-state":
            return _capture_state(options)
        return _run(options)
    except KeyboardInterrupt:
        log.warn("Interrupted")
        return 130
    finally:
        logger.end_log_file()


if __name__ == "__main__":
    sys.exit(main())

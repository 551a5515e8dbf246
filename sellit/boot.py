"""
Environment bootloader.

Used by:
1. Application startup (main.py) -> mode="critical"
2. CI pipelines -> mode="dry-run"
3. Manual smoke checks -> mode="full" (CLI: python -m sellit.boot)
"""

import asyncio
import sys
import time
from dataclasses import dataclass
from enum import Enum

from sellit.config import settings
from sellit.database import Database
from sellit.logger import get_logger

logger = get_logger(__name__)


class BootMode(str, Enum):
    CRITICAL = "critical"  # Static config + DB (fast fail for startup)
    FULL = "full"  # Also reports on optional services such as SMTP
    DRY_RUN = "dry-run"  # Static config check only


@dataclass
class ServiceStatus:
    service: str
    status: str  # 'ok', 'warning', 'error', 'skipped'
    message: str
    duration_ms: float = 0.0


class Bootloader:
    """Handles environment validation and service connectivity checks."""

    @staticmethod
    async def validate(
        mode: BootMode = BootMode.CRITICAL,
        *,
        database: Database | None = None,
        enable_test_utils: bool | None = None,
    ) -> bool:
        """Run validation checks. Returns True if passed, False if failed.

        If mode is CRITICAL, this calls sys.exit(1) on failure.
        """
        logger.info("Bootloader starting validation", mode=mode.value)

        test_utils = settings.enable_test_utils if enable_test_utils is None else enable_test_utils
        if not Bootloader._check_static_config(enable_test_utils=test_utils):
            if mode == BootMode.CRITICAL:
                logger.critical("Static configuration check failed. Refusing to start.")
                sys.exit(1)
            return False

        if mode == BootMode.DRY_RUN:
            logger.info("Dry-run configuration check passed")
            return True

        results = [await Bootloader._check_database(database)]
        if mode == BootMode.FULL:
            results.append(Bootloader._check_smtp())

        passed = True
        for res in results:
            if res.status == "error":
                passed = False
                logger.error(
                    "Service check failed",
                    service=res.service,
                    error=res.message,
                    duration_ms=res.duration_ms,
                )
            elif res.status == "warning":
                logger.warning(
                    "Service check warning",
                    service=res.service,
                    message=res.message,
                    duration_ms=res.duration_ms,
                )
            else:
                logger.info(
                    "Service check passed",
                    service=res.service,
                    duration_ms=res.duration_ms,
                )

        if not passed:
            if mode == BootMode.CRITICAL:
                logger.critical("Critical service checks failed. Application cannot start.")
                sys.exit(1)
            return False

        logger.info("Bootloader validation successful")
        return True

    @staticmethod
    def _check_static_config(*, enable_test_utils: bool) -> bool:
        """Reject configurations that must never reach traffic."""
        if enable_test_utils and settings.is_production:
            logger.error("Test utilities cannot be enabled in production")
            return False
        if not settings.database_url or not settings.secret_key:
            logger.error("DATABASE_URL and SECRET_KEY are required")
            return False
        return True

    @staticmethod
    async def _check_database(database: Database | None = None) -> ServiceStatus:
        """Verify database connectivity (SELECT 1)."""
        start = time.perf_counter()
        owned = database is None
        db = database or Database(settings.database_url)
        try:
            await db.ping()
            duration_ms = (time.perf_counter() - start) * 1000
            return ServiceStatus("database", "ok", "Connection successful", duration_ms)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            return ServiceStatus("database", "error", str(e), duration_ms)
        finally:
            if owned:
                await db.engine.dispose()

    @staticmethod
    def _check_smtp() -> ServiceStatus:
        if not settings.smtp_user or not settings.smtp_pass:
            return ServiceStatus("smtp", "warning", "SMTP credentials not configured; emails will fail")
        return ServiceStatus("smtp", "ok", f"Configured for {settings.smtp_host}:{settings.smtp_port}")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser()
    parser.add_argument("--mode", type=str, default="full", choices=["critical", "full", "dry-run"])
    args = parser.parse_args()

    try:
        success = asyncio.run(Bootloader.validate(BootMode(args.mode)))
    except KeyboardInterrupt:
        sys.exit(130)

    sys.exit(0 if success else 1)

"""
Health checks for liveness and readiness endpoints.
"""
from datetime import datetime, timezone
from typing import Dict, Any
import psutil
from .config import get_settings
from .logging import get_logger
from .rules.actions import ACTION_CONFIG_SCHEMAS
from .rules.models import ACTION_TYPES, COMPARISON_OPERATORS, LOGICAL_OPERATORS, ActionType
from .rules.safety import MAX_SAFE_DEPTH

logger = get_logger()

MIN_AVAILABLE_MEMORY_MB = 50.0


class HealthChecker:
    """
    Health checker for the ruleguard service.

    Readiness means the validators can answer: the operator and action
    vocabularies are complete, the depth settings are usable, and the host
    has memory left for request trees.
    """

    def __init__(self, service_name: str = "ruleguard", version: str = "0.1.0"):
        self.service_name = service_name
        self.version = version

    def _timestamp(self) -> str:
        return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")

    def liveness(self) -> Dict[str, Any]:
        """
        Liveness check - basic health check.

        Returns:
            dict: Health status with service info and timestamp
        """
        return {
            "status": "ok",
            "service": self.service_name,
            "version": self.version,
            "timestamp": self._timestamp(),
        }

    def readiness(self) -> Dict[str, Any]:
        """
        Readiness check.

        Returns:
            dict: "ready" unless some check reports "error", plus each check's details
        """
        checks = {
            "vocabulary": self._check_vocabulary(),
            "settings": self._check_settings(),
            "memory": self._check_memory(),
        }
        failing = [name for name, check in checks.items() if check["status"] == "error"]
        if failing:
            logger.warning("health.not_ready", failing=failing)

        return {
            "status": "not_ready" if failing else "ready",
            "service": self.service_name,
            "version": self.version,
            "timestamp": self._timestamp(),
            "checks": checks,
        }

    def _check_vocabulary(self) -> Dict[str, Any]:
        """Every action type needs a config schema, or its actions could never validate."""
        unschematized = [t.value for t in ActionType if t not in ACTION_CONFIG_SCHEMAS]
        return {
            "status": "error" if unschematized else "ok",
            "comparison_operators": len(COMPARISON_OPERATORS),
            "logical_operators": len(LOGICAL_OPERATORS),
            "action_types": len(ACTION_TYPES),
            "missing_schemas": unschematized,
        }

    def _check_settings(self) -> Dict[str, Any]:
        """
        Validate the depth and size settings.

        A validation depth beyond the safety ceiling is only a warning: the
        safety guard rejects those trees first, so the extra depth is unused.
        """
        settings = get_settings()
        max_depth = settings.CONDITION_MAX_DEPTH

        if max_depth < 0 or settings.MAX_PAYLOAD_SIZE <= 0:
            status = "error"
        elif max_depth > MAX_SAFE_DEPTH:
            status = "warning"
        else:
            status = "ok"

        return {
            "status": status,
            "condition_max_depth": max_depth,
            "max_safe_depth": MAX_SAFE_DEPTH,
            "max_payload_size": settings.MAX_PAYLOAD_SIZE,
            "safety_guard": settings.ENFORCE_SAFETY_GUARD,
        }

    def _check_memory(self) -> Dict[str, Any]:
        """Report this process's footprint and fail when the host runs low."""
        try:
            available_mb = psutil.virtual_memory().available / (1024**2)
            rss_mb = psutil.Process().memory_info().rss / (1024**2)
        except psutil.Error as e:
            logger.warning("health.memory_check_failed", error=str(e))
            return {"status": "error", "error": str(e)}

        return {
            "status": "error" if available_mb < MIN_AVAILABLE_MEMORY_MB else "ok",
            "available_mb": round(available_mb, 2),
            "process_rss_mb": round(rss_mb, 2),
        }

"""
portfolio_config -- single public entrypoint for rule configuration.

Responsibility:
    Provides the ONLY way to obtain allocation and budget rules at runtime
    through ``get_active_config()``. YAML loading is internal tooling.

Architecture position:
    Configuration -- sits above ``portfolio_kernel`` and below
    ``portfolio_modules``. The kernel MUST NEVER import from
    ``portfolio_config``.

Failure modes:
    - ``FileNotFoundError`` -- the requested rule file does not exist.
    - ``ConfigurationError`` -- parsing or validation failed.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``PORTFOLIO_CONFIG_TRACE`` log entry with the config id, version and
    checksum, tying each rule decision to the exact rule file in force.
"""

from __future__ import annotations

from pathlib import Path

from portfolio_config.loader import load_configuration
from portfolio_config.schema import AllocationRules, BudgetRules, PortfolioConfiguration
from portfolio_config.validator import ConfigValidationResult, validate_configuration
from portfolio_kernel.logging_config import get_logger

_logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "sets" / "default.yaml"

__all__ = [
    "AllocationRules",
    "BudgetRules",
    "ConfigValidationResult",
    "DEFAULT_CONFIG_PATH",
    "PortfolioConfiguration",
    "get_active_config",
    "validate_configuration",
]


def get_active_config(config_path: Path | None = None) -> PortfolioConfiguration:
    """The ONLY public configuration entrypoint.

    Args:
        config_path: Override path to a rule file. Defaults to the bundled
            ``sets/default.yaml``.

    Raises:
        FileNotFoundError: If the rule file does not exist.
        ConfigurationError: If the file cannot be parsed or fails validation.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    config = load_configuration(path)

    validation = validate_configuration(config)
    if not validation.is_valid:
        for error in validation.errors:
            _logger.error(
                "portfolio_config_invalid",
                extra={"field_path": error.field_path, "reason": error.reason},
            )
        raise validation.errors[0]

    _logger.info(
        "PORTFOLIO_CONFIG_TRACE",
        extra={
            "trace_type": "PORTFOLIO_CONFIG_TRACE",
            "config_id": config.config_id,
            "config_version": config.version,
            "checksum": config.checksum,
            "source": str(path),
        },
    )
    return config

"""Portfolio Auditor utility modules.

- logging: Standardized logging with human/verbose/JSON modes
"""

from portfolio_auditor.utils.logging import (
    LogMode,
    configure,
    configure_from_config,
    get_logger,
    setup_logging,
)

__all__ = [
    "LogMode",
    "configure",
    "configure_from_config",
    "get_logger",
    "setup_logging",
]

# Core module exports
from fieldguard.core.config import Settings, get_settings
from fieldguard.core.logging import (
    configure_logging,
    get_logger,
    bind_context,
    clear_context,
    generate_correlation_id,
    session_logger,
    schema_logger,
    http_logger,
)

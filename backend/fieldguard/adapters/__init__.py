# Transport adapters
from fieldguard.adapters.http import (
    FailureAuditMiddleware,
    bind_session,
    input_bag,
    register_error_handlers,
    validated,
)

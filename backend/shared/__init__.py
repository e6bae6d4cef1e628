"""
Shared module for code used by the REST API and the CLI.

STRUCTURE:
- shared.security: Authentication
  - auth.py: JWT signing/verification, current_user_context

- shared.infrastructure: Database and messaging
  - db.py: SQLAlchemy engine and sessions, safe_commit()
  - correlation.py: Request id middleware and logging filter
  - events/: Redis pools and order event publishing

- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: Order/payment statuses, variants, document paths

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Input validation and stored value parsing

IMPORT EXAMPLES:
    from shared.security.auth import current_user_context
    from shared.infrastructure.db import safe_commit
    from shared.config.settings import settings
    from shared.config.constants import OrderStatus, PaymentStatus
    from shared.utils.exceptions import NotFoundError, ValidationError
"""

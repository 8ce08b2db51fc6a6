from slowapi import Limiter
from slowapi.util import get_remote_address

from paystream.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[f"{settings.rate_limit_per_minute}/minute"],
    enabled=settings.environment != "testing",
)

# Manual runs submit real transactions
RUN_LIMIT = "10/minute"

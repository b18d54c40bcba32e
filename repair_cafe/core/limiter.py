# repair_cafe/core/limiter.py
"""
Shared slowapi limiter. Lives outside main.py so routers can decorate
endpoints without importing the app.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from repair_cafe.core.config import settings

# Keyed by client IP; magic-link requests are the only throttled route.
limiter = Limiter(key_func=get_remote_address)

magic_link_rate = settings.MAGIC_LINK_RATE_LIMIT

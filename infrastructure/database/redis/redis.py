import redis
from django.conf import settings

# None when REDIS_URL is unset; callers fall back to in-process locking only.
redis_client = redis.Redis.from_url(settings.REDIS_URL, decode_responses=True) if settings.REDIS_URL else None

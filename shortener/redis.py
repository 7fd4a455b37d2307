"""Redis client construction for the URL shortener.

The client is built once by the service manager at startup and closed at
shutdown. Timeouts apply to both connecting and socket reads/writes so a
stalled Redis surfaces as an error instead of hanging a request.

Functions:
    create_redis():  Builds the Redis client from settings.
    close_redis():  Cleanup function for shutdown.
"""

import redis.asyncio as redis

from shortener.config import Settings

__all__ = ["create_redis", "close_redis"]


def create_redis(settings: Settings) -> redis.Redis:
    return redis.from_url(
        settings.REDIS_URL,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
        socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT_SECONDS,
    )


async def close_redis(client: redis.Redis) -> None:
    await client.aclose()

import time

import redis
from django.conf import settings
from django.db import DatabaseError, connections
from django.http import JsonResponse

from .logger import get_logger

logger = get_logger(__name__).bind(component='common', layer='health')


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


def _redis_check(url: str, timeout: float = 0.3):
    started = time.perf_counter()
    try:
        client = redis.Redis.from_url(url, socket_connect_timeout=timeout, socket_timeout=timeout)
        client.ping()
    except redis.RedisError as exc:
        logger.warning('Redis check failed', error=str(exc))
        return {'status': 'fail', 'error': str(exc)}
    latency = _elapsed_ms(started)
    logger.debug('Redis check passed', latency_ms=latency)
    return {'status': 'ok', 'latency_ms': latency}


def _db_check(alias='default'):
    started = time.perf_counter()
    try:
        with connections[alias].cursor() as cursor:
            cursor.execute('SELECT 1')
    except DatabaseError as exc:
        logger.warning('Database check failed', alias=alias, error=str(exc))
        return {'status': 'fail', 'error': str(exc)}
    latency = _elapsed_ms(started)
    logger.debug('Database check passed', alias=alias, latency_ms=latency)
    return {'status': 'ok', 'latency_ms': latency}


def _uses_redis_cache() -> bool:
    backend = settings.CACHES.get('default', {}).get('BACKEND', '')
    return backend.startswith('django_redis')


def live_health(request):
    """Process is up."""
    return JsonResponse({'status': 'alive'})


def ready_health(request):
    """The database answers and, when the cache lives in Redis, Redis answers too."""
    checks = {'database': _db_check()}
    if _uses_redis_cache():
        checks['redis'] = _redis_check(settings.REDIS_URL)
    else:
        checks['redis'] = {'status': 'skipped', 'detail': 'cache is not backed by Redis'}

    failing = sorted(name for name, result in checks.items() if result['status'] == 'fail')
    overall = 'degraded' if failing else 'ok'
    logger.info('Readiness evaluated', status=overall, failing=failing)
    return JsonResponse({'status': overall, 'checks': checks}, status=503 if failing else 200)

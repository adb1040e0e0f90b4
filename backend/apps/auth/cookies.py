from django.conf import settings


def _cookie_options(max_age):
    return {
        "max_age": max_age,
        "httponly": True,
        "secure": settings.AUTH_COOKIE_SECURE,
        "samesite": settings.AUTH_COOKIE_SAMESITE,
        "path": "/",
    }


def set_auth_cookies(response, access: str, refresh: str = None):
    """Attach the JWT pair as http-only cookies scoped to the whole site."""
    lifetimes = settings.SIMPLE_JWT
    response.set_cookie(
        settings.AUTH_ACCESS_COOKIE,
        access,
        **_cookie_options(int(lifetimes["ACCESS_TOKEN_LIFETIME"].total_seconds())),
    )
    if refresh:
        response.set_cookie(
            settings.AUTH_REFRESH_COOKIE,
            refresh,
            **_cookie_options(int(lifetimes["REFRESH_TOKEN_LIFETIME"].total_seconds())),
        )
    return response


def clear_auth_cookies(response):
    for name in (settings.AUTH_ACCESS_COOKIE, settings.AUTH_REFRESH_COOKIE):
        response.delete_cookie(name, path="/", samesite=settings.AUTH_COOKIE_SAMESITE)
    return response

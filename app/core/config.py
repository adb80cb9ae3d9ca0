import os

_TRUTHY = {"1", "true", "yes", "on"}


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def admin_credentials() -> tuple[str, str]:
    return (
        os.getenv("ADMIN_USERNAME", "admin"),
        os.getenv("ADMIN_PASSWORD", "admin"),
    )


def auth_required() -> bool:
    return _get_bool("GARAGE_REQUIRE_AUTH", False)


def atomic_writes_enabled() -> bool:
    """
    When enabled (default), every multi-step write commits once at the end.
    When disabled, each step commits on its own, so a failure part way
    through leaves the earlier steps persisted.
    """
    return _get_bool("GARAGE_ATOMIC_WRITES", True)

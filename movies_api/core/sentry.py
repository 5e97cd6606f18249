import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration


def init_sentry(dsn: str, environment: str = "local") -> bool:
    """Включает Sentry, если задан DSN. Возвращает True, если включён."""
    if not dsn:
        return False
    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        integrations=[
            LoggingIntegration(level=None, event_level=None),
            FastApiIntegration(),
        ],
        traces_sample_rate=0.2 if environment == "production" else 1.0,
        send_default_pii=False,
    )
    return True

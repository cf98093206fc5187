"""Process-wide secrets loader.

Secrets come from AWS Secrets Manager when enabled, falling back to
environment variables (via settings) per secret. The loaded mapping is cached
for the life of the process; concurrent first callers share one in-flight
load.
"""

import asyncio

import structlog

from outage_monitor.config import Settings, settings as default_settings

logger = structlog.get_logger()

# Environment variable name -> secret name suffix under the configured prefix
SECRET_MAPPINGS = {
    "STATUSGATOR_API_KEY": "statusgator/api-key",
}


class SecretsLoader:
    def __init__(self, settings: Settings | None = None, client=None):
        self._settings = settings or default_settings
        self._client = client
        self._load: asyncio.Future | None = None

    def secret_name(self, env_var: str) -> str:
        return f"{self._settings.secret_prefix}/{SECRET_MAPPINGS[env_var]}"

    async def load(self) -> dict[str, str]:
        """Return all secrets, loading them on first use."""
        if self._load is None:
            self._load = asyncio.ensure_future(self._load_all())
        else:
            logger.debug("secrets_cache_hit", pending=not self._load.done())
        try:
            return dict(await asyncio.shield(self._load))
        except Exception:
            # Let the next caller try again rather than caching the failure
            self._load = None
            raise

    async def get(self, key: str) -> str | None:
        secrets = await self.load()
        return secrets.get(key)

    def clear(self) -> None:
        """Drop cached secrets so the next call reloads them."""
        self._load = None
        logger.info("secrets_cache_cleared")

    async def _load_all(self) -> dict[str, str]:
        if not self._settings.use_secrets_manager:
            logger.info("secrets_loaded_from_env", count=len(SECRET_MAPPINGS))
            return self._from_env()

        logger.info("secrets_loading", source="aws_secrets_manager", region=self._settings.aws_region)
        try:
            client = self._client or self._make_client()
            values = await asyncio.gather(
                *[asyncio.to_thread(self._fetch_secret, client, self.secret_name(k)) for k in SECRET_MAPPINGS]
            )
        except Exception as exc:
            logger.error("secrets_load_failed", reason=str(exc), fallback="env")
            return self._from_env()

        env_values = self._from_env()
        secrets: dict[str, str] = {}
        for env_var, value in zip(SECRET_MAPPINGS, values):
            if value:
                secrets[env_var] = value
            elif env_var in env_values:
                secrets[env_var] = env_values[env_var]
                logger.warning("secret_from_env", key=env_var, reason="not in secrets manager")
            else:
                logger.warning("secret_missing", key=env_var)
        logger.info("secrets_loaded", count=len(secrets))
        return secrets

    def _from_env(self) -> dict[str, str]:
        secrets = {}
        for env_var in SECRET_MAPPINGS:
            value = getattr(self._settings, env_var.lower(), None)
            if value:
                secrets[env_var] = value
        return secrets

    def _make_client(self):
        try:
            import boto3
        except ImportError:
            raise RuntimeError("boto3 is required for AWS Secrets Manager. Install it with: pip install boto3")
        return boto3.client("secretsmanager", region_name=self._settings.aws_region)

    @staticmethod
    def _fetch_secret(client, secret_name: str) -> str | None:
        try:
            response = client.get_secret_value(SecretId=secret_name)
        except Exception as exc:
            error_code = getattr(exc, "response", {}).get("Error", {}).get("Code")
            if error_code == "ResourceNotFoundException":
                logger.warning("secret_not_found", secret=secret_name)
            else:
                logger.error("secret_fetch_failed", secret=secret_name, reason=str(exc))
            return None
        value = response.get("SecretString")
        if not value:
            logger.warning("secret_has_no_string_value", secret=secret_name)
        return value

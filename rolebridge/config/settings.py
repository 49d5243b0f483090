"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import os
import secrets
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_DATABASE_PATH = "data/rolebridge.db"


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    # Priority 1: Read from /run/secrets
    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                print(f"[settings] ✓ Loaded {secret_name} from /run/secrets")
                return secret_value
        except OSError as e:
            print(f"[settings] ✗ Failed to read /run/secrets/{secret_name}: {e}")

    # Priority 2: Fallback to environment variable
    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            return secret_value

    return None


@dataclass
class AppConfig:
    """Application configuration container."""
    # Mode
    demo_mode: bool

    # Game server
    base_url: str
    server_password: str
    request_timeout: Optional[float] = None

    # Community (scoping only, never read by the sync logic)
    guild_id: int = 0

    # Store
    database_path: str = DEFAULT_DATABASE_PATH

    # Admin API
    admin_token: str = ""

    # Audit
    audit_log_signing_key: str = ""

    def __repr__(self) -> str:
        return (
            f"AppConfig(demo_mode={self.demo_mode}, base_url={self.base_url!r}, "
            f"guild_id={self.guild_id}, database_path={self.database_path!r})"
        )


def _get_or_generate(var_name: str, demo_default: Optional[str] = None, required: bool = True, demo_mode: bool = False) -> str:
    """Get environment variable or use demo default/generate."""
    value = os.environ.get(var_name)
    if value:
        return value

    if demo_mode and demo_default is not None:
        print(f"[demo-mode] Using default for {var_name}")
        os.environ[var_name] = demo_default
        return demo_default

    if not required:
        return ""

    raise RuntimeError(f"Environment variable {var_name} is required in production mode.")


def _normalize_base_url(url: str) -> str:
    """Strip one trailing slash so paths can be appended with a leading '/'."""
    if url.endswith("/"):
        url = url[:-1]
    return url


def _parse_timeout(raw: str | None) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        timeout = float(raw)
    except ValueError:
        raise ValueError(f"BOT_REQUEST_TIMEOUT must be a number of seconds, got {raw!r}")
    if timeout <= 0:
        raise ValueError("BOT_REQUEST_TIMEOUT must be positive")
    return timeout


def load_settings() -> AppConfig:
    """Load application settings from environment and /run/secrets."""
    demo_mode = os.environ.get("DEMO_MODE", "false").lower() == "true"

    # Game server
    base_url = _normalize_base_url(
        _get_or_generate("BOT_BASE_URL", demo_default="http://127.0.0.1:4201", demo_mode=demo_mode)
    )

    server_password = _load_secret_from_file("bot_server_password", "BOT_SERVER_PASSWORD")
    if not server_password:
        if demo_mode:
            server_password = "demo-server-password"
            os.environ["BOT_SERVER_PASSWORD"] = server_password
            print("[demo-mode] Using default for BOT_SERVER_PASSWORD")
        else:
            raise RuntimeError("BOT_SERVER_PASSWORD not found in /run/secrets or environment")

    request_timeout = _parse_timeout(os.environ.get("BOT_REQUEST_TIMEOUT"))

    raw_guild_id = _get_or_generate("BOT_SERVER_ID", demo_default="0", demo_mode=demo_mode)
    try:
        guild_id = int(raw_guild_id)
    except ValueError:
        raise ValueError("BOT_SERVER_ID must be an integer")

    database_path = os.environ.get("BOT_DATABASE_PATH", DEFAULT_DATABASE_PATH)

    # Admin API token
    admin_token = _load_secret_from_file("rolebridge_admin_token", "ROLEBRIDGE_ADMIN_TOKEN") or ""
    if not admin_token and demo_mode:
        admin_token = secrets.token_urlsafe(32)
        os.environ["ROLEBRIDGE_ADMIN_TOKEN"] = admin_token
        print("[demo-mode] Generated temporary ROLEBRIDGE_ADMIN_TOKEN")

    # Audit log signing key (read from the environment by rolebridge.core.audit)
    audit_log_signing_key = _load_secret_from_file("audit_log_signing_key", "AUDIT_LOG_SIGNING_KEY") or ""
    if audit_log_signing_key:
        os.environ["AUDIT_LOG_SIGNING_KEY"] = audit_log_signing_key

    mode_label = "DEMO" if demo_mode else "PRODUCTION"
    print(f"[settings] Mode={mode_label}; base_url={base_url}; guild_id={guild_id}")

    if demo_mode:
        print("[settings] WARNING: Demo credentials in use. Do not deploy with these defaults.")

    return AppConfig(
        demo_mode=demo_mode,
        base_url=base_url,
        server_password=server_password,
        request_timeout=request_timeout,
        guild_id=guild_id,
        database_path=database_path,
        admin_token=admin_token,
        audit_log_signing_key=audit_log_signing_key,
    )

"""Uploader configuration helpers."""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, ValidationError

from .constants import (
    API_KEY_VAR,
    API_URL,
    API_URL_VAR,
    AUDIT_LOG_FILE,
    CONFIG_FILE,
    DEFAULT_TIMEOUT,
    LEDGER_FILE,
    TEST_LEDGER_FILE,
    UPLOADER_DIR,
)
from .errors import ConfigError
from .storage_models import Auth, ClientOptions


class UploaderConfig(BaseModel):
    """Uploader configuration (stored in .pd-uploader/config.yaml)."""

    api_url: str = API_URL
    api_key: Optional[str] = None
    user_agent: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    proxy_url: str = ""
    enable_cookies: bool = True
    insecure_tls: bool = True
    debug: bool = False
    uploader_name: Optional[str] = None  # audit log identity; defaults to the OS user

    ledger_path: str = LEDGER_FILE
    test_ledger_path: str = TEST_LEDGER_FILE
    audit_log_path: str = AUDIT_LOG_FILE

    def auth(self) -> Auth:
        return Auth(api_key=self.api_key)

    def client_options(self) -> ClientOptions:
        return ClientOptions(
            debug=self.debug,
            proxy_url=self.proxy_url,
            enable_cookies=self.enable_cookies,
            insecure_tls=self.insecure_tls,
            timeout=self.timeout,
            user_agent=self.user_agent,
        )


def default_config_path(root: Optional[Path] = None) -> Path:
    """Location of the config file under ``root`` (defaults to the cwd)."""
    return (root or Path.cwd()) / UPLOADER_DIR / CONFIG_FILE


def load_config(path: Optional[Union[str, Path]] = None) -> UploaderConfig:
    """Load configuration from YAML, then apply environment overrides.

    A missing file is not an error: defaults are used. Environment variables
    ``PIXELDRAIN_API_KEY`` and ``PIXELDRAIN_API_URL`` win over the file.

    Raises:
        ConfigError: If the file exists but is not a valid configuration
    """
    cfg_path = Path(path) if path else default_config_path()
    data = {}
    if cfg_path.exists():
        try:
            data = yaml.safe_load(cfg_path.read_text()) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {cfg_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping in {cfg_path}, got {type(data).__name__}")

    if os.environ.get(API_KEY_VAR):
        data["api_key"] = os.environ[API_KEY_VAR]
    if os.environ.get(API_URL_VAR):
        data["api_url"] = os.environ[API_URL_VAR]

    try:
        return UploaderConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {cfg_path}: {e}") from e


def save_config(config: UploaderConfig, path: Optional[Union[str, Path]] = None) -> Path:
    """Save configuration atomically and return the path written.

    The API key is never written; it belongs in the environment.
    """
    cfg_path = Path(path) if path else default_config_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    text = yaml.safe_dump(
        config.model_dump(exclude={"api_key"}), default_flow_style=False, sort_keys=False
    )

    with tempfile.NamedTemporaryFile(
        mode="w",
        delete=False,
        dir=cfg_path.parent,
        prefix=f".{cfg_path.name}.tmp-",
    ) as f:
        f.write(text)
        f.flush()
        os.fsync(f.fileno())
        tmp = Path(f.name)
    try:
        os.replace(tmp, cfg_path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    return cfg_path

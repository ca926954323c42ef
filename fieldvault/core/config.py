"""
Configuration Module
====================

Provides immutable, environment-aware configuration for the data
protection core.

Security Features:
- Immutable configuration after initialization
- Environment variable override support
- No secrets in configuration (the field key is read by the KeyProvider)
- Insecure fallback key refused in production
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Mapping, Optional

from fieldvault.core.errors import ConfigurationError


_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "password", "secret", "key", "token", "private", "credential", "salt"
})

_ENVIRONMENTS: Final[frozenset[str]] = frozenset({
    "development", "test", "staging", "production"
})

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "false", "no", "off"})


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True, slots=True)
class CryptoConfig:
    """Immutable crypto configuration."""

    environment: str = "development"
    # None means "decide from environment"
    allow_insecure_default: Optional[bool] = None

    def __post_init__(self) -> None:
        """Validate crypto settings."""
        if self.environment not in _ENVIRONMENTS:
            raise ConfigurationError(f"Invalid environment: {self.environment}")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def insecure_default_permitted(self) -> bool:
        """Whether a missing key may fall back to the development key."""
        if self.allow_insecure_default is not None:
            return self.allow_insecure_default
        return not self.is_production


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Immutable logging configuration."""

    level: str = "INFO"
    enable_console: bool = True
    enable_file: bool = False
    log_dir: Optional[Path] = None
    json_format: bool = False
    max_file_size_bytes: int = 10 * 1024 * 1024  # 10 MB
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate logging settings."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level.upper() not in valid_levels:
            raise ConfigurationError(f"Invalid log level: {self.level}")
        if self.enable_file and self.log_dir is None:
            raise ConfigurationError("log_dir is required when file logging is enabled")
        if self.log_dir is not None and not self.log_dir.is_absolute():
            raise ConfigurationError(f"log_dir must be an absolute path: {self.log_dir}")


_instance_lock = threading.Lock()


class FieldVaultConfig:
    """
    Centralized, immutable configuration loader with environment override support.

    Usage:
        config = FieldVaultConfig.load()
        if config.crypto.is_production:
            ...
    """

    __slots__ = ("_crypto", "_logging", "_frozen")

    _instance: Optional[FieldVaultConfig] = None

    def __init__(
        self,
        crypto: Optional[CryptoConfig] = None,
        logging: Optional[LoggingConfig] = None,
    ) -> None:
        """Initialize configuration. Use FieldVaultConfig.load() for standard initialization."""
        object.__setattr__(self, "_frozen", False)
        object.__setattr__(self, "_crypto", crypto or CryptoConfig())
        object.__setattr__(self, "_logging", logging or LoggingConfig())
        object.__setattr__(self, "_frozen", True)

    @property
    def crypto(self) -> CryptoConfig:
        """Get crypto configuration."""
        return self._crypto

    @property
    def logging(self) -> LoggingConfig:
        """Get logging configuration."""
        return self._logging

    @classmethod
    def load(
        cls,
        env_prefix: str = "FIELDVAULT",
        environ: Optional[Mapping[str, str]] = None,
    ) -> FieldVaultConfig:
        """
        Load configuration with environment variable overrides.

        Environment variables are prefixed with FIELDVAULT_ and use
        double underscores for nested values.

        Examples:
            FIELDVAULT_CRYPTO__ENVIRONMENT=production
            FIELDVAULT_CRYPTO__ALLOW_INSECURE_DEFAULT=false
            FIELDVAULT_LOGGING__LEVEL=DEBUG

        Args:
            env_prefix: Prefix for environment variables (default: FIELDVAULT)
            environ: Mapping to read instead of os.environ

        Returns:
            Configured FieldVaultConfig instance

        Raises:
            ConfigurationError: If an override has an invalid value
        """
        env_overrides = cls._parse_env_overrides(env_prefix, environ)

        crypto_kwargs: dict[str, Any] = {}
        if "crypto.environment" in env_overrides:
            crypto_kwargs["environment"] = env_overrides["crypto.environment"].strip().lower()
        if "crypto.allow_insecure_default" in env_overrides:
            crypto_kwargs["allow_insecure_default"] = _parse_bool(
                "crypto.allow_insecure_default",
                env_overrides["crypto.allow_insecure_default"],
            )

        logging_kwargs: dict[str, Any] = {}
        if "logging.level" in env_overrides:
            logging_kwargs["level"] = env_overrides["logging.level"].upper()
        for flag in ("enable_console", "enable_file", "json_format"):
            name = f"logging.{flag}"
            if name in env_overrides:
                logging_kwargs[flag] = _parse_bool(name, env_overrides[name])
        if "logging.log_dir" in env_overrides:
            logging_kwargs["log_dir"] = Path(env_overrides["logging.log_dir"])

        return cls(
            crypto=CryptoConfig(**crypto_kwargs) if crypto_kwargs else None,
            logging=LoggingConfig(**logging_kwargs) if logging_kwargs else None,
        )

    @staticmethod
    def _parse_env_overrides(
        prefix: str,
        environ: Optional[Mapping[str, str]] = None,
    ) -> dict[str, str]:
        """Parse environment variables with the given prefix."""
        source = os.environ if environ is None else environ
        overrides: dict[str, str] = {}
        prefix_upper = f"{prefix.upper()}_"

        for key, value in source.items():
            if key.startswith(prefix_upper):
                # FIELDVAULT_SECTION__KEY -> section.key
                config_key = key[len(prefix_upper):].lower().replace("__", ".")

                # SECURITY: secrets never travel through this loader
                if _is_sensitive_key(config_key):
                    continue

                overrides[config_key] = value

        return overrides

    @classmethod
    def get_instance(cls) -> FieldVaultConfig:
        """Get or create the singleton configuration instance."""
        with _instance_lock:
            if cls._instance is None:
                cls._instance = cls.load()
            return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance. Use only for testing."""
        with _instance_lock:
            cls._instance = None

    def __repr__(self) -> str:
        return (
            f"FieldVaultConfig(environment={self._crypto.environment}, "
            f"log_level={self._logging.level})"
        )

    def __setattr__(self, name: str, value: Any) -> None:
        """Prevent modification after initialization."""
        if getattr(self, "_frozen", False):
            raise AttributeError("FieldVaultConfig is immutable after initialization")
        super().__setattr__(name, value)

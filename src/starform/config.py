"""
Configuration Management for StarForm Applications

Dataclass based configuration with per-environment presets, plus the
logging setup that the rest of the package relies on.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional

from .errors import ConfigurationError


class Environment(Enum):
    """Application environments"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


@dataclass
class ApiConfig:
    """Records API configuration"""
    base_url: str = "http://localhost:3000"
    resource: str = "restaurants"
    timeout: float = 10.0
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def collection_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.resource.strip('/')}"


@dataclass
class FormConfig:
    """Creation form configuration"""
    namespace: str = "RecordForm"
    placeholder: str = "Add Restaurant"
    submit_label: str = "Add"
    validation_message: str = "Name is required."
    save_error_message: str = "The restaurant could not be saved. Please try again."
    max_sessions: int = 1000


@dataclass
class WebConfig:
    """Web server configuration"""
    host: str = "localhost"
    port: int = 5001
    auto_reload: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class ApplicationConfig:
    """Complete application configuration"""
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    api: ApiConfig = field(default_factory=ApiConfig)
    form: FormConfig = field(default_factory=FormConfig)
    web: WebConfig = field(default_factory=WebConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def for_environment(cls, environment: Environment) -> 'ApplicationConfig':
        """Create configuration for specific environment"""
        config = cls(environment=environment)

        if environment == Environment.DEVELOPMENT:
            config.debug = True
            config.web.auto_reload = True
            config.logging.level = "DEBUG"

        elif environment == Environment.TESTING:
            config.api.timeout = 1.0
            config.logging.level = "WARNING"

        elif environment == Environment.PRODUCTION:
            config.debug = False
            config.logging.level = "INFO"

        return config

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ApplicationConfig':
        """Create configuration from dictionary"""
        try:
            environment = Environment(config_dict.get("environment", Environment.DEVELOPMENT.value))
        except ValueError as e:
            raise ConfigurationError(f"Unknown environment: {config_dict.get('environment')}") from e

        config = cls.for_environment(environment)

        if "debug" in config_dict:
            config.debug = bool(config_dict["debug"])

        for section in ("api", "form", "web", "logging"):
            target = getattr(config, section)
            for key, value in config_dict.get(section, {}).items():
                if not hasattr(target, key):
                    raise ConfigurationError(f"Unknown {section} option: {key}")
                setattr(target, key, value)

        return config

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> 'ApplicationConfig':
        """Create configuration from STARFORM_* environment variables"""
        environ = os.environ if environ is None else environ
        config_dict: Dict[str, Any] = {
            "environment": environ.get("STARFORM_ENV", Environment.DEVELOPMENT.value),
            "api": {},
            "logging": {},
        }

        if "STARFORM_API_URL" in environ:
            config_dict["api"]["base_url"] = environ["STARFORM_API_URL"]
        if "STARFORM_API_RESOURCE" in environ:
            config_dict["api"]["resource"] = environ["STARFORM_API_RESOURCE"]
        if "STARFORM_API_TIMEOUT" in environ:
            try:
                config_dict["api"]["timeout"] = float(environ["STARFORM_API_TIMEOUT"])
            except ValueError as e:
                raise ConfigurationError(
                    f"STARFORM_API_TIMEOUT must be a number, got {environ['STARFORM_API_TIMEOUT']!r}"
                ) from e
        if "STARFORM_LOG_LEVEL" in environ:
            config_dict["logging"]["level"] = environ["STARFORM_LOG_LEVEL"].upper()

        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "environment": self.environment.value,
            "debug": self.debug,
            "api": {
                "base_url": self.api.base_url,
                "resource": self.api.resource,
                "timeout": self.api.timeout,
                "headers": dict(self.api.headers),
            },
            "form": {
                "namespace": self.form.namespace,
                "placeholder": self.form.placeholder,
                "submit_label": self.form.submit_label,
                "validation_message": self.form.validation_message,
                "save_error_message": self.form.save_error_message,
                "max_sessions": self.form.max_sessions,
            },
            "web": {
                "host": self.web.host,
                "port": self.web.port,
                "auto_reload": self.web.auto_reload,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "file_path": self.logging.file_path,
                "max_file_size": self.logging.max_file_size,
                "backup_count": self.logging.backup_count,
            },
        }


def configure_logging(config: LoggingConfig) -> logging.Logger:
    """Install handlers on the package logger according to ``config``."""
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log level: {config.level}")

    logger = logging.getLogger("starform")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if config.file_path:
        file_handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger

"""
Configuration dataclasses for the address resolver.

This module defines the name service endpoint settings, the resolution
policy constants (supported suffixes and the safe confirmation threshold),
and logging configuration, plus loading them from the environment.
"""

import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError


DEFAULT_SUPPORTED_SUFFIXES = ["sats", "unisat", "x", "bitmap"]
DEFAULT_SAFE_CONFIRMATIONS = 3
DEFAULT_BASE_URL = "https://wallet-api.unisat.io"
DEFAULT_DOMAIN_INFO_PATH = "/v5/address/search"


@dataclass
class ResolverServiceConfig:
    """Configuration for the name service queried for domain lookups."""

    base_url: str = DEFAULT_BASE_URL
    domain_info_path: str = DEFAULT_DOMAIN_INFO_PATH
    timeout_seconds: float = 10.0
    headers: dict[str, str] = field(
        default_factory=lambda: {"X-Client": "address-resolver"}
    )
    simulation_mode: bool = False


@dataclass
class NamePolicyConfig:
    """Policy constants applied to recipient input."""

    supported_suffixes: list[str] = field(
        default_factory=lambda: list(DEFAULT_SUPPORTED_SUFFIXES)
    )
    safe_confirmations: int = DEFAULT_SAFE_CONFIRMATIONS
    address_checker: Optional[str] = None  # "package.module:function"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class SystemConfig:
    """Main configuration combining all sub-configurations."""

    service: ResolverServiceConfig = field(default_factory=ResolverServiceConfig)
    policy: NamePolicyConfig = field(default_factory=NamePolicyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    language: str = "en"  # 'en' or 'de'


def parse_suffix_list(env_val: str) -> list[str]:
    """Parse a comma, semicolon or whitespace separated suffix list."""
    if not env_val:
        return []
    raw = [p.strip() for chunk in env_val.replace(";", ",").split(",") for p in chunk.split()]
    seen, out = set(), []
    for suffix in raw:
        lc = suffix.lstrip(".").lower()
        if lc and lc not in seen:
            out.append(lc)
            seen.add(lc)
    return out


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(
            code="invalid_env_value",
            message=f"{name} must be an integer",
            details={"name": name, "value": raw},
        )


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(
            code="invalid_env_value",
            message=f"{name} must be a number",
            details={"name": name, "value": raw},
        )


def parse_bool(value, default: bool = False) -> bool:
    """
    Interpret a flag from the environment or a config file.

    Real booleans are taken as they are. Strings count as true only when
    they read "1", "true", "yes" or "on" (case-insensitive), so "false" is
    False. Missing or blank values give the default.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if not value.strip():
            return default
        return value.strip().lower() in ("1", "true", "yes", "on")
    raise ConfigurationError(
        code="invalid_config_value",
        message="Expected a boolean flag",
        details={"value": value},
    )


def _bool_env(name: str, default: bool) -> bool:
    return parse_bool(os.getenv(name), default)


def load_config_from_env(dotenv_path: Optional[str] = None) -> SystemConfig:
    """
    Build configuration from environment variables, reading a .env file first.

    Recognized variables: RESOLVER_BASE_URL, RESOLVER_DOMAIN_PATH,
    RESOLVER_TIMEOUT, SIMULATION_MODE, SUPPORTED_SUFFIXES, SAFE_CONFIRMATIONS,
    ADDRESS_CHECKER, RESOLVER_LANGUAGE (or LANGUAGE), LOG_LEVEL, LOG_FORMAT.

    Args:
        dotenv_path: Optional explicit .env file; defaults to searching upwards

    Returns:
        SystemConfig with defaults for every unset variable

    Raises:
        ConfigurationError: If a numeric variable cannot be parsed
    """
    load_dotenv(dotenv_path)

    suffixes = parse_suffix_list(os.getenv("SUPPORTED_SUFFIXES", ""))

    language = (os.getenv("RESOLVER_LANGUAGE") or os.getenv("LANGUAGE") or "en").lower()
    if language not in ("en", "de"):
        language = "en"

    return SystemConfig(
        service=ResolverServiceConfig(
            base_url=os.getenv("RESOLVER_BASE_URL", DEFAULT_BASE_URL).strip(),
            domain_info_path=os.getenv(
                "RESOLVER_DOMAIN_PATH", DEFAULT_DOMAIN_INFO_PATH
            ).strip(),
            timeout_seconds=_float_env("RESOLVER_TIMEOUT", 10.0),
            simulation_mode=_bool_env("SIMULATION_MODE", False),
        ),
        policy=NamePolicyConfig(
            supported_suffixes=suffixes or list(DEFAULT_SUPPORTED_SUFFIXES),
            safe_confirmations=_int_env("SAFE_CONFIRMATIONS", DEFAULT_SAFE_CONFIRMATIONS),
            address_checker=(os.getenv("ADDRESS_CHECKER") or "").strip() or None,
        ),
        logging=LoggingConfig(
            level=(os.getenv("LOG_LEVEL") or "info").lower(),
            output_format=(os.getenv("LOG_FORMAT") or "text").lower(),
        ),
        language=language,
    )

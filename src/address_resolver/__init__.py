"""
Address Resolver - recipient input resolution for wallets.

This package turns recipient keystrokes, either a raw on-chain address or a
name service domain such as `alice.sats`, into the concrete address to pay,
refusing names whose backing inscription moved too recently.
"""

__version__ = "0.1.0"
__author__ = "Address Resolver Team"

from address_resolver.exceptions import (
    AddressResolverError,
    ConfigurationError,
    NetworkError,
    ProtocolError,
)
from address_resolver.enums import (
    ResolutionState,
    TrustVerdict,
    LookupErrorCode,
    LogLevel,
)
from address_resolver.models import (
    ResolutionRecord,
    ResolvedTarget,
    ResolutionSnapshot,
    EMPTY_TARGET,
)
from address_resolver.config import (
    ResolverServiceConfig,
    NamePolicyConfig,
    LoggingConfig,
    SystemConfig,
    load_config_from_env,
    parse_bool,
)
from address_resolver.name_parser import (
    NameParser,
    ParsedName,
    parse_name,
    describe_supported_suffixes,
)
from address_resolver.address_validator import (
    AddressValidator,
    load_address_checker,
)
from address_resolver.resolver_client import (
    DomainResolverClient,
)
from address_resolver.confirmation_gate import (
    ConfirmationGate,
    GateResult,
)
from address_resolver.controller import (
    ResolutionController,
    DomainResolver,
    create_controller,
)
from address_resolver.audit_logger import (
    AuditLogger,
    LogEntry,
)
from address_resolver.i18n import (
    get_message,
    join_with_and,
    get_all_message_keys,
    has_translation,
    get_missing_translations,
    validate_translations,
    TRANSLATIONS,
    SUPPORTED_LANGUAGES,
    DEFAULT_LANGUAGE,
)
from address_resolver.cli import (
    main as cli_main,
    create_parser,
    create_default_config,
    create_logger,
    load_config_from_file,
    save_config_to_file,
)

__all__ = [
    # Exceptions
    "AddressResolverError",
    "ConfigurationError",
    "NetworkError",
    "ProtocolError",
    # Enums
    "ResolutionState",
    "TrustVerdict",
    "LookupErrorCode",
    "LogLevel",
    # Models
    "ResolutionRecord",
    "ResolvedTarget",
    "ResolutionSnapshot",
    "EMPTY_TARGET",
    # Configuration
    "ResolverServiceConfig",
    "NamePolicyConfig",
    "LoggingConfig",
    "SystemConfig",
    "load_config_from_env",
    "parse_bool",
    # Name Parser
    "NameParser",
    "ParsedName",
    "parse_name",
    "describe_supported_suffixes",
    # Address Validator
    "AddressValidator",
    "load_address_checker",
    # Resolver Client
    "DomainResolverClient",
    # Confirmation Gate
    "ConfirmationGate",
    "GateResult",
    # Controller
    "ResolutionController",
    "DomainResolver",
    "create_controller",
    # Audit Logger
    "AuditLogger",
    "LogEntry",
    # I18n
    "get_message",
    "join_with_and",
    "get_all_message_keys",
    "has_translation",
    "get_missing_translations",
    "validate_translations",
    "TRANSLATIONS",
    "SUPPORTED_LANGUAGES",
    "DEFAULT_LANGUAGE",
    # CLI
    "cli_main",
    "create_parser",
    "create_default_config",
    "create_logger",
    "load_config_from_file",
    "save_config_to_file",
]

"""
Command-line interface for the address resolver.

This module provides the main CLI entry point with commands for:
- resolve: Resolve a single recipient input
- replay: Feed a sequence of inputs as if typed, then report the final state
- config: Configuration management
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .audit_logger import AuditLogger
from .config import (
    LoggingConfig,
    NamePolicyConfig,
    ResolverServiceConfig,
    SystemConfig,
    load_config_from_env,
    parse_bool,
)
from .controller import create_controller
from .enums import ResolutionState
from .exceptions import ConfigurationError
from .i18n import get_message
from .models import ResolutionSnapshot, ResolvedTarget
from .resolver_client import DomainResolverClient


DEFAULT_CONFIG_PATH = Path.home() / ".address_resolver" / "config.json"


def create_default_config(
    simulation_mode: bool = False,
    language: str = "en",
) -> SystemConfig:
    """
    Create a default system configuration.

    Args:
        simulation_mode: Enable simulation mode (no real network requests)
        language: Output language ('en' or 'de')

    Returns:
        SystemConfig with default settings
    """
    return SystemConfig(
        service=ResolverServiceConfig(simulation_mode=simulation_mode),
        policy=NamePolicyConfig(),
        logging=LoggingConfig(level="info", output_format="text"),
        language=language,
    )


def load_config_from_file(config_path: Path) -> Optional[SystemConfig]:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        SystemConfig if successful, None otherwise
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        service_data = data.get("service", {})
        defaults = ResolverServiceConfig()
        service = ResolverServiceConfig(
            base_url=service_data.get("base_url", defaults.base_url),
            domain_info_path=service_data.get("domain_info_path", defaults.domain_info_path),
            timeout_seconds=float(service_data.get("timeout_seconds", defaults.timeout_seconds)),
            headers=dict(service_data.get("headers", defaults.headers)),
            simulation_mode=parse_bool(service_data.get("simulation_mode"), False),
        )

        policy_data = data.get("policy", {})
        policy = NamePolicyConfig(
            supported_suffixes=list(
                policy_data.get("supported_suffixes") or NamePolicyConfig().supported_suffixes
            ),
            safe_confirmations=int(
                policy_data.get("safe_confirmations", NamePolicyConfig().safe_confirmations)
            ),
            address_checker=policy_data.get("address_checker"),
        )

        logging_data = data.get("logging", {})
        logging_config = LoggingConfig(
            level=logging_data.get("level", "info"),
            output_format=logging_data.get("output_format", "text"),
        )

        return SystemConfig(
            service=service,
            policy=policy,
            logging=logging_config,
            language=data.get("language", "en"),
        )

    except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return None
    except ConfigurationError as e:
        print(f"Error loading config: {e.message}", file=sys.stderr)
        return None
    except FileNotFoundError:
        return None


def save_config_to_file(config: SystemConfig, config_path: Path) -> bool:
    """
    Save configuration to a JSON file.

    Args:
        config: SystemConfig to save
        config_path: Path to save the configuration

    Returns:
        True if successful, False otherwise
    """
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "service": {
                "base_url": config.service.base_url,
                "domain_info_path": config.service.domain_info_path,
                "timeout_seconds": config.service.timeout_seconds,
                "headers": config.service.headers,
                "simulation_mode": config.service.simulation_mode,
            },
            "policy": {
                "supported_suffixes": config.policy.supported_suffixes,
                "safe_confirmations": config.policy.safe_confirmations,
                "address_checker": config.policy.address_checker,
            },
            "logging": {
                "level": config.logging.level,
                "output_format": config.logging.output_format,
            },
            "language": config.language,
        }

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        return True

    except (OSError, TypeError) as e:
        print(f"Error saving config: {e}", file=sys.stderr)
        return False


def print_snapshot(snapshot: ResolutionSnapshot, language: str, verbose: bool = False) -> None:
    """Print the user-facing state of a recipient input."""
    state_text = get_message(f"state.{snapshot.state.value}", language)
    print(get_message("cli.state", language, state=state_text))

    if snapshot.target.address:
        print(get_message("cli.address", language, address=snapshot.target.address))

    record = snapshot.resolved_record
    if record is not None:
        print(get_message(
            "cli.owner",
            language,
            address=record.owner_address or "-",
            confirmations=record.confirmations,
        ))

    for line in (
        snapshot.notice,
        snapshot.format_error,
        snapshot.not_found_error,
        snapshot.warning,
    ):
        if line:
            print(f"  {line}")

    if verbose:
        print(f"  Generation: {snapshot.generation}")
        if record is not None and record.inscription_id:
            print(f"  Inscription: {record.inscription_id}")


def create_logger(config: SystemConfig, verbose: bool = False) -> AuditLogger:
    """
    Build the audit logger from the logging configuration.

    Args:
        config: System configuration
        verbose: Lower the level to debug regardless of the configured level

    Returns:
        AuditLogger writing to stderr

    Raises:
        ConfigurationError: If the configured level or format is unknown
    """
    level = "debug" if verbose else config.logging.level
    try:
        return AuditLogger(output_format=config.logging.output_format, level=level)
    except ValueError as e:
        raise ConfigurationError(
            code="invalid_logging_config",
            message=str(e),
            details={"level": level, "output_format": config.logging.output_format},
        ) from e


async def resolve_input(
    text: str,
    config: SystemConfig,
    verbose: bool = False,
) -> int:
    """
    Resolve a single recipient input.

    Args:
        text: Address or domain name
        config: System configuration
        verbose: Enable verbose output

    Returns:
        Exit code (0 for a trusted recipient, 1 otherwise)
    """
    language = config.language

    if config.service.simulation_mode:
        print(get_message("simulation.enabled", language))

    print(get_message("cli.resolving", language, text=text))

    try:
        logger = create_logger(config, verbose)
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    async with DomainResolverClient(config.service, logger=logger) as client:
        try:
            controller = create_controller(config, resolver=client, logger=logger)
        except ConfigurationError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1

        if verbose and not controller.has_address_checker:
            print(get_message("cli.no_checker", language))

        controller.on_input_changed(text)
        if controller.searching:
            print(get_message("input.searching", language))
        await controller.wait_idle()
        snapshot = controller.snapshot()
        await controller.aclose()

    print_snapshot(snapshot, language, verbose)

    if snapshot.state == ResolutionState.RESOLVED_TRUSTED:
        return 0
    return 1


async def replay_inputs(
    inputs_file: Path,
    config: SystemConfig,
    interval: float = 0.0,
    verbose: bool = False,
) -> int:
    """
    Feed each line of a file to one input as successive keystrokes.

    Lookups are not awaited between keystrokes, so a slow lookup for an
    early line is superseded by later lines exactly as in fast typing.

    Args:
        inputs_file: File with one full input state per line
        config: System configuration
        interval: Seconds to wait between keystrokes
        verbose: Enable verbose output

    Returns:
        Exit code (0 if the final state is a trusted recipient, 1 otherwise)
    """
    language = config.language

    try:
        with open(inputs_file, "r", encoding="utf-8") as f:
            inputs = [line.rstrip("\r\n") for line in f if not line.startswith("#")]
    except FileNotFoundError:
        print(f"Error: File not found: {inputs_file}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error reading file: {e}", file=sys.stderr)
        return 1

    if not inputs:
        print("Error: No inputs found in file", file=sys.stderr)
        return 1

    if config.service.simulation_mode:
        print(get_message("simulation.enabled", language))

    print(get_message("cli.replaying", language, count=len(inputs)))

    try:
        logger = create_logger(config, verbose)
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    emitted: list[ResolvedTarget] = []

    async with DomainResolverClient(config.service, logger=logger) as client:
        try:
            controller = create_controller(
                config,
                resolver=client,
                logger=logger,
                on_target_resolved=emitted.append,
            )
        except ConfigurationError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1

        for text in inputs:
            controller.on_input_changed(text)
            await asyncio.sleep(interval)

        await controller.wait_idle()
        snapshot = controller.snapshot()
        await controller.aclose()

    print_snapshot(snapshot, language, verbose)

    if verbose:
        print(f"  Target changes: {len(emitted)}")
        for target in emitted:
            print(f"    - {target.address or '(empty)'}")

    if snapshot.state == ResolutionState.RESOLVED_TRUSTED:
        return 0
    return 1


def _load_config(args: argparse.Namespace) -> Optional[SystemConfig]:
    """Load configuration from --config, else from the environment, then apply overrides."""
    if args.config:
        config = load_config_from_file(Path(args.config))
        if config is None:
            print(f"Error: Could not load config from {args.config}", file=sys.stderr)
            return None
    else:
        try:
            config = load_config_from_env()
        except ConfigurationError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return None

    if args.dry_run:
        config.service.simulation_mode = True
    if args.language:
        config.language = args.language
    if args.address_checker:
        config.policy.address_checker = args.address_checker

    return config


def cmd_resolve(args: argparse.Namespace) -> int:
    """Handle the 'resolve' command."""
    config = _load_config(args)
    if config is None:
        return 1

    return asyncio.run(resolve_input(
        text=args.text,
        config=config,
        verbose=args.verbose,
    ))


def cmd_replay(args: argparse.Namespace) -> int:
    """Handle the 'replay' command."""
    config = _load_config(args)
    if config is None:
        return 1

    return asyncio.run(replay_inputs(
        inputs_file=Path(args.file),
        config=config,
        interval=args.interval,
        verbose=args.verbose,
    ))


def cmd_config(args: argparse.Namespace) -> int:
    """Handle the 'config' command."""
    config_path = Path(args.path) if args.path else DEFAULT_CONFIG_PATH

    if args.action == "show":
        config = load_config_from_file(config_path)
        if config is None:
            print(f"No configuration found at: {config_path}")
            print("Use 'config init' to create a default configuration.")
            return 1

        print(f"Configuration from: {config_path}")
        print(f"  Language: {config.language}")
        print(f"  Name service: {config.service.base_url}{config.service.domain_info_path}")
        print(f"  Simulation mode: {config.service.simulation_mode}")
        print(f"  Supported suffixes: {', '.join(config.policy.supported_suffixes)}")
        print(f"  Safe confirmations: {config.policy.safe_confirmations}")
        print(f"  Address checker: {config.policy.address_checker or '-'}")
        print(f"  Log level: {config.logging.level}")
        return 0

    elif args.action == "init":
        if config_path.exists() and not args.force:
            print(f"Configuration already exists at: {config_path}")
            print("Use --force to overwrite.")
            return 1

        config = create_default_config(language=args.language or "en")
        if save_config_to_file(config, config_path):
            print(f"Configuration created at: {config_path}")
            return 0
        return 1

    elif args.action == "validate":
        config = load_config_from_file(config_path)
        if config is None:
            print(f"Error: Could not load config from {config_path}", file=sys.stderr)
            return 1

        try:
            # Building a controller checks suffixes, threshold and checker path
            create_controller(config, resolver=DomainResolverClient(config.service))
            create_logger(config)
        except ConfigurationError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1

        print(f"Configuration at {config_path} is valid.")
        return 0

    return 1


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Simulation mode - no real network requests",
    )
    parser.add_argument(
        "--config", "-c",
        help="Path to configuration file (defaults to environment / .env)",
    )
    parser.add_argument(
        "--language", "-l",
        choices=["en", "de"],
        default=None,
        help="Output language (default: from configuration)",
    )
    parser.add_argument(
        "--address-checker", "-a",
        help="Chain address checker as 'package.module:function'",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="address-resolver",
        description="Resolve wallet recipient input (address or name) to an address",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'resolve' command
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve a single recipient input",
    )
    resolve_parser.add_argument(
        "text",
        help="Address or name to resolve (e.g., alice.sats)",
    )
    _add_common_arguments(resolve_parser)
    resolve_parser.set_defaults(func=cmd_resolve)

    # 'replay' command
    replay_parser = subparsers.add_parser(
        "replay",
        help="Replay a file of successive inputs as keystrokes",
    )
    replay_parser.add_argument(
        "file",
        help="Path to file containing one full input per line",
    )
    replay_parser.add_argument(
        "--interval", "-i",
        type=float,
        default=0.0,
        help="Seconds between keystrokes (default: 0)",
    )
    _add_common_arguments(replay_parser)
    replay_parser.set_defaults(func=cmd_replay)

    # 'config' command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
    )
    config_parser.add_argument(
        "action",
        choices=["show", "init", "validate"],
        help="Configuration action",
    )
    config_parser.add_argument(
        "--path", "-p",
        help="Path to configuration file",
    )
    config_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Force overwrite existing configuration",
    )
    config_parser.add_argument(
        "--language", "-l",
        choices=["en", "de"],
        default="en",
        help="Default language for new configuration",
    )
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())

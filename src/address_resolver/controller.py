"""
Resolution Controller for recipient input.

This module owns the per-keystroke orchestration of recipient resolution:
- Name syntax parsing (domain name vs raw address)
- Address syntax validation for raw addresses
- Asynchronous name service lookups for supported domains
- The confirmation gate applied to lookup results
- Arbitration between overlapping lookups triggered by fast typing

Every keystroke increments a request generation. A lookup result is applied
only if the generation it was started with is still the current one; results
of superseded lookups are discarded without touching any state.
"""

import asyncio
import inspect
from typing import Awaitable, Callable, Optional, Protocol, Union
from urllib.parse import quote

from .address_validator import AddressChecker, AddressValidator, load_address_checker
from .audit_logger import AuditLogger
from .config import SystemConfig
from .confirmation_gate import ConfirmationGate
from .enums import LogLevel, LookupErrorCode, ResolutionState
from .exceptions import AddressResolverError, ConfigurationError, ProtocolError
from .i18n import get_message
from .models import (
    EMPTY_TARGET,
    ResolutionRecord,
    ResolutionSnapshot,
    ResolvedTarget,
)
from .name_parser import NameParser, ParsedName
from .resolver_client import DomainResolverClient


# Characters left unescaped by JavaScript's encodeURIComponent
URI_COMPONENT_SAFE = "-_.!~*'()"


class DomainResolver(Protocol):
    """Anything that can look up the inscription backing a domain name."""

    async def query_domain_info(self, encoded_name: str) -> Optional[ResolutionRecord]: ...


TargetCallback = Callable[[ResolvedTarget], Union[None, Awaitable[None]]]


class ResolutionController:
    """
    Per-input resolution state machine.

    All methods must be called from the event loop that owns the input; the
    only suspension point is the name service lookup, which runs as a task
    and reports back onto the same loop.
    """

    def __init__(
        self,
        parser: NameParser,
        validator: AddressValidator,
        resolver: DomainResolver,
        gate: ConfirmationGate,
        on_target_resolved: Optional[TargetCallback] = None,
        logger: Optional[AuditLogger] = None,
        language: Optional[str] = None,
        initial_target: Optional[ResolvedTarget] = None,
    ) -> None:
        """
        Initialize the resolution controller.

        Args:
            parser: Name syntax parser with the supported suffixes
            validator: Address syntax validator for raw addresses
            resolver: Name service client
            gate: Confirmation gate applied to lookup results
            on_target_resolved: Called whenever the resolved address changes
            logger: Optional audit logger
            language: Language of user-facing messages
            initial_target: Previously chosen recipient to restore
        """
        self._parser = parser
        self._validator = validator
        self._resolver = resolver
        self._gate = gate
        self._on_target_resolved = on_target_resolved
        self._logger = logger
        self._language = language

        self._generation = 0
        self._closed = False
        self._pending: set[asyncio.Task] = set()
        self._callback_tasks: set[asyncio.Future] = set()

        self._input_text = ""
        self._reset_derived_state()

        if initial_target is not None and initial_target.address:
            self._restore(initial_target)

        self._published_address = self._target.address

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> ResolutionState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def input_text(self) -> str:
        return self._input_text

    @property
    def searching(self) -> bool:
        return self._searching

    @property
    def format_error(self) -> str:
        return self._format_error

    @property
    def not_found_error(self) -> str:
        return self._not_found_error

    @property
    def warning(self) -> str:
        return self._warning

    @property
    def resolved_record(self) -> Optional[ResolutionRecord]:
        return self._record

    @property
    def resolved_name(self) -> str:
        """Suffix of the domain that produced the current target, empty otherwise."""
        return self._resolved_name

    @property
    def target(self) -> ResolvedTarget:
        return self._target

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def has_address_checker(self) -> bool:
        """Whether raw addresses can be accepted at all."""
        return self._validator.has_checker

    def snapshot(self) -> ResolutionSnapshot:
        return ResolutionSnapshot(
            state=self._state,
            generation=self._generation,
            input_text=self._input_text,
            searching=self._searching,
            format_error=self._format_error,
            not_found_error=self._not_found_error,
            warning=self._warning,
            notice=(
                get_message("input.name_resolved", self._language)
                if self._resolved_name else ""
            ),
            resolved_record=self._record,
            resolved_name=self._resolved_name,
            target=self._target,
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def on_input_changed(self, raw_text: Optional[str]) -> None:
        """
        Handle a keystroke carrying the full current input.

        Derived state is reset synchronously before any lookup starts, so
        no result of an earlier keystroke stays visible. Input that needs a
        name service lookup must arrive on a running event loop.

        Args:
            raw_text: The complete text now in the input

        Raises:
            ConfigurationError: If a lookup is needed and no event loop is
                running. No state is changed in that case.
        """
        if self._closed:
            self._log(LogLevel.DEBUG, "Input ignored after close", {})
            return

        raw_text = raw_text if isinstance(raw_text, str) else ""
        parsed = self._parser.parse(raw_text.lower()) if raw_text else None

        loop = None
        if parsed is not None and self._parser.is_supported(parsed.suffix):
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                raise ConfigurationError(
                    code="no_running_loop",
                    message="Name lookups require a running event loop",
                    details={"input": raw_text},
                ) from None

        self._generation += 1
        generation = self._generation
        self._input_text = raw_text
        self._reset_derived_state()

        if raw_text:
            if parsed is None:
                self._apply_raw_address(raw_text)
            elif loop is None:
                self._state = ResolutionState.FORMAT_ERROR
                self._format_error = get_message(
                    "input.unsupported_suffix",
                    self._language,
                    suffixes=self._parser.describe_supported(self._language),
                )
            else:
                self._start_lookup(loop, generation, raw_text, parsed)

        self._publish()

    async def wait_idle(self) -> None:
        """Wait until every outstanding lookup has completed or been cancelled."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def aclose(self) -> None:
        """
        Detach the input: supersede and cancel outstanding lookups.

        No state changes and no callbacks happen after close.
        """
        self._closed = True
        self._generation += 1
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _reset_derived_state(self) -> None:
        self._state = ResolutionState.IDLE
        self._searching = False
        self._format_error = ""
        self._not_found_error = ""
        self._warning = ""
        self._record: Optional[ResolutionRecord] = None
        self._resolved_name = ""
        self._target = EMPTY_TARGET

    def _restore(self, target: ResolvedTarget) -> None:
        self._input_text = target.name or target.address
        self._target = target
        self._record = target.meta
        self._resolved_name = target.source_domain
        self._state = ResolutionState.RESOLVED_TRUSTED

    def _apply_raw_address(self, raw_text: str) -> None:
        if self._validator.is_valid(raw_text):
            self._state = ResolutionState.RESOLVED_TRUSTED
            self._target = ResolvedTarget(address=raw_text)
        else:
            self._state = ResolutionState.FORMAT_ERROR
            self._format_error = get_message("input.address_invalid", self._language)

    def _start_lookup(
        self,
        loop: asyncio.AbstractEventLoop,
        generation: int,
        raw_text: str,
        parsed: ParsedName,
    ) -> None:
        self._state = ResolutionState.SEARCHING
        self._searching = True

        self._log(
            LogLevel.INFO,
            f"Looking up {parsed.full_name}",
            {"generation": generation, "suffix": parsed.suffix},
        )

        task = loop.create_task(
            self._lookup(generation, raw_text, parsed)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _lookup(self, generation: int, raw_text: str, parsed: ParsedName) -> None:
        encoded_name = quote(parsed.full_name, safe=URI_COMPONENT_SAFE)

        try:
            record = await self._resolver.query_domain_info(encoded_name)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if self._is_stale(generation, parsed):
                return
            self._apply_failure(raw_text, e)
        else:
            if self._is_stale(generation, parsed):
                return
            self._apply_lookup_result(raw_text, parsed, record)

        self._publish()

    def _is_stale(self, generation: int, parsed: ParsedName) -> bool:
        if generation == self._generation and not self._closed:
            return False
        self._log(
            LogLevel.DEBUG,
            f"Discarding superseded lookup for {parsed.full_name}",
            {"generation": generation, "current_generation": self._generation},
        )
        return True

    def _apply_failure(self, raw_text: str, error: Exception) -> None:
        self._searching = False
        self._state = ResolutionState.FORMAT_ERROR

        error_text = error.message if isinstance(error, AddressResolverError) else str(error)
        self._format_error = get_message(
            "input.lookup_failed", self._language, error=error_text, name=raw_text
        )

        if self._logger:
            self._logger.log_error(
                "ResolutionController",
                "Name lookup failed",
                error=error,
                additional_data={"generation": self._generation},
            )

    def _apply_lookup_result(
        self,
        raw_text: str,
        parsed: ParsedName,
        record: Optional[ResolutionRecord],
    ) -> None:
        self._searching = False

        if record is None:
            self._state = ResolutionState.NOT_FOUND
            self._not_found_error = get_message("input.not_found", self._language, name=raw_text)
            return

        self._record = record
        verdict = self._gate.evaluate(record)

        if not verdict.trusted:
            self._state = ResolutionState.RESOLVED_UNTRUSTED
            self._warning = verdict.message
            self._log(
                LogLevel.WARN,
                f"{parsed.full_name} lacks confirmations",
                {
                    "confirmations": record.confirmations,
                    "required": self._gate.safe_confirmations,
                },
            )
            return

        if not record.owner_address:
            self._record = None
            self._apply_failure(raw_text, ProtocolError(
                code=LookupErrorCode.PARSE_ERROR.value,
                message="Missing owner address in inscription",
                details={"confirmations": record.confirmations},
            ))
            return

        self._state = ResolutionState.RESOLVED_TRUSTED
        self._resolved_name = parsed.suffix
        self._target = ResolvedTarget(
            address=record.owner_address,
            source_domain=parsed.suffix,
            meta=record,
            name=raw_text,
        )

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    def _publish(self) -> None:
        """Notify the caller if the resolved address changed since the last notification."""
        if self._target.address == self._published_address:
            return
        self._published_address = self._target.address

        if self._on_target_resolved is None:
            return

        target = self._target
        try:
            result = self._on_target_resolved(target)
            if inspect.isawaitable(result):
                future = asyncio.ensure_future(result)
                self._callback_tasks.add(future)
                future.add_done_callback(self._callback_done)
        except Exception as e:
            if self._logger:
                self._logger.log_error(
                    "ResolutionController",
                    "Target callback raised",
                    error=e,
                    additional_data={"address": target.address},
                )

    def _callback_done(self, future: asyncio.Future) -> None:
        self._callback_tasks.discard(future)
        if future.cancelled():
            return
        error = future.exception()
        if error is not None and self._logger:
            self._logger.log_error(
                "ResolutionController",
                "Target callback failed",
                error=error,
            )

    def _log(self, level: LogLevel, message: str, data: dict) -> None:
        if self._logger:
            self._logger.log(level, "ResolutionController", message, data)


def create_controller(
    config: SystemConfig,
    resolver: Optional[DomainResolver] = None,
    checker: Optional[AddressChecker] = None,
    on_target_resolved: Optional[TargetCallback] = None,
    logger: Optional[AuditLogger] = None,
    initial_target: Optional[ResolvedTarget] = None,
) -> ResolutionController:
    """
    Wire a controller and its collaborators from configuration.

    Args:
        config: System configuration
        resolver: Name service client; a DomainResolverClient is created if omitted
        checker: Chain-specific address checker; loaded from
                 config.policy.address_checker if omitted
        on_target_resolved: Called whenever the resolved address changes
        logger: Optional audit logger
        initial_target: Previously chosen recipient to restore

    Returns:
        A ready ResolutionController

    Raises:
        ConfigurationError: If the policy constants or the checker path are invalid
    """
    if resolver is None:
        resolver = DomainResolverClient(config.service, logger=logger)

    if checker is None and config.policy.address_checker:
        checker = load_address_checker(config.policy.address_checker)

    return ResolutionController(
        parser=NameParser(config.policy.supported_suffixes),
        validator=AddressValidator(checker, logger=logger),
        resolver=resolver,
        gate=ConfirmationGate(config.policy.safe_confirmations, config.language),
        on_target_resolved=on_target_resolved,
        logger=logger,
        language=config.language,
        initial_target=initial_target,
    )

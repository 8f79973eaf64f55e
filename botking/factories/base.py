"""
Shared factory machinery.

Factories build artifacts from configuration, check domain rules, project
artifacts into records and keep per-factory counters. All mutable state lives
in an ArtifactContext that the caller (or the sync orchestrator) owns.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Generic, NoReturn, TypeVar

from ..dto.base import ArtifactConverter, Record
from ..error_types import ErrorType
from ..exceptions import ConstructionError
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.clock import Clock, IdGenerator, SystemClock, UuidIdGenerator
from ..utils.error_logging import log_and_raise
from ..validators.result import Err, FieldError, Ok, Result

logger = get_logger(__name__)

A = TypeVar("A")
E = TypeVar("E", bound=Enum)


@dataclass
class FactoryStats:
    """Counters for one factory. Lifetime is that of the owning context."""

    factory_name: str
    created: int = 0
    validated: int = 0
    validation_failures: int = 0
    construction_failures: int = 0
    converted: int = 0

    def snapshot(self) -> FactoryStats:
        return replace(self)


@dataclass
class ArtifactContext:
    """Clock, id source and counters shared by the factories of one owner."""

    clock: Clock = field(default_factory=SystemClock)
    ids: IdGenerator = field(default_factory=UuidIdGenerator)
    stats: dict[str, FactoryStats] = field(default_factory=dict)

    def stats_for(self, factory_name: str) -> FactoryStats:
        return self.stats.setdefault(factory_name, FactoryStats(factory_name=factory_name))


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Outcome of a domain-rule check; errors are in rule order."""

    errors: tuple[FieldError, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> list[str]:
        return [error.message for error in self.errors]

    def to_result(self, value: A) -> Result[A]:
        if self.is_valid:
            return Ok(value)
        return Err(self.errors, ErrorType.BUSINESS_RULE_VIOLATION)


@dataclass(frozen=True, slots=True)
class BatchFailure:
    config: Any
    error: str

    @property
    def name(self) -> str | None:
        return self.config.get("name") if isinstance(self.config, Mapping) else None


@dataclass(frozen=True, slots=True)
class BatchCreateResult(Generic[A]):
    artifacts: list[A]
    failures: list[BatchFailure]


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """dto is None whenever validation or conversion failed."""

    dto: Record | None
    validation: ValidationReport


class ArtifactFactory(ABC, Generic[A]):
    """
    Base class for artifact factories.

    Subclasses provide _build() for construction, _rule_violations() for the
    domain rules and a converter for the record projection.
    """

    factory_name: str = "artifact"
    converter: ArtifactConverter[A]

    def __init__(self, context: ArtifactContext | None = None):
        self.context = context or ArtifactContext()
        self._stats = self.context.stats_for(self.factory_name)

    @abstractmethod
    def _build(self, **config: Any) -> A:
        """Construct an artifact; raise ConstructionError on malformed input."""

    @abstractmethod
    def _rule_violations(self, artifact: A) -> list[FieldError]:
        """Return every domain rule the artifact breaks."""

    def create_artifact(self, **config: Any) -> A:
        """
        Build an artifact from keyword configuration.

        Raises:
            ConstructionError: If the configuration is malformed
        """
        try:
            artifact = self._build(**config)
        except ConstructionError:
            self._stats.construction_failures += 1
            raise
        except TypeError as exc:
            # Unknown or missing configuration keys
            self._stats.construction_failures += 1
            self.construction_failed(f"Invalid {self.factory_name} configuration: {exc}")
        self._stats.created += 1
        return artifact

    def construction_failed(self, message: str, **details: Any) -> NoReturn:
        log_and_raise(
            ConstructionError,
            message,
            details=details or None,
            logger_name=__name__,
            artifact_kind=self.factory_name,
        )

    def coerce_enum(self, enum_cls: type[E], value: Any, field_name: str) -> E:
        """Map a raw value onto an enum member or fail construction."""
        try:
            return enum_cls(value)
        except ValueError:
            self.construction_failed(
                f"Invalid {field_name}: {value!r}",
                field=field_name,
                allowed=[member.value for member in enum_cls],
            )

    def require_str(self, value: Any, field_name: str) -> str:
        if not isinstance(value, str):
            self.construction_failed(f"{field_name} must be a string, got {type(value).__name__}", field=field_name)
        return value

    def validate_artifact(self, artifact: A) -> ValidationReport:
        """Check every domain rule and collect all violations."""
        errors = tuple(self._rule_violations(artifact))
        self._stats.validated += 1
        if errors:
            self._stats.validation_failures += 1
            logger.debug(
                "Artifact failed validation",
                factory=self.factory_name,
                error_count=len(errors),
                messages=[error.message for error in errors],
            )
        return ValidationReport(errors)

    def create_validated_artifact(self, **config: Any) -> tuple[A | None, ValidationReport]:
        """Build then validate; construction failures become a creation error entry."""
        try:
            artifact = self.create_artifact(**config)
        except ConstructionError as exc:
            return None, ValidationReport((FieldError("", exc.message, ErrorType.CREATION_ERROR.value),))
        report = self.validate_artifact(artifact)
        return (artifact if report.is_valid else None), report

    def batch_create_artifacts(self, configs: Iterable[Any]) -> BatchCreateResult[A]:
        """
        Build and validate each configuration independently.

        A failure never stops the batch; it is recorded with its configuration
        and the joined error messages.
        """
        artifacts: list[A] = []
        failures: list[BatchFailure] = []
        for config in configs:
            if not isinstance(config, Mapping):
                failures.append(BatchFailure(config, "Configuration must be a mapping"))
                continue
            artifact, report = self.create_validated_artifact(**dict(config))
            if artifact is None:
                failures.append(BatchFailure(dict(config), ", ".join(report.messages)))
            else:
                artifacts.append(artifact)

        logger.info(
            "Batch artifact creation finished",
            factory=self.factory_name,
            created=len(artifacts),
            failed=len(failures),
        )
        return BatchCreateResult(artifacts, failures)

    def to_dto(self, artifact: A) -> Record:
        record = self.converter.to_dto(artifact)
        self._stats.converted += 1
        return record

    def from_dto(self, record: Mapping[str, Any]) -> A:
        return self.converter.from_dto(record)

    def artifact_to_dto_pipeline(self, artifact: A) -> PipelineResult:
        """Validate then convert; invalid artifacts yield no record."""
        report = self.validate_artifact(artifact)
        if not report.is_valid:
            return PipelineResult(None, report)
        try:
            dto = self.to_dto(artifact)
        except ConstructionError as exc:
            conversion_error = FieldError("", exc.message, ErrorType.CONVERSION_ERROR.value)
            return PipelineResult(None, ValidationReport((conversion_error,)))
        return PipelineResult(dto, report)

    def batch_artifacts_to_dto(self, artifacts: Iterable[A]) -> list[PipelineResult]:
        return [self.artifact_to_dto_pipeline(artifact) for artifact in artifacts]

    def get_factory_stats(self) -> FactoryStats:
        return self._stats.snapshot()


def blank(value: str | None) -> bool:
    return value is None or not value.strip()

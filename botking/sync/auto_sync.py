"""
Auto-sync orchestration between artifacts and the persistence collaborator.

AutoSyncOrchestrator owns the bot, item and account factories together with
their ArtifactContext. Every write follows the same pipeline: domain rules,
record projection, Create/Update schema check, persistence call. Expected
failures come back as Err; PersistenceError from the store propagates.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from ..config import get_config
from ..config.models import AppConfig
from ..dto.converters import SLOT_CONVERTERS, InstanceConverter, TemplateConverter
from ..error_types import ErrorMessages, ErrorType
from ..exceptions import BotkingError, GameLogicError, NotFoundError
from ..factories import AccountFactory, ArtifactContext, ArtifactFactory, BotFactory, ItemFactory
from ..factories.base import ValidationReport
from ..game.artifacts import (
    AccountArtifact,
    BotArtifact,
    InstanceArtifact,
    ItemArtifact,
    SlotKind,
    TemplateArtifact,
)
from ..game.artifacts.slots import ITEM_CLASS_FOR_SLOT, SlotRecord
from ..persistence.protocols import BatchOperation, PersistenceProtocol, Record
from ..persistence.tables import (
    INSTANCES,
    PLAYER_ACCOUNTS,
    ROBOTS,
    SHARDS,
    SLOT_TABLES,
    TABLE_FOR_ENTITY,
    TEMPLATES,
)
from ..structured_logging.enhanced_logging_config import get_logger
from ..validators.result import Err, Ok, Result
from ..validators.schema_registry import Entity, SchemaVariant, build_filters, to_update_payload, validate
from .tracking import SyncState, SyncTracker

logger = get_logger(__name__)


class ArtifactKind(StrEnum):
    BOT = "bot"
    ITEM = "item"
    ACCOUNT = "account"


_ENTITY_BY_KIND = {
    ArtifactKind.BOT: Entity.ROBOT,
    ArtifactKind.ITEM: Entity.ITEM,
    ArtifactKind.ACCOUNT: Entity.ACCOUNT,
}


@dataclass(frozen=True, slots=True)
class BatchSaveFailure:
    kind: ArtifactKind
    index: int
    name: str | None
    reason: str


@dataclass
class BatchSaveResult:
    """Settled outcome of save_artifact_batch; saved records keep input order per kind."""

    saved: dict[ArtifactKind, list[Record]] = field(default_factory=lambda: {kind: [] for kind in ArtifactKind})
    failures: list[BatchSaveFailure] = field(default_factory=list)

    @property
    def saved_count(self) -> int:
        return sum(len(records) for records in self.saved.values())

    @property
    def all_saved(self) -> bool:
        return not self.failures


def _rejected(report: ValidationReport) -> Err:
    codes = {error.code for error in report.errors}
    for error_type in (ErrorType.CREATION_ERROR, ErrorType.CONVERSION_ERROR):
        if error_type.value in codes:
            return Err(report.errors, error_type)
    return Err(report.errors, ErrorType.BUSINESS_RULE_VIOLATION)


def _display_name(artifact: Any) -> str | None:
    return getattr(artifact, "name", None) or getattr(artifact, "account_id", None)


def _slot_kind(value: SlotKind | str) -> Result[SlotKind]:
    try:
        return Ok(SlotKind(value))
    except ValueError:
        return Err.single(
            "slot_kind",
            f"Unknown slot kind: {value!r}",
            ErrorType.INVALID_FORMAT,
            allowed=[kind.value for kind in SlotKind],
        )


class AutoSyncOrchestrator:  # pylint: disable=too-many-public-methods
    """Keeps bots, items, accounts, templates, instances and slots in sync with storage."""

    def __init__(
        self,
        persistence: PersistenceProtocol,
        *,
        context: ArtifactContext | None = None,
        config: AppConfig | None = None,
    ):
        self.persistence = persistence
        self.config = config or get_config()
        self.context = context or ArtifactContext()
        self.bot_factory = BotFactory(self.context)
        self.item_factory = ItemFactory(self.context)
        self.account_factory = AccountFactory(self.context)
        self.tracker = SyncTracker(self.context.clock, capacity=self.config.sync.tracker_capacity)
        self._template_converter = TemplateConverter()
        self._instance_converter = InstanceConverter()

    def factory_for(self, kind: ArtifactKind) -> ArtifactFactory[Any]:
        match kind:
            case ArtifactKind.BOT:
                return self.bot_factory
            case ArtifactKind.ITEM:
                return self.item_factory
            case ArtifactKind.ACCOUNT:
                return self.account_factory
        raise ValueError(f"Unknown artifact kind: {kind!r}")

    # Bots, items and accounts

    async def save_bot_artifact(self, bot: BotArtifact) -> Result[Record]:
        return await self._save(ArtifactKind.BOT, bot)

    async def save_item_artifact(self, item: ItemArtifact) -> Result[Record]:
        return await self._save(ArtifactKind.ITEM, item)

    async def save_account_artifact(self, account: AccountArtifact) -> Result[Record]:
        return await self._save(ArtifactKind.ACCOUNT, account)

    async def load_bot_artifact(self, bot_id: str) -> BotArtifact | None:
        return await self._load(ArtifactKind.BOT, bot_id)

    async def load_item_artifact(self, item_id: str) -> ItemArtifact | None:
        return await self._load(ArtifactKind.ITEM, item_id)

    async def load_account_artifact(self, account_id: str) -> AccountArtifact | None:
        return await self._load(ArtifactKind.ACCOUNT, account_id)

    async def update_bot_artifact(self, bot: BotArtifact) -> Result[Record]:
        return await self._update(ArtifactKind.BOT, bot)

    async def update_item_artifact(self, item: ItemArtifact) -> Result[Record]:
        return await self._update(ArtifactKind.ITEM, item)

    async def update_account_artifact(self, account: AccountArtifact) -> Result[Record]:
        return await self._update(ArtifactKind.ACCOUNT, account)

    async def refresh_bot_artifact(self, bot: BotArtifact) -> BotArtifact | None:
        """Reload a bot from storage; a stale identity becomes persisted again."""
        if bot.id is None:
            return None
        return await self._load(ArtifactKind.BOT, bot.id)

    def mark_stale(self, kind: ArtifactKind | str, identity: str) -> bool:
        return self.tracker.mark_stale(ArtifactKind(kind), identity)

    def sync_state(self, kind: ArtifactKind | str, identity: str | None) -> SyncState:
        return self.tracker.state_of(ArtifactKind(kind), identity)

    async def save_artifact_batch(
        self,
        *,
        bots: Iterable[BotArtifact] = (),
        items: Iterable[ItemArtifact] = (),
        accounts: Iterable[AccountArtifact] = (),
    ) -> BatchSaveResult:
        """
        Save many artifacts concurrently and collect every outcome.

        Concurrency is bounded by config.sync.batch_concurrency. Err results
        and BotkingError exceptions become per-item failures; anything else is
        re-raised once all saves have settled.
        """
        jobs = [
            (kind, index, artifact)
            for kind, artifacts in (
                (ArtifactKind.BOT, bots),
                (ArtifactKind.ITEM, items),
                (ArtifactKind.ACCOUNT, accounts),
            )
            for index, artifact in enumerate(artifacts)
        ]
        semaphore = asyncio.Semaphore(self.config.sync.batch_concurrency)

        async def bounded_save(kind: ArtifactKind, artifact: Any) -> Result[Record]:
            async with semaphore:
                return await self._save(kind, artifact)

        outcomes = await asyncio.gather(
            *(bounded_save(kind, artifact) for kind, _, artifact in jobs),
            return_exceptions=True,
        )

        result = BatchSaveResult()
        for (kind, index, artifact), outcome in zip(jobs, outcomes, strict=True):
            if isinstance(outcome, Ok):
                result.saved[kind].append(outcome.value)
            elif isinstance(outcome, Err):
                reason = ", ".join(outcome.messages)
                result.failures.append(BatchSaveFailure(kind, index, _display_name(artifact), reason))
            elif isinstance(outcome, BotkingError):
                result.failures.append(BatchSaveFailure(kind, index, _display_name(artifact), outcome.message))
            else:
                logger.error(
                    "Unexpected error during batch save",
                    kind=kind.value,
                    index=index,
                    error_type=type(outcome).__name__,
                )
                raise outcome

        logger.info(
            "Batch save finished",
            saved=result.saved_count,
            failed=len(result.failures),
            concurrency=self.config.sync.batch_concurrency,
        )
        return result

    # Templates, player accounts and instances

    async def save_template(self, template: TemplateArtifact) -> Result[Record]:
        """Persist a catalog template. Templates are immutable once saved."""
        if template.id is not None:
            return Err.single(
                "id", ErrorMessages.ALREADY_PERSISTED, ErrorType.RESOURCE_CONFLICT, resource_id=template.id
            )
        validated = validate(Entity.TEMPLATE, SchemaVariant.CREATE, self._template_converter.to_dto(template))
        if isinstance(validated, Err):
            return validated
        record = await self.persistence.create(TEMPLATES, validated.value)
        logger.info("Template saved", template_id=record["id"], slug=record["slug"])
        return Ok(record)

    async def load_template(self, template_id: str) -> TemplateArtifact | None:
        record = await self.persistence.find(TEMPLATES, {"id": template_id})
        return self._template_converter.from_dto(record) if record is not None else None

    async def register_player_account(self, shard_id: int, player_id: int, global_player_id: str) -> Result[Record]:
        """Register a player on a shard, creating the shard on first use."""
        validated = validate(
            Entity.PLAYER_ACCOUNT,
            SchemaVariant.CREATE,
            {"shard_id": shard_id, "player_id": player_id, "global_player_id": global_player_id},
        )
        if isinstance(validated, Err):
            return validated
        key = {"shard_id": shard_id, "player_id": player_id}
        if await self.persistence.find(PLAYER_ACCOUNTS, key) is not None:
            return Err.single(
                "player_id",
                "Player account already exists",
                ErrorType.RESOURCE_CONFLICT,
                resource_type=PLAYER_ACCOUNTS,
                resource_id=[shard_id, player_id],
            )

        operations = []
        if await self.persistence.find(SHARDS, {"id": shard_id}) is None:
            operations.append(BatchOperation.create(SHARDS, {"id": shard_id}))
        operations.append(BatchOperation.create(PLAYER_ACCOUNTS, validated.value))
        results = await self.persistence.transaction(operations)
        logger.info("Player account registered", shard_id=shard_id, player_id=player_id)
        return Ok(results[-1])

    async def mint_instance(
        self,
        template_id: str,
        shard_id: int,
        player_id: int,
        bound_to_player: int | None = None,
    ) -> Result[InstanceArtifact]:
        """Create a NEW instance of a template for a registered player."""
        if await self.persistence.find(TEMPLATES, {"id": template_id}) is None:
            return Err.single(
                "item_tpl_id",
                ErrorMessages.TEMPLATE_NOT_FOUND,
                ErrorType.RESOURCE_NOT_FOUND,
                resource_type=TEMPLATES,
                resource_id=template_id,
            )
        if await self.persistence.find(PLAYER_ACCOUNTS, {"shard_id": shard_id, "player_id": player_id}) is None:
            return Err.single(
                "player_id",
                ErrorMessages.PLAYER_ACCOUNT_NOT_FOUND,
                ErrorType.RESOURCE_NOT_FOUND,
                resource_type=PLAYER_ACCOUNTS,
                resource_id=[shard_id, player_id],
            )

        instance = InstanceArtifact(
            template_id=template_id,
            shard_id=shard_id,
            player_id=player_id,
            bound_to_player=bound_to_player,
        )
        validated = validate(Entity.INSTANCE, SchemaVariant.CREATE, self._instance_converter.to_dto(instance))
        if isinstance(validated, Err):
            return validated
        record = await self.persistence.create(INSTANCES, validated.value)
        logger.info("Instance minted", instance_id=record["id"], template_id=template_id, shard_id=shard_id)
        return Ok(self._instance_converter.from_dto(record))

    async def load_instance(self, instance_id: str) -> InstanceArtifact | None:
        record = await self.persistence.find(INSTANCES, {"id": instance_id})
        return self._instance_converter.from_dto(record) if record is not None else None

    async def destroy_instance(self, instance_id: str) -> Result[None]:
        """Delete an instance; equipped instances must be unequipped first."""
        instance = await self.load_instance(instance_id)
        if instance is None:
            return self._instance_not_found(instance_id)
        if instance.is_equipped:
            return Err.single(
                "state", ErrorMessages.INSTANCE_EQUIPPED, ErrorType.GAME_LOGIC_ERROR, resource_id=instance_id
            )
        await self.persistence.delete_record(INSTANCES, {"id": instance_id})
        logger.info("Instance destroyed", instance_id=instance_id)
        return Ok(None)

    # Slots

    async def equip_slot(self, slot: SlotRecord) -> Result[SlotRecord]:
        """
        Put an instance into a robot slot and mark it EQUIPPED.

        The slot row and the instance state change are written in one
        transaction. The template item class must fit the slot kind. An
        occupied slot, or an instance already sitting in any slot, gives
        Err(RESOURCE_CONFLICT).
        """
        converter = SLOT_CONVERTERS[slot.kind]
        table = TABLE_FOR_ENTITY[converter.entity]
        validated = validate(converter.entity, SchemaVariant.CREATE, converter.to_dto(slot))
        if isinstance(validated, Err):
            return validated

        if await self.persistence.find(ROBOTS, {"id": slot.robot_id}) is None:
            return Err.single(
                "robot_id",
                ErrorMessages.RECORD_NOT_FOUND,
                ErrorType.RESOURCE_NOT_FOUND,
                resource_type=ROBOTS,
                resource_id=slot.robot_id,
            )
        instance = await self.load_instance(slot.instance_id)
        if instance is None:
            return self._instance_not_found(slot.instance_id)
        template = await self.load_template(instance.template_id)
        if template is None:
            return Err.single(
                "item_tpl_id",
                ErrorMessages.TEMPLATE_NOT_FOUND,
                ErrorType.RESOURCE_NOT_FOUND,
                resource_type=TEMPLATES,
                resource_id=instance.template_id,
            )
        if template.item_class != ITEM_CLASS_FOR_SLOT[slot.kind]:
            return Err.single(
                "item_inst_id",
                ErrorMessages.SLOT_INCOMPATIBLE,
                ErrorType.BUSINESS_RULE_VIOLATION,
                slot_kind=slot.kind.value,
                item_class=template.item_class.value,
            )
        if await self.persistence.find(table, slot.key) is not None:
            return Err.single("", ErrorMessages.SLOT_OCCUPIED, ErrorType.RESOURCE_CONFLICT, key=slot.key)
        for slot_table in SLOT_TABLES:
            if await self.persistence.find_many(slot_table, {"item_inst_id": slot.instance_id}):
                return Err.single(
                    "item_inst_id",
                    ErrorMessages.INSTANCE_ALREADY_EQUIPPED,
                    ErrorType.RESOURCE_CONFLICT,
                    resource_id=slot.instance_id,
                    table=slot_table,
                )

        try:
            equipped = instance.equip()
        except GameLogicError as exc:
            return Err.single("state", exc.message, ErrorType.GAME_LOGIC_ERROR, resource_id=instance.id)

        results = await self.persistence.transaction(
            [
                BatchOperation.create(table, validated.value),
                BatchOperation.update(INSTANCES, {"id": instance.id}, {"state": equipped.state.value}),
            ]
        )
        logger.info("Slot equipped", slot_kind=slot.kind.value, robot_id=slot.robot_id, instance_id=instance.id)
        return Ok(converter.from_dto(results[0]))

    async def unequip_slot(self, slot_kind: SlotKind | str, key: Mapping[str, Any]) -> Result[SlotRecord]:
        """Empty a slot and move its instance to USED in one transaction."""
        kind = _slot_kind(slot_kind)
        if isinstance(kind, Err):
            return kind
        converter = SLOT_CONVERTERS[kind.value]
        table = TABLE_FOR_ENTITY[converter.entity]
        validated_key = validate(converter.entity, SchemaVariant.DELETE, key)
        if isinstance(validated_key, Err):
            return validated_key

        record = await self.persistence.find(table, validated_key.value)
        if record is None:
            return Err.single(
                "",
                ErrorMessages.RECORD_NOT_FOUND,
                ErrorType.RESOURCE_NOT_FOUND,
                resource_type=table,
                resource_id=list(validated_key.value.values()),
            )

        operations = [BatchOperation.delete(table, validated_key.value)]
        instance = await self.load_instance(record["item_inst_id"])
        if instance is not None:
            try:
                unequipped = instance.unequip()
            except GameLogicError as exc:
                return Err.single("state", exc.message, ErrorType.GAME_LOGIC_ERROR, resource_id=instance.id)
            operations.append(BatchOperation.update(INSTANCES, {"id": instance.id}, {"state": unequipped.state.value}))

        await self.persistence.transaction(operations)
        logger.info("Slot unequipped", slot_kind=converter.kind.value, key=validated_key.value)
        return Ok(converter.from_dto(record))

    async def find_slots(self, slot_kind: SlotKind | str, **criteria: Any) -> Result[list[SlotRecord]]:
        """Query one slot table with Read-schema filters, e.g. robot_id=..."""
        kind = _slot_kind(slot_kind)
        if isinstance(kind, Err):
            return kind
        converter = SLOT_CONVERTERS[kind.value]
        filters = build_filters(converter.entity, criteria)
        if isinstance(filters, Err):
            return filters
        records = await self.persistence.find_many(TABLE_FOR_ENTITY[converter.entity], filters.value)
        return Ok([converter.from_dto(record) for record in records])

    def get_sync_stats(self) -> dict[str, Any]:
        return {
            "states": self.tracker.counts(),
            "factories": {name: stats.snapshot() for name, stats in self.context.stats.items()},
        }

    # Internals

    def _instance_not_found(self, instance_id: str) -> Err:
        return Err.single(
            "item_inst_id",
            ErrorMessages.RECORD_NOT_FOUND,
            ErrorType.RESOURCE_NOT_FOUND,
            resource_type=INSTANCES,
            resource_id=instance_id,
        )

    async def _save(self, kind: ArtifactKind, artifact: Any) -> Result[Record]:
        entity = _ENTITY_BY_KIND[kind]
        if artifact.id is not None:
            return Err.single(
                "id",
                ErrorMessages.ALREADY_PERSISTED,
                ErrorType.RESOURCE_CONFLICT,
                resource_type=TABLE_FOR_ENTITY[entity],
                resource_id=artifact.id,
            )

        pipeline = self.factory_for(kind).artifact_to_dto_pipeline(artifact)
        if pipeline.dto is None:
            return _rejected(pipeline.validation)
        validated = validate(entity, SchemaVariant.CREATE, pipeline.dto)
        if isinstance(validated, Err):
            return validated

        record = await self.persistence.create(TABLE_FOR_ENTITY[entity], validated.value)
        self.tracker.mark_persisted(kind, record["id"])
        logger.info("Artifact saved", kind=kind.value, artifact_id=record["id"])
        return Ok(record)

    async def _load(self, kind: ArtifactKind, identity: str) -> Any:
        record = await self.persistence.find(TABLE_FOR_ENTITY[_ENTITY_BY_KIND[kind]], {"id": identity})
        if record is None:
            logger.debug("Artifact not found", kind=kind.value, artifact_id=identity)
            self.tracker.forget(kind, identity)
            return None
        artifact = self.factory_for(kind).from_dto(record)
        self.tracker.mark_persisted(kind, identity)
        return artifact

    async def _update(self, kind: ArtifactKind, artifact: Any) -> Result[Record]:
        entity = _ENTITY_BY_KIND[kind]
        table = TABLE_FOR_ENTITY[entity]
        if artifact.id is None:
            return Err.single("id", ErrorMessages.IDENTITY_REQUIRED, ErrorType.VALIDATION_ERROR)

        factory = self.factory_for(kind)
        report = factory.validate_artifact(artifact)
        if not report.is_valid:
            return _rejected(report)
        key = {"id": artifact.id}
        validated = validate(
            entity, SchemaVariant.UPDATE, to_update_payload(entity, factory.converter.to_update_payload(artifact), key)
        )
        if isinstance(validated, Err):
            return validated

        changes = {name: value for name, value in validated.value.items() if name not in key}
        try:
            record = await self.persistence.update(table, key, changes)
        except NotFoundError:
            self.tracker.forget(kind, artifact.id)
            return Err.single(
                "id",
                ErrorMessages.RECORD_NOT_FOUND,
                ErrorType.RESOURCE_NOT_FOUND,
                resource_type=table,
                resource_id=artifact.id,
            )
        self.tracker.mark_persisted(kind, artifact.id)
        logger.info("Artifact updated", kind=kind.value, artifact_id=artifact.id, fields=sorted(changes))
        return Ok(record)

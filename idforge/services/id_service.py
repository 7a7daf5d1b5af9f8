"""Business logic for issuing and inspecting identifiers."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field

from idforge.core.config import settings
from idforge.core.error_codes import ValidationErrorCode
from idforge.core.exceptions import ClockRegressionError, ValidationException
from idforge.core.logger import get_logger
from idforge.utils.nanoid import generate_nanoid
from idforge.utils.snowflake_generator import (
    IdGenerator,
    SnowflakeRegistry,
    decode_snowflake_id,
    get_default_registry,
)
from idforge.utils.uid_codec import decode_uid, encode_uid

logger = get_logger(__name__)


class IdData(BaseModel):
    """A freshly issued snowflake ID."""

    id: int = Field(..., description="Snowflake ID")
    worker_id: int = Field(..., description="Worker that issued the ID")
    data_center_id: int = Field(..., description="Data center that issued the ID")


class IdComponentsData(BaseModel):
    """Fields decoded from a snowflake ID."""

    id: int = Field(..., description="Snowflake ID")
    timestamp_ms: int = Field(..., description="Generation time, ms since Unix epoch")
    generated_at: datetime = Field(..., description="Generation time (UTC)")
    worker_id: int = Field(..., description="Worker id")
    data_center_id: int = Field(..., description="Data center id")
    sequence: int = Field(..., description="Sequence within the millisecond")


class IdService:
    """Service exposing ID generation over a shared generator registry."""

    def __init__(self, registry: Optional[SnowflakeRegistry] = None) -> None:
        self.registry = registry or get_default_registry()

    def _generator(
        self, worker_id: Optional[int], data_center_id: Optional[int]
    ) -> IdGenerator:
        if worker_id is None:
            worker_id = settings.snowflake__worker_id
        if data_center_id is None:
            data_center_id = settings.snowflake__data_center_id
        return self.registry.get(worker_id, data_center_id)

    def next_id(
        self, worker_id: Optional[int] = None, data_center_id: Optional[int] = None
    ) -> IdData:
        """Issue one ID."""
        return self.next_ids(1, worker_id, data_center_id)[0]

    def next_ids(
        self,
        count: int,
        worker_id: Optional[int] = None,
        data_center_id: Optional[int] = None,
    ) -> List[IdData]:
        """
        Issue ``count`` consecutive IDs from one generator.

        Raises:
            ValidationException: If count is outside 1..ids__max_batch_size
            InvalidConfigurationError: If worker/data center ids are out of range
            ClockRegressionError: If the clock moved backwards beyond tolerance
        """
        max_batch = settings.ids__max_batch_size
        if count < 1 or count > max_batch:
            raise ValidationException(
                f"count must be between 1 and {max_batch}",
                ValidationErrorCode.VALUE_OUT_OF_RANGE,
                {"count": count, "max": max_batch},
            )

        generator = self._generator(worker_id, data_center_id)
        try:
            ids = [generator.next_id() for _ in range(count)]
        except ClockRegressionError as exc:
            logger.warning(
                "ID issuing refused for worker_id=%s, data_center_id=%s: %s",
                generator.worker_id,
                generator.data_center_id,
                exc.message,
            )
            raise

        return [
            IdData(
                id=value,
                worker_id=generator.worker_id,
                data_center_id=generator.data_center_id,
            )
            for value in ids
        ]

    def decode_id(self, snowflake_id: int) -> IdComponentsData:
        """
        Decode an ID using the registry's epoch.

        Raises:
            ValidationException: If the ID is negative or wider than 63 bits
        """
        if snowflake_id < 0 or snowflake_id.bit_length() > 63:
            raise ValidationException(
                "ID must be a non-negative 64-bit integer",
                ValidationErrorCode.VALUE_OUT_OF_RANGE,
                {"id": snowflake_id},
            )

        components = decode_snowflake_id(snowflake_id, self.registry.epoch_ms)
        return IdComponentsData(
            id=snowflake_id,
            timestamp_ms=components.timestamp_ms,
            generated_at=datetime.fromtimestamp(
                components.timestamp_ms / 1000, tz=timezone.utc
            ),
            worker_id=components.worker_id,
            data_center_id=components.data_center_id,
            sequence=components.sequence,
        )

    def encode_uid(self, value: int, mode: int = 3) -> str:
        return encode_uid(value, mode)

    def decode_uid(self, uid: str, mode: int = 3) -> int:
        return decode_uid(uid, mode)

    def generate_nanoids(self, count: int = 1, size: int = 21) -> List[str]:
        """
        Generate ``count`` NanoIds of ``size`` symbols.

        Raises:
            ValidationException: If count or size are out of range
        """
        max_batch = settings.ids__max_batch_size
        if count < 1 or count > max_batch:
            raise ValidationException(
                f"count must be between 1 and {max_batch}",
                ValidationErrorCode.VALUE_OUT_OF_RANGE,
                {"count": count, "max": max_batch},
            )
        max_size = settings.ids__max_nanoid_size
        if size > max_size:
            raise ValidationException(
                f"size must not exceed {max_size}",
                ValidationErrorCode.VALUE_OUT_OF_RANGE,
                {"size": size, "max": max_size},
            )
        return [generate_nanoid(size) for _ in range(count)]

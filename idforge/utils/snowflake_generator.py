"""
Snowflake ID Generator Utility

Twitter-style 64-bit unique ID generation with worker/data-center partitioning.

ID layout (most significant bit first):

    0 | 41 bits timestamp delta (ms since epoch) | 5 bits data center id
      | 5 bits worker id | 12 bits sequence

Each generator serializes ``next_id()`` behind one lock, so a single instance
can be shared freely between threads. Generators for the same
(worker_id, data_center_id) pair should be shared through a
``SnowflakeRegistry`` rather than constructed twice in one process.
"""

import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from idforge.core.config import DEFAULT_EPOCH_MS, settings
from idforge.core.exceptions import (
    ClockRegressionError,
    IdGenerationException,
    InvalidConfigurationError,
)
from idforge.core.logger import get_logger

logger = get_logger(__name__)

WORKER_ID_BITS = 5
DATA_CENTER_ID_BITS = 5
SEQUENCE_BITS = 12
TIMESTAMP_BITS = 41

MAX_WORKER_ID = (1 << WORKER_ID_BITS) - 1
MAX_DATA_CENTER_ID = (1 << DATA_CENTER_ID_BITS) - 1
SEQUENCE_MASK = (1 << SEQUENCE_BITS) - 1
TIMESTAMP_MASK = (1 << TIMESTAMP_BITS) - 1

WORKER_ID_SHIFT = SEQUENCE_BITS
DATA_CENTER_ID_SHIFT = SEQUENCE_BITS + WORKER_ID_BITS
TIMESTAMP_LEFT_SHIFT = SEQUENCE_BITS + WORKER_ID_BITS + DATA_CENTER_ID_BITS

DEFAULT_TIME_OFFSET_TOLERANCE_MS = 2000

Clock = Callable[[], int]
RandomInt = Callable[[int], int]


def current_millis() -> int:
    """Wall-clock time in milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


def _check_between(field: str, value: int, minimum: int, maximum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfigurationError(field, value, minimum, maximum)
    if value < minimum or value > maximum:
        raise InvalidConfigurationError(field, value, minimum, maximum)
    return value


@dataclass(frozen=True)
class SnowflakeComponents:
    """Fields packed into a snowflake ID."""

    timestamp_ms: int
    data_center_id: int
    worker_id: int
    sequence: int


def decode_snowflake_id(
    snowflake_id: int, epoch_ms: int = DEFAULT_EPOCH_MS
) -> SnowflakeComponents:
    """Split an ID generated against ``epoch_ms`` into its fields."""
    return SnowflakeComponents(
        timestamp_ms=((snowflake_id >> TIMESTAMP_LEFT_SHIFT) & TIMESTAMP_MASK)
        + epoch_ms,
        data_center_id=(snowflake_id >> DATA_CENTER_ID_SHIFT) & MAX_DATA_CENTER_ID,
        worker_id=(snowflake_id >> WORKER_ID_SHIFT) & MAX_WORKER_ID,
        sequence=snowflake_id & SEQUENCE_MASK,
    )


class IdGenerator:
    """
    Thread-safe snowflake ID generator.

    Small backward clock jumps (up to ``time_offset_tolerance_ms``) are
    absorbed by reusing the last timestamp; larger ones raise
    ``ClockRegressionError``. When the 4096 sequence values of a millisecond
    are used up, ``next_id()`` polls the clock until the next millisecond.
    """

    def __init__(
        self,
        worker_id: int = 0,
        data_center_id: int = 0,
        random_sequence_limit: int = 0,
        time_offset_tolerance_ms: int = DEFAULT_TIME_OFFSET_TOLERANCE_MS,
        epoch_ms: int = DEFAULT_EPOCH_MS,
        clock: Optional[Clock] = None,
        random_int: Optional[RandomInt] = None,
    ) -> None:
        """
        Args:
            worker_id: Worker identifier, 0..31
            data_center_id: Data center identifier, 0..31
            random_sequence_limit: Exclusive upper bound of the random sequence
                a new millisecond starts from, 0..4095; 0 or 1 always start at 0
            time_offset_tolerance_ms: Largest backward clock jump absorbed
            epoch_ms: Zero point subtracted from the clock before encoding
            clock: Millisecond clock, defaults to the wall clock
            random_int: ``random_int(bound)`` returning a value in [0, bound)

        Raises:
            InvalidConfigurationError: If an identifier, the random limit or
                the tolerance is out of range
        """
        self.worker_id = _check_between("worker_id", worker_id, 0, MAX_WORKER_ID)
        self.data_center_id = _check_between(
            "data_center_id", data_center_id, 0, MAX_DATA_CENTER_ID
        )
        self.random_sequence_limit = _check_between(
            "random_sequence_limit", random_sequence_limit, 0, SEQUENCE_MASK
        )
        self.time_offset_tolerance_ms = _check_between(
            "time_offset_tolerance_ms", time_offset_tolerance_ms, 0, TIMESTAMP_MASK
        )
        self.epoch_ms = epoch_ms

        self._clock = clock or current_millis
        self._random_int = random_int or random.randrange
        self._lock = threading.Lock()
        self._sequence = 0
        self._last_timestamp = -1

        logger.debug(
            "IdGenerator created (worker_id=%s, data_center_id=%s, epoch_ms=%s)",
            worker_id,
            data_center_id,
            epoch_ms,
        )

    @property
    def last_timestamp_ms(self) -> int:
        """Timestamp of the last generated ID, -1 before the first one."""
        return self._last_timestamp

    def next_id(self) -> int:
        """
        Generate the next unique ID.

        Returns:
            int: A positive 64-bit ID

        Raises:
            ClockRegressionError: If the clock moved backwards beyond tolerance
            IdGenerationException: If the clock is before the epoch or more
                than 2**41 ms past it
        """
        with self._lock:
            timestamp = self._clock()
            last = self._last_timestamp

            if timestamp < last:
                backward_ms = last - timestamp
                if backward_ms > self.time_offset_tolerance_ms:
                    logger.warning(
                        "Clock moved backwards by %dms (worker_id=%s, data_center_id=%s)",
                        backward_ms,
                        self.worker_id,
                        self.data_center_id,
                    )
                    raise ClockRegressionError(backward_ms, last)
                # within tolerance, e.g. an NTP correction
                logger.debug("Absorbed %dms backward clock jump", backward_ms)
                timestamp = last

            if timestamp == last:
                sequence = (self._sequence + 1) & SEQUENCE_MASK
                if sequence == 0:
                    timestamp = self._til_next_millis(last)
            elif self.random_sequence_limit > 1:
                sequence = self._random_int(self.random_sequence_limit)
            else:
                sequence = 0

            delta = timestamp - self.epoch_ms
            if delta < 0 or delta > TIMESTAMP_MASK:
                logger.error(
                    "Timestamp %d does not fit 41 bits past epoch %d",
                    timestamp,
                    self.epoch_ms,
                )
                raise IdGenerationException(
                    "Clock is outside the 41-bit range of the configured epoch",
                    details={"timestamp_ms": timestamp, "epoch_ms": self.epoch_ms},
                )

            self._sequence = sequence
            self._last_timestamp = timestamp

            return (
                (delta << TIMESTAMP_LEFT_SHIFT)
                | (self.data_center_id << DATA_CENTER_ID_SHIFT)
                | (self.worker_id << WORKER_ID_SHIFT)
                | sequence
            )

    def next_id_str(self) -> str:
        """Generate the next unique ID as a decimal string."""
        return str(self.next_id())

    def _til_next_millis(self, last_timestamp: int) -> int:
        logger.debug("Sequence exhausted at %d, waiting for next millisecond", last_timestamp)
        timestamp = self._clock()
        while timestamp == last_timestamp:
            # yield so other threads are not starved while we spin
            time.sleep(0)
            timestamp = self._clock()
        if timestamp < last_timestamp:
            raise ClockRegressionError(last_timestamp - timestamp, last_timestamp)
        return timestamp

    def decode_timestamp(self, snowflake_id: int) -> int:
        """Absolute generation time (ms since the Unix epoch) of an ID."""
        return ((snowflake_id >> TIMESTAMP_LEFT_SHIFT) & TIMESTAMP_MASK) + self.epoch_ms

    def decode_worker_id(self, snowflake_id: int) -> int:
        return (snowflake_id >> WORKER_ID_SHIFT) & MAX_WORKER_ID

    def decode_data_center_id(self, snowflake_id: int) -> int:
        return (snowflake_id >> DATA_CENTER_ID_SHIFT) & MAX_DATA_CENTER_ID

    def decode_sequence(self, snowflake_id: int) -> int:
        return snowflake_id & SEQUENCE_MASK

    def decode(self, snowflake_id: int) -> SnowflakeComponents:
        """Split an ID into its timestamp, data center, worker and sequence."""
        return decode_snowflake_id(snowflake_id, self.epoch_ms)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(worker_id={self.worker_id}, "
            f"data_center_id={self.data_center_id})"
        )


class SnowflakeRegistry:
    """
    Shares one ``IdGenerator`` per (worker_id, data_center_id) pair.

    Generator options given here apply to every generator the registry
    creates. Creation is guarded by a lock, so concurrent first use of a key
    still yields a single instance.
    """

    def __init__(
        self,
        random_sequence_limit: int = 0,
        time_offset_tolerance_ms: int = DEFAULT_TIME_OFFSET_TOLERANCE_MS,
        epoch_ms: int = DEFAULT_EPOCH_MS,
        clock: Optional[Clock] = None,
        random_int: Optional[RandomInt] = None,
    ) -> None:
        self.random_sequence_limit = random_sequence_limit
        self.time_offset_tolerance_ms = time_offset_tolerance_ms
        self.epoch_ms = epoch_ms
        self._clock = clock
        self._random_int = random_int
        self._generators: Dict[Tuple[int, int], IdGenerator] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls) -> "SnowflakeRegistry":
        """Build a registry from the snowflake__* settings."""
        return cls(
            random_sequence_limit=settings.snowflake__random_sequence_limit,
            time_offset_tolerance_ms=settings.snowflake__time_offset_tolerance_ms,
            epoch_ms=settings.snowflake__epoch_ms,
        )

    def get(self, worker_id: int, data_center_id: int) -> IdGenerator:
        """
        Return the generator for a worker/data-center pair, creating it on first use.

        Raises:
            InvalidConfigurationError: If either id is out of range
        """
        _check_between("worker_id", worker_id, 0, MAX_WORKER_ID)
        _check_between("data_center_id", data_center_id, 0, MAX_DATA_CENTER_ID)
        key = (worker_id, data_center_id)
        generator = self._generators.get(key)
        if generator is not None:
            return generator
        with self._lock:
            generator = self._generators.get(key)
            if generator is None:
                generator = IdGenerator(
                    worker_id=worker_id,
                    data_center_id=data_center_id,
                    random_sequence_limit=self.random_sequence_limit,
                    time_offset_tolerance_ms=self.time_offset_tolerance_ms,
                    epoch_ms=self.epoch_ms,
                    clock=self._clock,
                    random_int=self._random_int,
                )
                self._generators[key] = generator
                logger.debug(
                    "Registered snowflake generator for worker_id=%s, data_center_id=%s",
                    worker_id,
                    data_center_id,
                )
            return generator

    def clear(self) -> None:
        with self._lock:
            self._generators.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._generators

    def __len__(self) -> int:
        return len(self._generators)


_default_registry: Optional[SnowflakeRegistry] = None
_default_registry_lock = threading.Lock()


def get_default_registry() -> SnowflakeRegistry:
    """
    Get the process-wide registry configured from settings.

    Returns:
        SnowflakeRegistry: The shared registry
    """
    global _default_registry
    if _default_registry is None:
        with _default_registry_lock:
            if _default_registry is None:
                _default_registry = SnowflakeRegistry.from_settings()
    return _default_registry


def get_snowflake_generator(
    worker_id: Optional[int] = None, data_center_id: Optional[int] = None
) -> IdGenerator:
    """
    Get a shared generator; missing ids fall back to the configured defaults.
    """
    if worker_id is None:
        worker_id = settings.snowflake__worker_id
    if data_center_id is None:
        data_center_id = settings.snowflake__data_center_id
    return get_default_registry().get(worker_id, data_center_id)


def generate_snowflake_id(
    worker_id: Optional[int] = None, data_center_id: Optional[int] = None
) -> int:
    """
    Convenience function to generate a snowflake ID.

    Returns:
        int: Unique distributed ID as integer
    """
    return get_snowflake_generator(worker_id, data_center_id).next_id()


def generate_snowflake_id_str(
    worker_id: Optional[int] = None, data_center_id: Optional[int] = None
) -> str:
    """
    Convenience function to generate a snowflake ID as string.

    Returns:
        str: Unique distributed ID as string
    """
    return str(generate_snowflake_id(worker_id, data_center_id))

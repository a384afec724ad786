"""
In-Memory Property Store

Holds the current generation of property records. Readers grab an immutable
snapshot reference without locking; writers build the next snapshot first and
take the lock only to swap it in.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from src.japanese_properties.errors import PropertyNotFoundError
from src.japanese_properties.models.property import PropertyRecord
from src.japanese_properties.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StoreSnapshot:
    """
    One complete generation of records.

    Attributes:
        generation: Sequence number, 0 for the initial empty store
        records: Records ordered by id
        by_id: Read-only id index over the same records
        loaded_at: When this generation was installed (UTC)
    """

    generation: int
    records: Tuple[PropertyRecord, ...] = ()
    by_id: Mapping[int, PropertyRecord] = field(default_factory=lambda: MappingProxyType({}))
    loaded_at: Optional[datetime] = None

    @classmethod
    def build(cls, generation: int, records: Iterable[PropertyRecord]) -> "StoreSnapshot":
        index = {}
        for record in records:
            if record.id in index:
                raise ValueError(f"Duplicate property id in generation: {record.id}")
            index[record.id] = record

        ordered = tuple(index[key] for key in sorted(index))
        return cls(
            generation=generation,
            records=ordered,
            by_id=MappingProxyType(index),
            loaded_at=datetime.now(timezone.utc),
        )

    def __len__(self) -> int:
        return len(self.records)


class PropertyStore:
    """
    Process-local store of property records.

    Construct one per application (or per test); nothing here is global.
    """

    def __init__(self):
        self._write_lock = Lock()
        self._snapshot = StoreSnapshot(generation=0)
        logger.debug("property_store_initialized")

    def snapshot(self) -> StoreSnapshot:
        """Return the generation visible right now."""
        return self._snapshot

    def get_all(self) -> Tuple[PropertyRecord, ...]:
        """
        Get every record of the current generation.

        Returns:
            Tuple of records ordered by id
        """
        return self._snapshot.records

    def get_by_id(self, property_id: int) -> PropertyRecord:
        """
        Get a single record from the current generation.

        Args:
            property_id: Record id assigned at ingestion

        Returns:
            The matching record

        Raises:
            PropertyNotFoundError: If the id is not in the current generation
        """
        record = self._snapshot.by_id.get(property_id)
        if record is None:
            raise PropertyNotFoundError(property_id)
        return record

    def replace_all(self, new_records: Iterable[PropertyRecord]) -> int:
        """
        Atomically install a new generation, discarding the current one.

        Args:
            new_records: Complete record set for the new generation

        Returns:
            The new generation number

        Raises:
            ValueError: If two records share an id (store is left unchanged)
        """
        candidate = StoreSnapshot.build(generation=0, records=new_records)

        with self._write_lock:
            previous = self._snapshot
            generation = previous.generation + 1
            self._snapshot = StoreSnapshot(
                generation=generation,
                records=candidate.records,
                by_id=candidate.by_id,
                loaded_at=candidate.loaded_at,
            )

        logger.info(
            "store_generation_replaced",
            generation=generation,
            record_count=len(candidate),
            previous_record_count=len(previous),
        )
        return generation

    def __len__(self) -> int:
        return len(self._snapshot)

"""
Emission sets: the timed items shown on the timeline and their file store.

- An Emission has a name and a start offset in whole milliseconds (>= 0)
- An EmissionSet is an ordered collection; the timeline identifies sets
  and emissions by object identity, never by value
- EmissionSetStore owns the current set, persists it as JSON and notifies
  observers after each mutation
"""

import copy
import json
import logging
import pathlib
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterator

from custom_types import EmissionRecord, EmissionSetRecord
from error_handler import EmissionFileError

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(eq=False)
class Emission:
    """One timed emission. Equality is identity."""
    name: str
    start_offset_ms: int = 0
    id: str = field(default_factory=_new_id)

    def to_record(self) -> EmissionRecord:
        return {"id": self.id, "name": self.name, "startOffsetMs": int(self.start_offset_ms)}

    @classmethod
    def from_record(cls, record: EmissionRecord) -> "Emission":
        """Build an emission from its file record.

        Raises:
            EmissionFileError: If the name is missing or the offset is not a non-negative integer
        """
        try:
            name = record["name"]
        except (KeyError, TypeError) as e:
            raise EmissionFileError(f"Emission record without a name: {record!r}") from e

        try:
            start = int(record.get("startOffsetMs", 0))
        except (TypeError, ValueError) as e:
            raise EmissionFileError(f"Emission '{name}' has an invalid start offset: {e}") from e
        if start < 0:
            raise EmissionFileError(f"Emission '{name}' has a negative start offset: {start}")

        return cls(name=str(name), start_offset_ms=start, id=record.get("id") or _new_id())


class EmissionSet:
    """Ordered collection of emissions."""

    def __init__(self, emissions: list[Emission] | None = None, name: str = "") -> None:
        self.name = name
        self.emissions: list[Emission] = list(emissions or [])

    def __iter__(self) -> Iterator[Emission]:
        return iter(self.emissions)

    def __len__(self) -> int:
        return len(self.emissions)

    def __getitem__(self, index: int) -> Emission:
        return self.emissions[index]

    def __contains__(self, emission: object) -> bool:
        return self.index_of(emission) != -1

    def index_of(self, emission: object) -> int:
        """Position of `emission` by identity, -1 when absent."""
        for i, candidate in enumerate(self.emissions):
            if candidate is emission:
                return i
        return -1

    def add(self, emission: Emission) -> None:
        self.emissions.append(emission)

    def insert(self, index: int, emission: Emission) -> None:
        self.emissions.insert(index, emission)

    def remove(self, emission: Emission) -> bool:
        """Remove by identity. Returns False when the emission is not in the set."""
        index = self.index_of(emission)
        if index == -1:
            return False
        del self.emissions[index]
        return True

    def to_record(self) -> EmissionSetRecord:
        return {"name": self.name, "emissions": [e.to_record() for e in self.emissions]}

    @classmethod
    def from_record(cls, record: EmissionSetRecord) -> "EmissionSet":
        if not isinstance(record, dict):
            raise EmissionFileError("Emission set file must contain a JSON object")
        emissions = record.get("emissions", [])
        if not isinstance(emissions, list):
            raise EmissionFileError("'emissions' must be a list")
        return cls([Emission.from_record(r) for r in emissions], name=str(record.get("name", "")))


class EmissionSetObserver(ABC):
    """Abstract base class for emission set change observers."""

    @abstractmethod
    def on_emission_set_changed(self, operation: str, **kwargs) -> None:
        """Called after the set was mutated or saved."""
        pass


class EmissionSetStore:
    """Holds the current emission set and persists it to a JSON file."""

    def __init__(self, emission_set: EmissionSet | None = None,
                 path: str | pathlib.Path | None = None) -> None:
        self.emission_set = emission_set if emission_set is not None else EmissionSet()
        self.path = pathlib.Path(path) if path is not None else None
        self._observers: list[EmissionSetObserver] = []

    def add_observer(self, observer: EmissionSetObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: EmissionSetObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self, operation: str, **kwargs) -> None:
        for observer in self._observers:
            observer.on_emission_set_changed(operation, **kwargs)

    def load(self, path: str | pathlib.Path) -> EmissionSet:
        """Load a set from disk, replacing the current one with a new object.

        Raises:
            EmissionFileError: If the file cannot be read or parsed
        """
        path = pathlib.Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                record = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise EmissionFileError(f"Cannot read emission set '{path}': {e}") from e

        self.emission_set = EmissionSet.from_record(record)
        self.path = path
        logger.info("Loaded %d emissions from %s", len(self.emission_set), path)
        self._notify('load', emission_set=self.emission_set)
        return self.emission_set

    def save(self) -> None:
        """Write the current set to its path; a store without a path only notifies."""
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(self.emission_set.to_record(), f, indent=2)
            logger.info("Saved %d emissions to %s", len(self.emission_set), self.path)
        self._notify('save', emission_set=self.emission_set)

    def clone(self, emission: Emission) -> Emission | None:
        """Insert a copy of `emission` right after it, then save.

        Observers hear about the clone even when saving fails.

        Returns:
            The new emission, or None if `emission` is not in the current set
        """
        index = self.emission_set.index_of(emission)
        if index == -1:
            logger.debug("Clone ignored: emission %s not in set", emission.name)
            return None

        clone = copy.copy(emission)
        clone.id = _new_id()
        clone.name = f"{emission.name} (clone)"
        self.emission_set.insert(index + 1, clone)
        try:
            self.save()
        finally:
            self._notify('clone', source=emission, emission=clone)
        return clone

    def remove(self, emission: Emission) -> bool:
        """Remove `emission` from the current set, then save."""
        if not self.emission_set.remove(emission):
            logger.debug("Remove ignored: emission %s not in set", emission.name)
            return False
        try:
            self.save()
        finally:
            self._notify('remove', emission=emission)
        return True

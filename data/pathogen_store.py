"""
Abstract pathogen store interface for pluggable reference data.

Allows swapping the bundled mock table for a real pathogen database without
changing the triage code.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

from triage.types import PathogenProfile, SurvivalRange

TRANSMISSION_VECTORS = ("air", "fluid")


@dataclass(frozen=True)
class PathogenRecord:
    """One row of pathogen reference data."""

    id: str
    name: str
    incubation_period: float        # days
    transmission_vector: str        # 'air' or 'fluid'
    min_humidity_survival: float    # percent
    r0_score: float
    symptoms: Tuple[str, ...] = ()
    max_humidity_survival: float = 100.0

    def __post_init__(self):
        if self.incubation_period < 0:
            raise ValueError("Incubation period must be >= 0")
        if self.transmission_vector not in TRANSMISSION_VECTORS:
            raise ValueError(f"Invalid transmission vector: {self.transmission_vector}")
        if self.r0_score < 0:
            raise ValueError("R0 score must be >= 0")
        object.__setattr__(self, "symptoms", tuple(self.symptoms))

    @classmethod
    def from_dict(cls, data: dict) -> "PathogenRecord":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            incubation_period=data["incubation_period"],
            transmission_vector=data["transmission_vector"],
            min_humidity_survival=data["min_humidity_survival"],
            r0_score=data["r0_score"],
            symptoms=tuple(data.get("symptoms", ())),
            max_humidity_survival=data.get("max_humidity_survival", 100.0),
        )

    def to_profile(self) -> PathogenProfile:
        """Triage view of this record.

        Raises:
            InvalidInputError: If the humidity bounds are not a valid range.
        """
        return PathogenProfile(
            id=self.id,
            name=self.name,
            symptoms=self.symptoms,
            survival_range=SurvivalRange(
                min_humidity=self.min_humidity_survival,
                max_humidity=self.max_humidity_survival,
            ),
        )


class PathogenStore(ABC):
    """Abstract base class for pathogen reference sources.

    All methods return fresh lists; records themselves are immutable.
    """

    @abstractmethod
    def get_all_pathogens(self) -> List[PathogenRecord]:
        """Return every known pathogen."""
        ...

    def get_pathogen_by_id(self, pathogen_id: str) -> Optional[PathogenRecord]:
        """Return the pathogen with the given id, or None."""
        for record in self.get_all_pathogens():
            if record.id == pathogen_id:
                return record
        return None


class MockPathogenStore(PathogenStore):
    """Wraps the bundled mock_data.py table."""

    def get_all_pathogens(self) -> List[PathogenRecord]:
        from data.mock_data import get_pathogen_records
        return [PathogenRecord.from_dict(d) for d in get_pathogen_records()]


class FilePathogenStore(PathogenStore):
    """Load pathogen reference data from a JSON file on disk.

    Args:
        path: Path to a JSON file with an array of pathogen dicts.

    Raises:
        ValueError: If required keys are missing or data is invalid.
        FileNotFoundError: If the file does not exist.
    """

    _REQUIRED_KEYS = {
        "id", "name", "incubation_period", "transmission_vector",
        "min_humidity_survival", "r0_score",
    }

    def __init__(self, path: str):
        self._records = self._load_records(path)

    @classmethod
    def _load_records(cls, path: str) -> List[PathogenRecord]:
        with open(path) as f:
            data = json.load(f)
        if not isinstance(data, list) or len(data) == 0:
            raise ValueError(f"Pathogen file must contain a non-empty JSON array: {path}")
        records = []
        for i, entry in enumerate(data):
            missing = cls._REQUIRED_KEYS - set(entry.keys())
            if missing:
                raise ValueError(
                    f"Pathogen #{i} missing required keys {missing} in {path}"
                )
            records.append(PathogenRecord.from_dict(entry))
        ids = [r.id for r in records]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Duplicate pathogen ids in {path}")
        return records

    def get_all_pathogens(self) -> List[PathogenRecord]:
        return list(self._records)

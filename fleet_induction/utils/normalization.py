# fleet_induction/utils/normalization.py
from typing import Any, Dict, Iterable, List, Mapping, Union
import logging

from pydantic import ValidationError

from fleet_induction.models.errors import InvalidTrainsetError
from fleet_induction.models.trainset import Trainset

logger = logging.getLogger(__name__)

TrainsetLike = Union[Trainset, Mapping[str, Any]]


def _record_id(record: Any) -> Any:
    if isinstance(record, Mapping):
        return record.get("id") or record.get("trainset_id")
    return getattr(record, "id", None)


def parse_trainset(record: TrainsetLike, index: int = 0) -> Trainset:
    """Validate one trainset record. Never guesses defaults for bad data."""
    if isinstance(record, Trainset):
        return record
    if not isinstance(record, Mapping):
        raise InvalidTrainsetError(
            f"Trainset #{index} must be an object, got {type(record).__name__}", index=index
        )
    try:
        return Trainset.model_validate(dict(record))
    except ValidationError as e:
        trainset_id = _record_id(record)
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise InvalidTrainsetError(
            f"Trainset #{index} ({trainset_id or 'unknown id'}) is malformed: {fields}",
            index=index,
            trainset_id=trainset_id,
            validation_error=e,
        ) from e


def parse_fleet(records: Iterable[TrainsetLike]) -> List[Trainset]:
    """Validate a whole fleet snapshot, aborting on the first malformed record."""
    trainsets = [parse_trainset(record, i) for i, record in enumerate(records)]

    seen: Dict[str, int] = {}
    for i, trainset in enumerate(trainsets):
        if trainset.id in seen:
            raise InvalidTrainsetError(
                f"Duplicate trainset id {trainset.id!r} at #{seen[trainset.id]} and #{i}",
                index=i,
                trainset_id=trainset.id,
            )
        seen[trainset.id] = i
    return trainsets

"""Tagged outcomes of incident store operations.

Store functions never raise for expected failures; callers branch on the
result type instead::

    result = incident_store.get_incident(db, incident_id)
    if isinstance(result, NotFound):
        ...
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Ok:
    value: Any


@dataclass(frozen=True)
class ValidationFailed:
    errors: list[dict] = field(default_factory=list)


@dataclass(frozen=True)
class NotFound:
    incident_id: str


@dataclass(frozen=True)
class StoreFailure:
    message: str


StoreResult = Ok | ValidationFailed | NotFound | StoreFailure

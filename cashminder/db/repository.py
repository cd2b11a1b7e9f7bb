from typing import Dict, Generic, List, Optional, Protocol, Type, TypeVar, Union

from pydantic import BaseModel

from cashminder.models.query import OwnerQuery, TransactionQuery

ModelT = TypeVar("ModelT", bound=BaseModel)

Query = Union[TransactionQuery, OwnerQuery]


class Repository(Protocol[ModelT]):
    """Storage seam used by the ledger service. Records are keyed by ``id``."""

    def get(self, record_id: str) -> Optional[ModelT]:
        ...

    def list(self, query: Optional[Query] = None) -> List[ModelT]:
        ...

    def save(self, record: ModelT) -> ModelT:
        ...

    def delete(self, record_id: str) -> bool:
        ...


class InMemoryRepository(Generic[ModelT]):
    def __init__(self, model: Type[ModelT]) -> None:
        self.model = model
        self._items: Dict[str, ModelT] = {}

    def get(self, record_id: str) -> Optional[ModelT]:
        return self._items.get(record_id)

    def list(self, query: Optional[Query] = None) -> List[ModelT]:
        records = list(self._items.values())
        if query is None:
            return records
        return query.apply(records)

    def save(self, record: ModelT) -> ModelT:
        self._items[record.id] = record
        return record

    def delete(self, record_id: str) -> bool:
        return self._items.pop(record_id, None) is not None

from .cache import EntityCache
from .composer import QueryComposer, QueryDescriptor
from .debounce import SearchDebouncer
from .executor import QueryExecutor, QueryResult
from .mutations import MutationGateway
from .service import EntityPipeline
from .status import OperationStatus
from .view_state import PageSpec, SortDirection, SortSpec, ViewStateStore, sort_entities

__all__ = [
    "EntityCache",
    "EntityPipeline",
    "MutationGateway",
    "OperationStatus",
    "PageSpec",
    "QueryComposer",
    "QueryDescriptor",
    "QueryExecutor",
    "QueryResult",
    "SearchDebouncer",
    "SortDirection",
    "SortSpec",
    "ViewStateStore",
    "sort_entities",
]

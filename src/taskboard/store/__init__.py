from .rest import RestStore, StoreResponse, TableQuery, parse_content_range

__all__ = ["RestStore", "StoreResponse", "TableQuery", "parse_content_range"]

"""
Storage abstraction layer.

Provides pluggable backends for the Record Store, the durable ordered
map from message id to message.

Supported backends:
- SQLite (default, single local file)
- PostgreSQL
- MongoDB
"""

from core.storage.base import (
    BaseRecordStore,
    MessageRecord,
    utc_now,
)
from core.storage.factory import (
    create_record_store,
    get_storage_backend,
    open_record_store,
    StorageBackend,
)

__all__ = [
    # Abstract interface and record type
    "BaseRecordStore",
    "MessageRecord",
    "utc_now",
    # Factory functions
    "create_record_store",
    "get_storage_backend",
    "open_record_store",
    "StorageBackend",
]

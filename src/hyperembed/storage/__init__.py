"""Binary codec, Arrow schema and configuration."""

from hyperembed.storage.codec import (
    BufferHeader,
    decode_embeddings,
    decode_matrix,
    encode_embeddings,
    read_header,
)
from hyperembed.storage.config import EngineConfig
from hyperembed.storage.schema import (
    create_embedding_schema,
    embeddings_to_table,
    table_to_embeddings,
)

__all__ = [
    "BufferHeader",
    "EngineConfig",
    "create_embedding_schema",
    "decode_embeddings",
    "decode_matrix",
    "embeddings_to_table",
    "encode_embeddings",
    "read_header",
    "table_to_embeddings",
]

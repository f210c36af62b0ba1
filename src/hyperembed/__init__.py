"""hyperembed: hyperbolic embedding geometry and binary codec core."""

from hyperembed.api import (
    compute_hyperbolic_distance,
    generate_embeddings,
    pairwise_distances,
    project_from_hyperbolic,
    project_to_hyperbolic,
)
from hyperembed.core import (
    Embedding,
    Err,
    ErrorKind,
    Graph,
    HyperembedError,
    InvalidDimensionError,
    MalformedBufferError,
    NullInputError,
    Ok,
    OutOfRangeError,
    Vector,
    create_vector,
)
from hyperembed.embeddings import OptimizedProvider, ProjectionEngine
from hyperembed.storage import EngineConfig, decode_embeddings, encode_embeddings

__version__ = "0.1.0"

__all__ = [
    "Embedding",
    "EngineConfig",
    "Err",
    "ErrorKind",
    "Graph",
    "HyperembedError",
    "InvalidDimensionError",
    "MalformedBufferError",
    "NullInputError",
    "Ok",
    "OptimizedProvider",
    "OutOfRangeError",
    "ProjectionEngine",
    "Vector",
    "compute_hyperbolic_distance",
    "create_vector",
    "decode_embeddings",
    "encode_embeddings",
    "generate_embeddings",
    "pairwise_distances",
    "project_from_hyperbolic",
    "project_to_hyperbolic",
]

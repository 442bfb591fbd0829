"""Method surfaces: what a double must answer.

Provides type descriptors, method signatures and surface descriptors, plus
merging of several surfaces into one intersection surface.

Python 3.13+. Zero external dependencies.
"""

from .signature import (
    NO_DEFAULT,
    MethodSignature,
    MethodSurfaceDescriptor,
    ParameterSpec,
    merge_surfaces,
    variadic_signature,
)
from .types import (
    BOOLEAN,
    BYTES,
    FLOAT,
    INTEGER,
    MIXED,
    SELF,
    TEXT,
    VOID,
    TypeDescriptor,
    enum_of,
    iterator_of,
    mapping_of,
    nullable,
    object_of,
    sequence_of,
    set_of,
    unresolved,
)

__all__ = [
    "BOOLEAN",
    "BYTES",
    "FLOAT",
    "INTEGER",
    "MIXED",
    "NO_DEFAULT",
    "SELF",
    "TEXT",
    "VOID",
    "MethodSignature",
    "MethodSurfaceDescriptor",
    "ParameterSpec",
    "TypeDescriptor",
    "enum_of",
    "iterator_of",
    "mapping_of",
    "merge_surfaces",
    "nullable",
    "object_of",
    "sequence_of",
    "set_of",
    "unresolved",
    "variadic_signature",
]

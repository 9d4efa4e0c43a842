"""Shared type definitions for type checking.

Uses NewType for IDs to provide compile-time type safety - prevents mixing
different ID types (e.g., passing JobID where DatasetID expected).

Uses TypeAlias for complex types that are purely structural.
"""

from typing import NewType, TypeAlias

# ID types using NewType for type safety
# These create distinct types that mypy can differentiate
ContentID = NewType("ContentID", str)
DatasetID = NewType("DatasetID", str)
JobID = NewType("JobID", str)
BatchID = NewType("BatchID", str)
UserID = NewType("UserID", str)

# Structural aliases using TypeAlias
# These are for complex types where structural compatibility is desired
DivisionPath: TypeAlias = str  # ocd-division/country:us/state:oh/place:columbus
DivisionPathList: TypeAlias = list[str]
ScopeString: TypeAlias = str  # shorthand (state:oh) or a full division path

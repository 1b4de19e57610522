"""pipeline.stages

Builtin generation stages.

Importing this package registers them in the global registry.
"""

# Import side-effect: stage registration decorators.
from . import preflight  # noqa: F401
from . import devices  # noqa: F401
from . import measure  # noqa: F401
from . import sort  # noqa: F401
from . import persist  # noqa: F401

__all__ = [
    "preflight",
    "devices",
    "measure",
    "sort",
    "persist",
]

"""mirrorcp CLI — copy and mirror between disk and object storage."""

from ._helpers import main  # noqa: F401  (entry point)

# Import command modules to register Click commands with the main group.
from . import _basic, _cp, _mirror  # noqa: F401

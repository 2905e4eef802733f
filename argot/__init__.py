__title__ = 'argot'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .arguments import *
from .bindings import *
from .faults import *
from .groups import *
from .helper import *
from .logs import *
from .parser import *
from .specs import *

__import__("logging").getLogger(__name__).addHandler(__import__("logging").NullHandler())

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the arguments
__all__ += arguments.__all__  # type: ignore[attr-defined]
# Load the exposed API of the groups
__all__ += groups.__all__  # type: ignore[attr-defined]
# Load the exposed API of the specs
__all__ += specs.__all__  # type: ignore[attr-defined]
# Load the exposed API of the bindings
__all__ += bindings.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parser
__all__ += parser.__all__  # type: ignore[attr-defined]
# Load the exposed API of the helper
__all__ += helper.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the logs
__all__ += logs.__all__  # type: ignore[attr-defined]

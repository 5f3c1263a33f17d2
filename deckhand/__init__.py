__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'deckhand'
__author__ = 'Deckhand Contributors'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.1.0"

from .context import *
from .discovery import *
from .dispatcher import *
from .extractor import *
from .faults import *
from .resolver import *
from .signatures import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 1, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the execution context
__all__ += context.__all__  # type: ignore[attr-defined]
# Load the exposed API of the task discovery
__all__ += discovery.__all__  # type: ignore[attr-defined]
# Load the exposed API of the runner
__all__ += dispatcher.__all__  # type: ignore[attr-defined]
# Load the exposed API of the documentation extractor
__all__ += extractor.__all__  # type: ignore[attr-defined]
# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the command resolver
__all__ += resolver.__all__  # type: ignore[attr-defined]
# Load the exposed API of the signature reconstructor
__all__ += signatures.__all__  # type: ignore[attr-defined]

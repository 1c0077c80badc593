__title__ = 'polycli'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .faults import *
from .layouts import *
from .options import *
from .parsing import *
from .renderers import *
from .repository import *
from .runner import *

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
    "__license__",
    "__version__",
    "version_info"
)

# Load the exposed API of the faults
__all__ += faults.__all__  # type: ignore[attr-defined]
# Load the exposed API of the help layouts
__all__ += layouts.__all__  # type: ignore[attr-defined]
# Load the exposed API of the option specifications
__all__ += options.__all__  # type: ignore[attr-defined]
# Load the exposed API of the parser
__all__ += parsing.__all__  # type: ignore[attr-defined]
# Load the exposed API of the renderers
__all__ += renderers.__all__  # type: ignore[attr-defined]
# Load the exposed API of the repository
__all__ += repository.__all__  # type: ignore[attr-defined]
# Load the exposed API of the dispatcher
__all__ += runner.__all__  # type: ignore[attr-defined]

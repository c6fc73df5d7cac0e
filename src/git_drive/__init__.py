"""git-drive - switch git authors and co-authors while pairing."""

from ._version import __version__
from .core.coordinator import DriveCoordinator, DriveOutput
from .core.registry import Registry
from .core.store import Store
from .models import Identity, Kind, Trailer

__all__ = [
    "__version__",
    "DriveCoordinator",
    "DriveOutput",
    "Identity",
    "Kind",
    "Registry",
    "Store",
    "Trailer",
]

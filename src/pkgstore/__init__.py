"""pkgstore — materialize a resolved dependency graph as a local package store."""

__version__ = "0.1.0"

from pkgstore.services.copy import copy_files  # noqa: E402
from pkgstore.services.install import install_local_store  # noqa: E402

__all__ = ["__version__", "copy_files", "install_local_store"]

"""fshell - a small interactive file-management shell"""

from .version import __version__

__all__ = ["__version__"]

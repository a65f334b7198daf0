"""Version information for fshell"""

__version__ = "0.1.0"


def get_version_string():
    """Get formatted version string"""
    return f"fshell {__version__}"

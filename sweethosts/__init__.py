"""SweetHosts - manage hosts profiles and apply them to the system.

This package provides the profile tree, trash bin and history stores,
the composer that turns active profiles into one hosts document, and the
apply pipeline that installs that document as the system hosts file.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]

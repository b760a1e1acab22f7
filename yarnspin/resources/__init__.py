"""
Resources module - dialog directories and the compiled dialog schema.
"""

from yarnspin.resources.library import DialogLibrary

__all__ = ["DialogLibrary"]

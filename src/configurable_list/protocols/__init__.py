"""Protocol definitions for the external collaborators of a list."""

from configurable_list.protocols.database import Database

__all__ = ["Database"]

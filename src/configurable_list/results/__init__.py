"""Typed, paged list results."""

from configurable_list.results.collection import ResultSet
from configurable_list.results.decoder import ResultDecoder

__all__ = ["ResultDecoder", "ResultSet"]

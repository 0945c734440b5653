"""Utility functions for SegPack."""

from segpack.utils.formats import is_json_payload, load_segments

__all__ = ["is_json_payload", "load_segments"]

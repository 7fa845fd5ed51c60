"""Exceptions raised by feature comparison and container operations."""


class FeatureError(Exception):
    """Base class for all visfeat errors."""


class SizeMismatchError(FeatureError, ValueError):
    """Patches or descriptors have incompatible sizes, or are missing."""


class MissingDescriptorError(FeatureError, LookupError):
    """A requested descriptor kind is not present on one or both features."""


class InvalidPatchSizeError(FeatureError, ValueError):
    """Patch side length is not odd."""


class FeatureFileError(FeatureError, IOError):
    """A feature text file could not be parsed."""

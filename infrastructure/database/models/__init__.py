from . import labeling  # noqa: F401

__all__ = [
    "labeling",
]

"""Image lookup service.

Exports:
    ImageStore: Manifest fetch, validation and in-memory storage.
    Sampler: Random sampling without replacement per category.
    RetrievalService: get_image_link tool surface.
"""

from .manifest_loader import ImageStore
from .sampler import Sampler
from .service import RetrievalService

__all__ = ["ImageStore", "Sampler", "RetrievalService"]

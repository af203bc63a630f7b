# services/__init__.py
"""
Services Layer
==============

Services wrap the pure core functions and the database layer, catching
errors at their boundary and reporting them as ServiceResult values.

Services:
    - FileAreaService: staging, success and fail areas, CSV export
    - SpectrumService: parse and transform without persistence
    - RecordService: record retrieval, search, update, delete, export
    - IngestionService: the staged ingestion lifecycle
    - ServiceFactory: dependency injection
"""

from .base import BaseService, BatchProgress, ServiceResult
from .factory import ServiceFactory
from .file_areas import FileAreaService
from .ingestion import IngestionService
from .records import RecordSamples, RecordService
from .spectrum import FileSpectrum, SpectrumService

__all__ = [
    "BaseService",
    "BatchProgress",
    "FileAreaService",
    "FileSpectrum",
    "IngestionService",
    "RecordSamples",
    "RecordService",
    "ServiceFactory",
    "ServiceResult",
    "SpectrumService",
]

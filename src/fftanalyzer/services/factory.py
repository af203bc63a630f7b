"""
Service Factory
===============

Builds services with their dependencies passed through constructors.

One factory is created per application entry point (a CLI invocation, a
test) and owns the database connection and file repository it hands down.
Nothing is registered globally.

Usage:
    from fftanalyzer.core.config import load_config
    from fftanalyzer.services.factory import ServiceFactory

    factory = ServiceFactory(load_config())
    result = factory.ingestion_service.ingest("pump.csv")

    # Custom storage or auth
    factory = ServiceFactory(config, file_repository=S3FileRepository(),
                             user_provider=lambda: current_user.name)
"""

from functools import cached_property
from typing import Optional

from fftanalyzer.core.config import AppConfig
from fftanalyzer.database import DatabaseConnection
from fftanalyzer.repository import LocalFileRepository
from fftanalyzer.repository.protocol import FileRepositoryProtocol

from .file_areas import FileAreaService
from .ingestion import IngestionService, UserProvider
from .records import RecordService
from .spectrum import SpectrumService


class ServiceFactory:
    """
    Factory for creating service instances with proper dependency injection.

    Services are created lazily and cached, so every caller of one factory
    shares the same connection pool and file areas.

    Attributes:
        config: Immutable application configuration
        database: Database connection (built from ``config.database`` if omitted)
        file_repository: File repository (LocalFileRepository if omitted)
        user_provider: Auth collaborator returning the acting username
    """

    def __init__(
        self,
        config: AppConfig,
        database: Optional[DatabaseConnection] = None,
        file_repository: Optional[FileRepositoryProtocol] = None,
        user_provider: Optional[UserProvider] = None,
    ):
        self.config = config
        self.database = database or DatabaseConnection(config.database.url, echo=config.database.echo)
        self.file_repository = file_repository or LocalFileRepository()
        self.user_provider = user_provider

    @cached_property
    def file_area_service(self) -> FileAreaService:
        return FileAreaService(self.file_repository, self.config.paths)

    @cached_property
    def spectrum_service(self) -> SpectrumService:
        return SpectrumService(
            self.file_repository,
            ingest_config=self.config.ingest,
            spectrum_config=self.config.spectrum,
        )

    @cached_property
    def record_service(self) -> RecordService:
        return RecordService(self.database, self.file_area_service)

    @cached_property
    def ingestion_service(self) -> IngestionService:
        return IngestionService(
            self.database,
            self.file_area_service,
            self.config,
            user_provider=self.user_provider,
        )

    def initialize(self) -> None:
        """Create database tables and file areas if absent."""
        self.database.create_tables()
        self.file_area_service.ensure_areas()

    def close(self) -> None:
        """Release database connections."""
        self.database.dispose()

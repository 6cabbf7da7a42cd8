"""
Firebase legacy store.

Firestore collections and the Cloud Storage bucket the warehouse data used
to live in, reached through firebase-admin.
"""

from typing import Any, Callable, Optional
import structlog
import firebase_admin
from firebase_admin import credentials, firestore, storage

from exceptions import ExternalServiceError
from integrations.base import BackendClient, Record
from models.admin import (
    ConnectionDetails,
    ConnectionStatus,
    StorageDetails,
    StorageStatus,
    CollectionStatus,
)

logger = structlog.get_logger(__name__)

LEGACY_APP_NAME = "legacy-store"


class FirebaseBackend(BackendClient):
    """Legacy store: Firestore documents plus a Cloud Storage bucket."""

    name = "firebase"

    def __init__(
        self,
        db: Any,
        bucket: Any = None,
        bucket_factory: Optional[Callable[[str], Any]] = None,
        probe_collection: str = "products",
    ):
        self.db = db
        self.bucket = bucket
        self.bucket_factory = bucket_factory
        self.probe_collection = probe_collection

    @classmethod
    def from_settings(cls, settings) -> "FirebaseBackend":
        """
        Initialise a named firebase-admin app from settings.

        Raises:
            ExternalServiceError: If the app or its clients cannot be built
        """
        try:
            try:
                app = firebase_admin.get_app(LEGACY_APP_NAME)
            except ValueError:
                if settings.firebase_credentials_path:
                    cred = credentials.Certificate(settings.firebase_credentials_path)
                else:
                    cred = credentials.ApplicationDefault()

                options = {}
                if settings.firebase_project_id:
                    options["projectId"] = settings.firebase_project_id
                if settings.default_bucket_name:
                    options["storageBucket"] = settings.default_bucket_name

                app = firebase_admin.initialize_app(cred, options, name=LEGACY_APP_NAME)

            db = firestore.client(app=app)
            bucket = None
            if settings.default_bucket_name:
                bucket = storage.bucket(app=app)

            return cls(
                db,
                bucket=bucket,
                bucket_factory=lambda name: storage.bucket(name, app=app),
                probe_collection=settings.firebase_probe_collection,
            )

        except Exception as e:
            logger.error(
                "firebase_init_failed",
                error=str(e),
                error_type=type(e).__name__
            )
            raise ExternalServiceError(
                service="firebase",
                message=f"Failed to initialise Firebase: {e}"
            ) from e

    # ===================
    # PROBES
    # ===================

    def check_connection(self) -> ConnectionStatus:
        try:
            list(self.db.collection(self.probe_collection).limit(1).stream())

            return ConnectionStatus(
                connected=True,
                details=ConnectionDetails(
                    backend=self.name,
                    probe_target=self.probe_collection,
                )
            )

        except Exception as e:
            logger.error(
                "firebase_probe_failed",
                collection=self.probe_collection,
                error=str(e),
                error_type=type(e).__name__
            )
            return ConnectionStatus(
                connected=False,
                details=ConnectionDetails(
                    backend=self.name,
                    probe_target=self.probe_collection,
                    error=str(e),
                )
            )

    def check_storage(self) -> StorageStatus:
        if self.bucket is None:
            return StorageStatus(
                available=False,
                details=StorageDetails(error="Storage bucket not configured")
            )

        bucket_name = getattr(self.bucket, "name", None)
        try:
            if not self.bucket.exists():
                return StorageStatus(
                    available=False,
                    details=StorageDetails(
                        bucket_name=bucket_name,
                        error=f"Bucket {bucket_name} does not exist"
                    )
                )

            return StorageStatus(
                available=True,
                details=StorageDetails(bucket_name=bucket_name)
            )

        except Exception as e:
            logger.error("firebase_storage_probe_failed", bucket=bucket_name, error=str(e))
            return StorageStatus(
                available=False,
                details=StorageDetails(bucket_name=bucket_name, error=str(e))
            )

    def collection_status(self, collection: str) -> CollectionStatus:
        try:
            capped = self.db.collection(collection).limit(1).get()
            if not capped:
                # Firestore has no empty collections
                return CollectionStatus.not_found()

            documents = self.db.collection(collection).get()
            return CollectionStatus.found(len(documents))

        except Exception as e:
            logger.error("collection_inspection_failed", collection=collection, error=str(e))
            return CollectionStatus.failed(str(e))

    # ===================
    # RECORDS
    # ===================

    def fetch_all(self, collection: str) -> list[dict]:
        documents = []
        for doc in self.db.collection(collection).stream():
            data = doc.to_dict() or {}
            documents.append({**data, "id": doc.id})

        logger.debug("collection_fetched", collection=collection, documents=len(documents))
        return documents

    def fetch_page(self, collection: str, limit: int) -> list[dict]:
        return [
            {**(doc.to_dict() or {}), "id": doc.id}
            for doc in self.db.collection(collection).limit(limit).stream()
        ]

    def insert(self, collection: str, record: Record) -> dict:
        document = record.to_document()
        _, ref = self.db.collection(collection).add(document)
        return {**document, "id": ref.id}

    # ===================
    # BUCKETS
    # ===================

    def _bucket(self, bucket_name: str) -> Any:
        if self.bucket_factory is None:
            raise ExternalServiceError(
                service="firebase",
                message="Storage is not configured for the legacy store"
            )
        return self.bucket_factory(bucket_name)

    def bucket_exists(self, bucket_name: str) -> bool:
        return bool(self._bucket(bucket_name).exists())

    def create_bucket(self, bucket_name: str) -> str:
        bucket = self._bucket(bucket_name)
        bucket.create()
        logger.info("firebase_bucket_created", bucket=bucket_name)
        return getattr(bucket, "name", None) or bucket_name

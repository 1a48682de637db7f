from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FirebaseConfig:
    credentials: Optional[str] = None
    project_id: Optional[str] = None


def _load_credentials(raw: str) -> credentials.Base:
    # Accept either a path to the service account file or the JSON itself.
    text = raw.strip()
    if text.startswith("{"):
        return credentials.Certificate(json.loads(text))
    return credentials.Certificate(str(Path(text).expanduser()))


def get_app(config: FirebaseConfig) -> firebase_admin.App:
    """Initialize the Firebase Admin SDK once per process and return the default app."""
    if firebase_admin._apps:
        return firebase_admin.get_app()

    options = {"projectId": config.project_id} if config.project_id else None
    if config.credentials:
        app = firebase_admin.initialize_app(_load_credentials(config.credentials), options)
    else:
        # Application default credentials (e.g. on Cloud Run / GCE).
        app = firebase_admin.initialize_app(options=options)

    logger.info("Firebase initialized for project %s", app.project_id or "<default>")
    return app


def get_firestore(config: FirebaseConfig):
    return firestore.client(app=get_app(config))

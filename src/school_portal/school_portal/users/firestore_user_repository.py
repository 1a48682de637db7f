from __future__ import annotations

from typing import Optional, Sequence

from firebase_admin import firestore
from google.api_core.exceptions import NotFound
from google.cloud.firestore_v1.base_query import FieldFilter

from ..core.enums import Role
from .model import UserProfile
from .profile_mapping import profile_from_document
from .repository import UserRepository

USERS_COLLECTION = "users"


class FirestoreUserRepository(UserRepository):
    def __init__(self, client):
        self._client = client

    def _users(self):
        return self._client.collection(USERS_COLLECTION)

    def list_by_role(self, role: Role) -> Sequence[UserProfile]:
        query = self._users().where(filter=FieldFilter("role", "==", role.value))
        out: list[UserProfile] = []
        for doc in query.stream():
            profile = profile_from_document(doc.id, doc.to_dict() or {})
            if profile:
                out.append(profile)
        return out

    def get_profile(self, uid: str) -> Optional[UserProfile]:
        snap = self._users().document(uid).get()
        if not snap.exists:
            return None
        return profile_from_document(snap.id, snap.to_dict() or {})

    def get_by_email(self, email: str) -> Optional[UserProfile]:
        query = self._users().where(filter=FieldFilter("email", "==", email)).limit(1)
        for doc in query.stream():
            return profile_from_document(doc.id, doc.to_dict() or {})
        return None

    def update_fcm_token(self, uid: str, token: Optional[str]) -> bool:
        try:
            self._users().document(uid).update(
                {"fcmToken": token, "updatedAt": firestore.SERVER_TIMESTAMP}
            )
        except NotFound:
            return False
        return True

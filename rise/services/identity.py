# rise/services/identity.py
"""Google identity verification and role lookup across the contact-base tables."""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Set

from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token

from rise.config import Config
from rise.errors import AuthorizationError, UpstreamError, ValidationError
from rise.models import Role
from rise.services.record_store import RecordStore

logger = logging.getLogger(__name__)

TokenVerifier = Callable[[str], Dict[str, Any]]


def _record_email(record: Dict[str, Any]) -> Optional[str]:
    fields = record.get("fields", {})
    email = fields.get("Email") or fields.get("email")
    if email and isinstance(email, str):
        return email.strip().lower()
    return None


class IdentityResolver:
    """Maps a Google ID token to an email, then to a role."""

    def __init__(
        self,
        config: Config,
        store: RecordStore,
        verifier: Optional[TokenVerifier] = None,
    ):
        self.config = config
        self.store = store
        self.verifier = verifier or self._verify_google_token
        self.tables: List[str] = list(config.AUTH_TABLES)

    def _verify_google_token(self, credential: str) -> Dict[str, Any]:
        """Validate signature, expiry and audience with google-auth."""
        # audience=None would disable google-auth's audience check
        self.config.require("GOOGLE_CLIENT_ID")
        try:
            return id_token.verify_oauth2_token(
                credential,
                google_requests.Request(),
                audience=self.config.GOOGLE_CLIENT_ID,
            )
        except google_exceptions.TransportError as e:
            logger.error(f"❌ Could not fetch Google signing certificates: {str(e)}")
            raise UpstreamError(
                f"Google certificate fetch failed: {str(e)}", retryable=True
            )
        except (ValueError, google_exceptions.GoogleAuthError) as e:
            raise AuthorizationError(f"Invalid Google credential: {str(e)}")

    def _fetch_table(self, table: str, email: Optional[str] = None) -> List[Dict[str, Any]]:
        match = {"Email": email} if email else None
        try:
            return self.store.fetch(
                self.config.CONTACT_BASE_ID, table, match=match, ignore_case=True
            )
        except UpstreamError as e:
            # One unreachable table must not hide a match in another
            logger.error(f"❌ Error fetching {table}: {e.message}")
            return []

    def _lookup_all(self, email: Optional[str] = None) -> Dict[str, List[Dict[str, Any]]]:
        self.config.require("CONTACT_BASE_ID")
        with ThreadPoolExecutor(max_workers=self.config.STORE_MAX_WORKERS) as pool:
            results = pool.map(lambda table: self._fetch_table(table, email), self.tables)
            return dict(zip(self.tables, results))

    def resolve_role(self, email: str) -> Role:
        """First table (in priority order) holding ``email`` decides the role."""
        if not email:
            raise ValidationError("Email is required", field="email")
        normalized = email.strip().lower()
        records_by_table = self._lookup_all(normalized)

        for table in self.tables:
            for record in records_by_table.get(table, []):
                if _record_email(record) == normalized:
                    role = Role.from_table(table)
                    logger.info(f"✅ {normalized} found in {table} (Role: {role.value})")
                    return role

        logger.info(f"❌ {normalized} not found in any auth table")
        return Role.UNKNOWN

    def verify_identity_token(self, credential: str) -> Dict[str, Any]:
        if not credential:
            raise ValidationError("Google credential is required", field="credential")

        payload = self.verifier(credential)
        email = payload.get("email")
        if not email:
            raise AuthorizationError("Google credential carries no email")
        logger.info(f"🔍 Verifying Google user: {email}")

        role = self.resolve_role(email)
        if role is Role.UNKNOWN:
            raise AuthorizationError(
                "You are not registered in our system. Please contact support."
            )
        return {
            "success": True,
            "email": email,
            "name": payload.get("name"),
            "picture": payload.get("picture"),
            "role": role.value,
        }

    def authorized_emails(self) -> Set[str]:
        emails = set()
        for table, records in self._lookup_all().items():
            found = {e for e in (_record_email(r) for r in records) if e}
            logger.info(f"   ✅ Found {len(found)} emails in {table}")
            emails |= found
        return emails

    def is_authorized(self, email: str) -> bool:
        if not email:
            raise ValidationError("Email is required", field="email")
        return self.resolve_role(email) is not Role.UNKNOWN

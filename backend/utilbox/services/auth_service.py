"""
Utilbox Backend: Login Service
===============================

What:  Checks a username/password pair against the credential store.
How:   Exact-match lookup through CredentialStore.find. The store is passed
       in for each call (injected by the route), the service keeps no state.
Who:   Called by POST /api/login.

Information leakage:
    Unknown username and wrong password raise the same AuthenticationError
    with the same message, so responses cannot be used to enumerate users.
    The password is never logged and never included in a response.
"""

import logging
from typing import Optional

from utilbox.exceptions import AuthenticationError, ValidationError
from utilbox.schemas.api import LoginResponse
from utilbox.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)


class AuthService:

    def login(
        self,
        store: CredentialStore,
        username: Optional[str],
        password: Optional[str],
    ) -> LoginResponse:
        """
        Validate credentials.

        Raises:
            ValidationError:      username or password missing/empty (400)
            AuthenticationError:  no matching entry (401)
        """
        # Both checked before any lookup so a missing field is never a 401
        if not username or not password:
            raise ValidationError(
                message="Username and password are required",
                context={"username_present": bool(username), "password_present": bool(password)},
            )

        entry = store.find(username, password)
        if entry is None:
            logger.info("Login failed for username=%s", username)
            raise AuthenticationError(context={"username": username})

        logger.info("Login succeeded for username=%s", entry.username)
        return LoginResponse(message="Login successful", username=entry.username)


auth_service = AuthService()

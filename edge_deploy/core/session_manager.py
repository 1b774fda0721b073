"""Login/logout handling around privileged cloud operations"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from ..api.exceptions import AuthenticationError, EdgeDeployError
from ..models.credential import ServicePrincipal
from ..models.session import Session, SessionState
from .azure_cli import AzureCli

logger = logging.getLogger(__name__)


class SessionManager:
    """Opens and tears down Azure CLI sessions

    A session is an explicit value owned by the caller. Once logged in it is
    logged out exactly once, and a failed logout never hides the result of
    the operation it wrapped.
    """

    def __init__(self, azure_cli: Optional[AzureCli] = None):
        self.azure_cli = azure_cli or AzureCli()

    def login(self, principal: ServicePrincipal, session: Optional[Session] = None) -> Session:
        """Log in with a service principal and select its subscription

        Args:
            principal: Service principal credentials
            session: Session to drive; a new one when omitted

        Returns:
            The session, in LOGGED_IN state

        Raises:
            AuthenticationError: login or subscription selection was rejected.
                After a rejected login the session stays LOGGED_OUT; after a
                rejected subscription selection it stays LOGGED_IN so the
                caller still logs it out.
        """
        session = session or Session()
        if session.state != SessionState.LOGGED_OUT:
            raise EdgeDeployError(f"Cannot log in from state {session.state.value}")

        session.state = SessionState.LOGGING_IN
        try:
            self.azure_cli.version()
            self.azure_cli.set_cloud(principal.environment)
            result = self.azure_cli.login(principal)
        except Exception:
            session.state = SessionState.LOGGED_OUT
            raise

        if not result.ok:
            session.state = SessionState.LOGGED_OUT
            raise AuthenticationError(
                f"Azure login failed for service principal {principal.client_id}: "
                f"{result.stderr.strip() or f'exit code {result.returncode}'}"
            )

        session.state = SessionState.LOGGED_IN
        logger.info("Logged in to Azure")

        result = self.azure_cli.set_subscription(principal.subscription)
        if not result.ok:
            raise AuthenticationError(
                f"Failed to select subscription {principal.subscription}: "
                f"{result.stderr.strip() or f'exit code {result.returncode}'}"
            )
        session.subscription = principal.subscription
        return session

    def logout(self, session: Session) -> None:
        """Clear the CLI account; failures are logged, not raised"""
        if not session.logged_in:
            return

        session.state = SessionState.LOGGING_OUT
        try:
            result = self.azure_cli.clear_account()
            if not result.ok:
                logger.warning("Failed to log out of Azure: %s", result.stderr.strip())
            else:
                logger.info("Logged out of Azure")
        except Exception as e:
            logger.warning("Failed to log out of Azure: %s", e)
        finally:
            session.state = SessionState.LOGGED_OUT

    @contextmanager
    def session(self, principal: ServicePrincipal) -> Iterator[Session]:
        """Scope a logged-in session to a ``with`` block"""
        session = Session()
        try:
            self.login(principal, session)
            yield session
        finally:
            self.logout(session)

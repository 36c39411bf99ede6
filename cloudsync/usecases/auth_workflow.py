"""Use case for cloud sign-in, sign-out and disconnect."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from cloudsync.adapters.api_errors import ApiError
from cloudsync.domain.cloud_models import AuthTokens
from cloudsync.domain.errors import ValidationError
from cloudsync.domain.jwt_claims import extract_email, extract_user_id
from cloudsync.domain.ports import CloudSyncPort, UseCaseError
from cloudsync.domain.visibility import Panel
from cloudsync.usecases.error_mapping import map_cloud_error
from cloudsync.usecases.key_setup_variants import KeySetupVariant
from cloudsync.usecases.sync_dashboard import SyncDashboardWorkflow
from cloudsync.viewmodels.cloud_sync_vm import CloudSyncSettingsVM


@dataclass
class AuthWorkflow:
    """Sign-in guarded by ``vm.is_authenticating``; sign-out always resets."""

    vm: CloudSyncSettingsVM
    cloud: CloudSyncPort
    variant: KeySetupVariant
    dashboard: Optional[SyncDashboardWorkflow] = None
    _log: logging.Logger = field(
        init=False, repr=False, default_factory=lambda: logging.getLogger(__name__)
    )

    async def load_state(self) -> None:
        """Pick up a session that survived a restart. Failures keep the defaults."""
        try:
            authenticated = await asyncio.to_thread(lambda: self.cloud.is_authenticated)
            if not authenticated:
                return
            has_keypair = await asyncio.to_thread(lambda: self.cloud.has_keypair)
        except Exception:
            self._log.warning("Failed to load cloud sync state", exc_info=True)
            return
        self.vm.set_session(email=None, user_id=None)
        self.vm.set_keypair(
            has_keypair=has_keypair,
            needs_passphrase_entry=self.variant.needs_passphrase_entry(has_keypair),
        )
        await self._refresh_if_dashboard()

    async def authenticate(
        self, email: Optional[str] = None, password: Optional[str] = None
    ) -> bool:
        """Sign in with the given credentials or the form inputs.

        A call made while another sign-in is outstanding returns ``False``
        without touching the collaborator.
        """
        if self.vm.is_authenticating:
            self._log.debug("Sign-in already in flight; ignoring")
            return False
        self.vm.is_authenticating = True
        self.vm.auth_error = None
        self.vm.notify()
        try:
            if email is not None:
                self.vm.email = email
            if password is not None:
                self.vm.password = password
            login = self.vm.email.strip()
            secret = self.vm.password
            if not login or not secret:
                raise ValidationError("MISSING_CREDENTIALS", "Please enter your email and password.")

            tokens = await asyncio.to_thread(self.cloud.authenticate, login, secret)
            try:
                user_email, user_id = self._identity(tokens, login)
            except Exception:
                await self._discard_session()
                raise
            has_keypair = await asyncio.to_thread(lambda: self.cloud.has_keypair)
        except UseCaseError as err:
            self.vm.auth_error = err.message
            self._log.warning("Cloud sync authentication failed: %s", err.message)
            return False
        except ApiError as exc:
            self.vm.auth_error = map_cloud_error(exc, default_code="AUTH_FAILED").message
            self._log.warning("Cloud sync authentication failed: %s", self.vm.auth_error)
            return False
        except Exception as exc:
            self.vm.auth_error = f"Authentication failed: {exc}"
            self._log.error("Cloud sync authentication error", exc_info=True)
            return False
        finally:
            self.vm.is_authenticating = False
            self.vm.notify()

        self.vm.set_session(email=user_email, user_id=user_id)
        self.vm.clear_credentials()
        self.vm.set_keypair(
            has_keypair=has_keypair,
            needs_passphrase_entry=self.variant.needs_passphrase_entry(has_keypair),
        )
        self._log.info("Signed in to cloud sync (user %s)", user_id)
        await self._refresh_if_dashboard()
        return True

    async def logout(self) -> None:
        """Sign out. Local state is reset even when the collaborator call fails."""
        try:
            await asyncio.to_thread(self.cloud.logout)
        except Exception:
            self._log.warning("Cloud sync logout error", exc_info=True)
        finally:
            self.vm.reset_session()

    async def disconnect(self) -> None:
        """Stop the engine, then sign out."""
        try:
            await asyncio.to_thread(self.cloud.stop_sync)
        except Exception:
            self._log.warning("Failed to stop cloud sync during disconnect", exc_info=True)
        await self.logout()

    # ------------------------------------------------------------------
    def _identity(self, tokens: AuthTokens, login: str) -> Tuple[str, int]:
        user_id = tokens.user_id
        if user_id is None:
            user_id = extract_user_id(tokens.access_token)
        user_email = tokens.email or extract_email(tokens.access_token) or login
        return user_email, user_id

    async def _discard_session(self) -> None:
        try:
            await asyncio.to_thread(self.cloud.logout)
        except Exception:
            self._log.warning("Failed to discard unusable cloud session", exc_info=True)

    async def _refresh_if_dashboard(self) -> None:
        if self.dashboard is not None and self.vm.active_panel is Panel.DASHBOARD:
            await self.dashboard.refresh_status()


__all__ = ["AuthWorkflow"]

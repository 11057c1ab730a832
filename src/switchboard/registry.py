"""Backend registry: which backends are configured, their models and clients.

The registry is built once from Settings and never changes afterwards. A
backend is present exactly when its credential was present at build time.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

from switchboard.backends.anthropic import AnthropicBackend
from switchboard.backends.base import BACKEND_SPECS, BackendId, BackendSpec
from switchboard.backends.openai_compatible import OpenAICompatibleBackend

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from switchboard.backends.base import ChatBackend
    from switchboard.config import Settings

    BackendFactory = Callable[[str, Settings], ChatBackend]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Backend:
    """One configured upstream service and its connection handle."""

    spec: BackendSpec
    client: ChatBackend

    @property
    def id(self) -> BackendId:
        return self.spec.id

    @property
    def supported_models(self) -> tuple[str, ...]:
        return self.spec.models

    @property
    def default_model(self) -> str:
        return self.spec.default_model


def _huggingface(api_key: str, settings: Settings) -> ChatBackend:
    return OpenAICompatibleBackend(
        api_key, provider=BackendId.HUGGINGFACE, base_url=settings.hf_base_url
    )


def _openai(api_key: str, settings: Settings) -> ChatBackend:
    return OpenAICompatibleBackend(
        api_key, provider=BackendId.OPENAI, base_url=settings.openai_base_url
    )


def _anthropic(api_key: str, settings: Settings) -> ChatBackend:
    return AnthropicBackend(api_key, base_url=settings.anthropic_base_url)


DEFAULT_FACTORIES: dict[BackendId, BackendFactory] = {
    BackendId.HUGGINGFACE: _huggingface,
    BackendId.OPENAI: _openai,
    BackendId.ANTHROPIC: _anthropic,
}


class BackendRegistry:
    """Read-only view over the configured backends, in priority order."""

    def __init__(self, backends: Iterable[Backend] = ()) -> None:
        """Index *backends*, ordering them by BackendId declaration order."""
        by_id = {b.id: b for b in backends}
        self._backends: dict[BackendId, Backend] = {
            backend_id: by_id[backend_id]
            for backend_id in BackendId
            if backend_id in by_id
        }

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        factories: Mapping[BackendId, BackendFactory] | None = None,
    ) -> BackendRegistry:
        """Build a registry holding one backend per credential present in *settings*.

        Args:
            settings: Resolved configuration.
            factories: Per-backend constructors; defaults to the SDK-backed ones.

        Returns:
            The registry. Clients are created lazily, so no network traffic
            happens here and bad credentials surface on the first call.
        """
        table = dict(DEFAULT_FACTORIES)
        if factories:
            table.update(factories)

        backends: list[Backend] = []
        for backend_id in BackendId:
            api_key = settings.credential_for(backend_id)
            if not api_key:
                continue
            client = table[backend_id](api_key, settings)
            backends.append(Backend(spec=BACKEND_SPECS[backend_id], client=client))
        registry = cls(backends)
        logger.debug(
            "Backend registry built: %s",
            [str(b) for b in registry.list_available()] or "none",
        )
        return registry

    def list_available(self) -> tuple[BackendId, ...]:
        """Return configured backend ids in priority order."""
        return tuple(self._backends)

    def __contains__(self, backend_id: object) -> bool:
        return backend_id in self._backends

    def default_model_for(self, backend_id: BackendId) -> str:
        """Return the designated default model of a configured backend."""
        return self._backends[backend_id].default_model

    def models_for(self, backend_id: BackendId) -> tuple[str, ...]:
        """Return the full model catalog of a configured backend."""
        return self._backends[backend_id].supported_models

    def client_for(self, backend_id: BackendId) -> ChatBackend:
        """Return the connection handle of a configured backend."""
        return self._backends[backend_id].client

    async def aclose(self) -> None:
        """Close every backend client; one failing close does not stop the rest."""
        for backend in self._backends.values():
            try:
                await backend.client.aclose()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                # Cleanup should never mask the primary failure.
                logger.warning("Backend cleanup failed for %s: %s", backend.id, exc)

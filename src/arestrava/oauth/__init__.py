r"""OAuth token lifecycle on top of the request executor."""

from __future__ import annotations

__all__ = ["TokenLifecycleClient"]

from arestrava.oauth.lifecycle import TokenLifecycleClient

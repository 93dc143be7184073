"""Best-effort interstitial checkpoints."""

from dataclasses import dataclass

from .interfaces import AdProvider
from ..exceptions import AdError
from ..logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONTEXT_TAG = "midgame"


@dataclass(frozen=True)
class AdRequestResult:
    """Outcome of a best-effort ad request. Never raised, only inspected."""

    ok: bool
    error: str | None = None


class LoggingAdProvider:
    """
    Provider for builds without an ad network: records each checkpoint in
    the log and counts them.
    """

    def __init__(self):
        self.requests = 0

    def request_ad(self, context_tag: str) -> None:
        if not context_tag:
            raise AdError("Ad request rejected", "empty context tag")
        self.requests += 1
        logger.info(f"Ad checkpoint reached ({context_tag})")


def request_ad_best_effort(
    provider: AdProvider | None, context_tag: str = DEFAULT_CONTEXT_TAG
) -> AdRequestResult:
    """
    Ask the provider for an interstitial without ever letting it interrupt
    play. Any failure, including a missing provider, becomes a failed result
    and a warning in the log.
    """
    if provider is None:
        logger.warning("Ad not ready: no provider")
        return AdRequestResult(ok=False, error="No ad provider")

    try:
        provider.request_ad(context_tag)
    except AdError as e:
        logger.warning(f"Ad not ready: {e}")
        return AdRequestResult(ok=False, error=str(e))
    except Exception as e:
        logger.warning(f"Ad provider failed: {e!r}")
        return AdRequestResult(ok=False, error=str(e))
    return AdRequestResult(ok=True)

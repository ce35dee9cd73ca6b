"""HTTP delivery of telemetry envelopes."""

from typing import Optional
import httpx

from config import DEFAULT_ENDPOINT_URL
from utils.logging import get_logger
from utils.retry import retry

logger = get_logger(__name__)

CONTENT_TYPE = "application/json"


class TrackTransport:
    """POST envelopes to the collector endpoint."""

    def __init__(
        self,
        endpoint_url: str = DEFAULT_ENDPOINT_URL,
        timeout: float = 10.0,
        client: Optional[httpx.Client] = None
    ):
        self.endpoint_url = endpoint_url
        self.client = client or httpx.Client(timeout=timeout)

    def send(self, envelope: dict) -> bool:
        """
        Send one envelope. Returns False on failure.

        Errors are logged instead of raised so that reporting an exception
        can never raise another one.
        """
        try:
            self._post(envelope)
            return True
        except httpx.HTTPStatusError as e:
            logger.error(
                "Collector rejected telemetry",
                status_code=e.response.status_code,
                reason=e.response.reason_phrase,
            )
        except httpx.HTTPError as e:
            logger.error("Telemetry delivery failed", error=str(e) or type(e).__name__)
        except (TypeError, ValueError) as e:
            logger.error("Telemetry envelope is not JSON serializable", error=str(e))
        return False

    @retry(max_attempts=3, delay=0.5, exceptions=(httpx.TransportError,))
    def _post(self, envelope: dict) -> httpx.Response:
        response = self.client.post(
            self.endpoint_url,
            json=envelope,
            headers={"Accept": CONTENT_TYPE, "Content-Type": CONTENT_TYPE},
        )
        response.raise_for_status()
        return response

    def close(self) -> None:
        self.client.close()

# Copyright (c) 2025 OptimNow - Jean Latiere. All Rights Reserved.
# Licensed under the Proprietary Software License.
# See LICENSE file in the project root for full license information.

"""HTTP client for the naming-pattern advisory service."""

import logging
from typing import Optional

import requests
from pydantic import ValidationError

from ..models import AdvisoryResult

logger = logging.getLogger(__name__)


class AdvisoryError(Exception):
    """Raised when the advisory service cannot produce a usable answer."""

    pass


class AdvisoryClient:
    """
    Calls a remote advisory endpoint with a list of resource names.

    The endpoint receives ``{"names": [...]}`` and answers with
    ``{"advice": str, "suggestedMode"?: str, "config"?: {...}}``.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 15.0,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the advisory client.

        Args:
            url: Endpoint URL receiving the analysis request
            timeout: Request timeout in seconds
            api_key: Optional bearer token sent in the Authorization header
            session: Optional requests session (useful for connection reuse)
        """
        self.url = url
        self.timeout = timeout
        self.api_key = api_key
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def analyze_names(self, names: list[str]) -> AdvisoryResult:
        """
        Ask the advisory service for a naming convention analysis.

        Args:
            names: Resource names to analyze

        Returns:
            AdvisoryResult parsed from the response

        Raises:
            AdvisoryError: On transport errors, HTTP errors or a malformed body
        """
        logger.info(f"Requesting naming analysis for {len(names)} names from {self.url}")
        try:
            resp = self.session.post(
                self.url,
                json={"names": names},
                headers=self._headers(),
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            raise AdvisoryError(f"Advisory request failed: {e}") from e
        except ValueError as e:
            raise AdvisoryError(f"Advisory response is not valid JSON: {e}") from e

        try:
            return AdvisoryResult.model_validate({**data, "source": "remote"})
        except (ValidationError, TypeError) as e:
            raise AdvisoryError(f"Advisory response has an unexpected shape: {e}") from e

"""Async HTTP client for a remote quality validation service."""

from __future__ import annotations

from typing import Any

import httpx

from ..config import QualityTier
from ..errors import ValidatorClientError
from .scorer import QualityScorer
from .types import MetricScores, QualityThresholds, ValidationResult


class HttpQualityValidator:
    """Quality validator backed by an HTTP scoring service.

    Posts the validation request as JSON to ``{base_url}/validate``. A response
    carrying ``overall_quality`` and ``passes`` is taken as-is; a response with
    only raw ``metrics`` is scored locally with QualityScorer.

    Example:
        ```python
        async with HttpQualityValidator("http://validator:8080") as validator:
            result = await validator.validate("s3://out/1.png", "model-7", "front")
        ```
    """

    VALIDATE_PATH = "/validate"

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        scorer: QualityScorer | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Root URL of the validation service.
            timeout: Request timeout in seconds.
            scorer: Scorer for responses that only carry raw metrics.
        """
        self.base_url = base_url.rstrip("/")
        self.scorer = scorer or QualityScorer()
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> HttpQualityValidator:
        """Enter async context."""
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self._timeout)
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Exit async context."""
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "Client not initialized. Use 'async with HttpQualityValidator(url) as validator:'"
            raise ValidatorClientError(msg)
        return self._client

    async def validate(
        self,
        artifact_ref: str,
        expected_identity: str,
        expected_pose: str,
        product_ref: str | None = None,
        quality_tier: QualityTier | str = QualityTier.STANDARD,
    ) -> ValidationResult:
        """Score an artifact with the remote service.

        Raises:
            ValidatorClientError: On transport errors, error statuses or malformed bodies.
        """
        tier = QualityTier.parse(quality_tier)
        payload = {
            "artifact_ref": artifact_ref,
            "expected_identity": expected_identity,
            "expected_pose": expected_pose,
            "product_ref": product_ref,
            "quality_tier": tier.value if tier else str(quality_tier),
        }

        try:
            response = await self._get_client().post(self.VALIDATE_PATH, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise ValidatorClientError(
                f"Validator returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise ValidatorClientError(f"Request error: {e}") from e
        except ValueError as e:
            raise ValidatorClientError(f"Malformed validator response: {e}") from e

        return self._parse(body, quality_tier)

    def _parse(self, body: Any, quality_tier: QualityTier | str) -> ValidationResult:
        if not isinstance(body, dict) or not isinstance(body.get("metrics"), dict):
            raise ValidatorClientError("Validator response is missing 'metrics'")

        try:
            metrics = MetricScores.from_dict(body["metrics"])
        except (TypeError, ValueError) as e:
            raise ValidatorClientError(f"Malformed metrics in response: {e}") from e
        if "overall_quality" not in body or "passes" not in body:
            return self.scorer.score(metrics, quality_tier)

        thresholds = self.scorer.thresholds(quality_tier)
        if isinstance(body.get("thresholds"), dict):
            try:
                thresholds = QualityThresholds(**body["thresholds"])
            except TypeError as e:
                raise ValidatorClientError(f"Malformed thresholds in response: {e}") from e

        tier = QualityTier.parse(quality_tier)
        return ValidationResult(
            metrics=metrics,
            overall_quality=float(body["overall_quality"]),
            passes=bool(body["passes"]),
            thresholds=thresholds,
            quality_tier=body.get("quality_tier") or (tier.value if tier else str(quality_tier)),
            feedback=tuple(body.get("feedback") or ()),
        )

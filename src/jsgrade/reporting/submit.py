"""Push each check result to the remote scoring endpoint."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from jsgrade.results import ResultSet


@dataclass
class SubmissionOutcome:
    identifier: str
    delivered: bool
    status_code: int | None = None
    error: str | None = None


def build_payload(result_payload: dict[str, Any], base_key: str, custom_data: str) -> dict[str, Any]:
    """One result, re-keyed under the base key, plus the custom data."""
    return {
        "testCaseResults": {base_key: result_payload},
        "customData": custom_data,
    }


async def _post_one(
    client: httpx.AsyncClient,
    url: str,
    identifier: str,
    payload: dict[str, Any],
    logger: logging.Logger,
) -> SubmissionOutcome:
    try:
        response = await client.post(
            url, json=payload, headers={"Content-Type": "application/json"}
        )
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.error(
            f"Server rejected result '{identifier}': "
            f"{e.response.status_code} {e.response.text[:500]}"
        )
        return SubmissionOutcome(
            identifier, delivered=False, status_code=e.response.status_code, error=str(e)
        )
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(f"Error sending result '{identifier}' to server: {e!r}")
        return SubmissionOutcome(identifier, delivered=False, error=str(e))

    logger.info(f"Server response for '{identifier}': {response.text[:500]}")
    return SubmissionOutcome(identifier, delivered=True, status_code=response.status_code)


async def submit_results_async(
    result_set: ResultSet,
    url: str,
    base_key: str,
    logger: logging.Logger,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[SubmissionOutcome]:
    """POST one payload per result concurrently; failures are returned, never raised."""
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        calls = []
        for result in result_set:
            payload = build_payload(result.to_payload(), base_key, result_set.custom_data)
            logger.debug(f"Sending below data to server:\n{json.dumps(payload, indent=2)}")
            calls.append(_post_one(client, url, result.identifier, payload, logger))
        return list(await asyncio.gather(*calls))


def submit_results(
    result_set: ResultSet,
    url: str,
    base_key: str,
    logger: logging.Logger,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[SubmissionOutcome]:
    """Synchronous wrapper around submit_results_async."""
    outcomes = asyncio.run(
        submit_results_async(result_set, url, base_key, logger, timeout, transport)
    )
    delivered = sum(1 for o in outcomes if o.delivered)
    logger.info(f"Delivered {delivered}/{len(outcomes)} result(s) to {url}")
    return outcomes

from __future__ import annotations

from typing import Callable, Optional
from urllib.parse import quote

import requests

from shared.constants import DEFAULT_API_BASE, REQUEST_TIMEOUT_SECONDS
from shared.retry import call_with_retry


def _retry_after_seconds(response: requests.Response) -> Optional[float]:
    value = (getattr(response, "headers", None) or {}).get("Retry-After")
    try:
        return float(value) if value is not None else None
    except ValueError:
        return None


class GitHubClient:
    def __init__(
        self,
        token_provider: Callable[[], str],
        api_base: str = DEFAULT_API_BASE,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._token_provider = token_provider
        self._api_base = api_base.rstrip("/")
        self._session = session or requests.Session()

    def _request(self, method: str, path: str, allowed_statuses: frozenset[int] = frozenset(), **kwargs) -> requests.Response:
        url = f"{self._api_base}{path}"
        base_headers = kwargs.pop("headers", {})

        def _do_request() -> requests.Response:
            headers = dict(base_headers)
            headers.update(
                {
                    "Authorization": f"token {self._token_provider()}",
                    "Accept": "application/vnd.github+json",
                    "X-GitHub-Api-Version": "2022-11-28",
                }
            )
            return self._session.request(method, url, headers=headers, timeout=REQUEST_TIMEOUT_SECONDS, **kwargs)

        response = call_with_retry(
            operation_name=f"github_{method}_{path}",
            fn=_do_request,
            is_retryable_exception=lambda exc: isinstance(exc, requests.RequestException),
            is_retryable_result=lambda r: r.status_code in {403, 429} or r.status_code >= 500,
            delay_hint=_retry_after_seconds,
        )
        if response.status_code not in allowed_statuses:
            response.raise_for_status()
        return response

    def get_pull_request(self, owner: str, repo: str, pull_number: int) -> dict:
        response = self._request("GET", f"/repos/{owner}/{repo}/pulls/{pull_number}")
        return response.json()

    # -- labels ----------------------------------------------------------------

    def list_labels_on_issue(self, owner: str, repo: str, issue_number: int) -> list[str]:
        """Return the names of all labels on an issue or pull request."""
        page = 1
        names: list[str] = []
        while True:
            response = self._request(
                "GET",
                f"/repos/{owner}/{repo}/issues/{issue_number}/labels",
                params={"per_page": 100, "page": page},
            )
            page_data = response.json()
            if not page_data:
                break
            names.extend(str(label.get("name") or "") for label in page_data if label.get("name"))
            if len(page_data) < 100:
                break
            page += 1
        return names

    def remove_label_from_issue(self, owner: str, repo: str, issue_number: int, name: str) -> None:
        # 404 means the label is already gone
        self._request(
            "DELETE",
            f"/repos/{owner}/{repo}/issues/{issue_number}/labels/{quote(name, safe='')}",
            allowed_statuses=frozenset({404}),
        )

    def get_label(self, owner: str, repo: str, name: str) -> Optional[dict]:
        """Return the repository label, or None when it does not exist."""
        response = self._request(
            "GET",
            f"/repos/{owner}/{repo}/labels/{quote(name, safe='')}",
            allowed_statuses=frozenset({404}),
        )
        if response.status_code == 404:
            return None
        return response.json()

    def create_label(self, owner: str, repo: str, name: str, color: str, description: str = "") -> dict:
        payload: dict = {"name": name, "color": color}
        if description:
            payload["description"] = description

        response = self._request("POST", f"/repos/{owner}/{repo}/labels", json=payload)
        return response.json()

    def add_labels_to_issue(self, owner: str, repo: str, issue_number: int, labels: list[str]) -> list[dict]:
        response = self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{issue_number}/labels",
            json={"labels": labels},
        )
        return response.json()

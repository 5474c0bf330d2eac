"""Meals Finder API client.

A small wrapper around the user endpoints of the Meals Finder API for
scripts and other services.  It uses the ``requests`` library and
exposes one method per operation:

* :meth:`login` – exchange credentials for a session token.
* :meth:`register_user` – create a new account.
* :meth:`get_profile` – read the profile of the logged in user.
* :meth:`update_settings` – overwrite the profile fields.
* :meth:`list_tags`, :meth:`add_tag`, :meth:`delete_tag` – manage tags.

Every method returns a tuple ``(data, error)``.  On success ``error``
is ``None``; on failure ``data`` is ``None`` and ``error`` is a
dictionary with ``status_code`` and ``message``.  A successful
:meth:`login` stores the token so that later calls are authenticated
automatically.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class MealsFinderAPI:
    """Client for the user endpoints of the Meals Finder API."""

    USERS_PATH = "/api/v1/users"

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the API, e.g. ``https://meals.example.com``.
            token: Optional session token.  If set, an ``Authorization``
                header with the value ``Bearer <token>`` is sent.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, *, json_body: Any | None = None) -> Result:
        """Perform an HTTP request against ``base_url + USERS_PATH + path``."""
        url = f"{self.base_url}{self.USERS_PATH}{path}"
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message: Any = ""
            if exc.response is not None:
                try:
                    message = exc.response.json().get("detail", "")
                except (AttributeError, ValueError):
                    message = exc.response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------
    def login(self, login: str, password: str) -> Result:
        """Log in and remember the returned token."""
        data, error = self._request("POST", "/login", json_body={"login": login, "password": password})
        if data:
            self.token = data.get("access_token")
            return self.token, None
        return None, error

    def register_user(self, payload: Dict[str, Any]) -> Result:
        """Create an account from ``username``, ``password``, ``email`` and optional fields."""
        return self._request("POST", "/", json_body=payload)

    def get_profile(self) -> Result:
        return self._request("GET", "/me")

    def update_settings(self, payload: Dict[str, Any]) -> Result:
        return self._request("PUT", "/me/settings", json_body=payload)

    # ------------------------------------------------------------------
    # Tags
    # ------------------------------------------------------------------
    def list_tags(self) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
        data, error = self._request("GET", "/me/tags")
        return data or [], error

    def add_tag(self, name: str, tag_type: str) -> Result:
        return self._request("POST", "/me/tags", json_body={"name": name, "tag_type": tag_type})

    def delete_tag(self, name: str) -> Tuple[bool, Optional[Dict[str, Any]]]:
        _, error = self._request("DELETE", f"/me/tags/{requests.utils.quote(name, safe='')}")
        return error is None, error

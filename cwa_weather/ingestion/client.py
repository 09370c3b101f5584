from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
import datetime as dt

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..errors import UpstreamFetchError

DEFAULT_API_URL = "https://opendata.cwa.gov.tw/api/v1/rest/datastore/C-B0024-001"


def format_cwa_time(value: dt.datetime) -> str:
    """Format a datetime the way CWA expects: local wall clock, second precision, no zone."""
    return value.replace(tzinfo=None, microsecond=0).isoformat(timespec="seconds")


@dataclass
class CwaClient:
    """Client for the CWA hourly station-observation dataset.

    Notes and assumptions:
    - The credential is sent as the ``Authorization`` query parameter.
    - ``timeFrom``/``timeTo`` are wall-clock times in the caller's chosen
      offset (UTC+8 for CWA); the zone suffix is dropped.
    - Retries are applied for transient HTTP errors (429/5xx) with exponential
      backoff. Any remaining transport, HTTP or JSON failure is raised as
      `UpstreamFetchError`.
    """

    api_token: Optional[str] = None
    base_url: str = DEFAULT_API_URL
    timeout_connect: float = 5.0
    timeout_read: float = 30.0
    max_retries: int = 3
    backoff_factor: float = 0.5

    def _session(self) -> requests.Session:
        s = requests.Session()
        retries = Retry(
            total=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retries)
        s.mount("https://", adapter)
        s.mount("http://", adapter)
        return s

    def fetch_observations(self, time_from: dt.datetime, time_to: dt.datetime) -> Dict[str, Any]:
        """Fetch raw hourly observations for all stations in ``[time_from, time_to]``.

        Returns
        -------
        dict
            Decoded JSON body; station blocks live under ``records.location``.
        """
        params = {
            "Authorization": self.api_token,
            "format": "JSON",
            "timeFrom": format_cwa_time(time_from),
            "timeTo": format_cwa_time(time_to),
        }

        timeout = (self.timeout_connect, self.timeout_read)
        try:
            with self._session() as s:
                resp = s.get(self.base_url, params=params, timeout=timeout)
                resp.raise_for_status()
                data = resp.json()
        except requests.RequestException as e:
            raise UpstreamFetchError(f"CWA request failed: {e}") from e
        except ValueError as e:
            raise UpstreamFetchError(f"CWA returned invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise UpstreamFetchError("CWA returned an unexpected payload type")
        return data

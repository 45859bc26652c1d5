"""
Network query effect.

The cgql/request effect sends a query to the server and dispatches the
response event when the reply arrives:

    {"cgql/request": (query, "profile/loaded")}

    -> dispatch("profile/loaded", "success", decoded_json)
    -> dispatch("profile/loaded", "failure", {"status": 503, "reason": "..."})

Requests run on a worker thread. The response re-enters the conductor
through its scheduler, never from the worker thread itself.
"""

import json
import logging
import threading
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Callable, Tuple

logger = logging.getLogger(__name__)

QUERY_REQUEST = "cgql/request"

SUCCESS = "success"
FAILURE = "failure"


class QueryClient:
    """
    Sends queries to a cgql endpoint.

    dispatch is called as dispatch(response_event, status, payload); pass
    Conductor.dispatch_soon so the response lands on the scheduler.
    """

    def __init__(self, url: str, dispatch: Callable[..., Any], timeout: float = 30.0):
        self.url = url
        self.dispatch = dispatch
        self.timeout = timeout

    def send_query(self, query: Any, response_event: str) -> threading.Thread:
        """
        Send a query without blocking the caller.

        Returns:
            The started worker thread
        """
        logger.debug("Sending server request: %r binding handler id: %s", query, response_event)
        worker = threading.Thread(
            target=self._perform,
            args=(query, response_event),
            name=f"cgql-{response_event}",
            daemon=True,
        )
        worker.start()
        return worker

    def _perform(self, query: Any, response_event: str) -> None:
        status, payload = self.request(query)
        self.dispatch(response_event, status, payload)

    def request(self, query: Any) -> Tuple[str, Any]:
        """
        POST the query form-encoded and decode the JSON reply.

        Returns:
            ("success", decoded_body) or ("failure", {"status", "reason"})
        """
        data = urllib.parse.urlencode({"query": json.dumps(query)}).encode("utf-8")
        req = urllib.request.Request(
            self.url,
            data=data,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            method="POST",
        )

        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as response:
                body = response.read().decode("utf-8")
            return SUCCESS, json.loads(body)
        except urllib.error.HTTPError as e:
            logger.warning("Query to %s failed with status %s", self.url, e.code)
            return FAILURE, {"status": e.code, "reason": str(e.reason)}
        except (OSError, ValueError) as e:
            logger.warning("Query to %s failed: %s", self.url, e)
            return FAILURE, {"status": None, "reason": str(e)}


def register_query_reducer(table, client: QueryClient) -> None:
    """Register the cgql/request effect backed by client."""

    def cgql_request(state, payload):
        query, response_event = payload
        client.send_query(query, response_event)
        return state

    table.register(QUERY_REQUEST, cgql_request)

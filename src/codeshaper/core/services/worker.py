from __future__ import annotations

"""
Background Transform Worker.

Hosts the protocol adapter on a dedicated daemon thread that communicates
only through messages: callers post request dictionaries into an inbox
queue and receive response dictionaries through a callback or a reply
queue. Each worker processes one request at a time and shares no state with
other workers, so independent workers can run side by side.
"""

import logging
import queue
import threading
from typing import Any, Callable, Dict, Mapping, Optional

from codeshaper.core.services.protocol import handle_message
from codeshaper.domain.languages import Mode

logger = logging.getLogger(__name__)

_STOP = object()

ResponseCallback = Callable[[Dict[str, Any]], None]


class TransformWorker:
    """
    Message-passing host for one transform mode.

    Usage:
        with TransformWorker(Mode.BEAUTIFY) as worker:
            response = worker.request({"content": "a{b:c}", "fileType": "css"})
    """

    def __init__(
            self,
            mode: Mode = Mode.MINIFY,
            on_message: Optional[ResponseCallback] = None,
            estimate_tokens: bool = False,
    ) -> None:
        self.mode = Mode.parse(mode)
        self.on_message = on_message
        self.estimate_tokens = estimate_tokens
        self._inbox: "queue.Queue[Any]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._lifecycle_lock = threading.Lock()
        self._terminated = False

    # -------------------------------------------------------------------------
    # LIFECYCLE
    # -------------------------------------------------------------------------

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> "TransformWorker":
        with self._lifecycle_lock:
            if self._terminated:
                raise RuntimeError("Worker has been terminated")
            if not self.is_alive:
                self._thread = threading.Thread(
                    target=self._run,
                    name=f"codeshaper-{self.mode.value}-worker",
                    daemon=True,
                )
                self._thread.start()
                logger.debug(f"Worker thread {self._thread.name} started.")
        return self

    def terminate(self, timeout: Optional[float] = None) -> None:
        """Stop the worker after the requests already queued have been answered."""
        with self._lifecycle_lock:
            self._terminated = True
            thread = self._thread
            self._thread = None
        if thread is not None and thread.is_alive():
            self._inbox.put(_STOP)
            thread.join(timeout)

    def __enter__(self) -> "TransformWorker":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.terminate()

    # -------------------------------------------------------------------------
    # MESSAGING
    # -------------------------------------------------------------------------

    def post_message(
            self,
            message: Mapping[str, Any],
            reply_to: Optional["queue.Queue[Dict[str, Any]]"] = None,
    ) -> None:
        """
        Enqueue a request. The response goes to `reply_to` when given,
        otherwise to the `on_message` callback.
        """
        self.start()
        self._inbox.put((message, reply_to))

    def request(self, message: Mapping[str, Any], timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Post a request and block until its response arrives.

        Raises:
            TimeoutError: If no response arrives within `timeout` seconds.
        """
        reply: "queue.Queue[Dict[str, Any]]" = queue.Queue(maxsize=1)
        self.post_message(message, reply)
        try:
            return reply.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError(f"No response from {self.mode.value} worker within {timeout}s") from None

    # -------------------------------------------------------------------------
    # THREAD BODY
    # -------------------------------------------------------------------------

    def _run(self) -> None:
        while True:
            item = self._inbox.get()
            if item is _STOP:
                break
            message, reply_to = item
            response = self._respond(message)
            self._deliver(response, reply_to)
        logger.debug(f"Worker thread for {self.mode.value} stopped.")

    def _respond(self, message: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            return handle_message(message, self.mode, estimate_tokens=self.estimate_tokens)
        except Exception as e:
            logger.critical(f"Worker: Critical failure while handling message: {e}", exc_info=True)
            return {"success": False, "error": str(e)}

    def _deliver(self, response: Dict[str, Any], reply_to: Optional["queue.Queue[Dict[str, Any]]"]) -> None:
        if reply_to is not None:
            reply_to.put(response)
            return
        if self.on_message is None:
            logger.debug("Worker: Response dropped, no listener registered.")
            return
        try:
            self.on_message(response)
        except Exception as e:
            logger.error(f"Worker: Response callback failed: {e}", exc_info=True)

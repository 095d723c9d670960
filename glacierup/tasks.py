import logging
import queue
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

logger = logging.getLogger(__name__)


@dataclass
class ProgressEvent:
    """
    Something a running action wants the foreground to show.

    kind is "bytes" (amount is the chunk just sent), "file" (a file
    finished; percent is the whole batch) or "status" (message only).
    """

    kind: str
    path: Optional[str] = None
    amount: int = 0
    total: int = 0
    percent: int = 0
    message: str = ""


class Worker:
    """
    Runs one action on its own thread. The action is handed a report
    callable that queues ProgressEvents; the foreground drains them with
    events() and then collects the result.
    """

    def __init__(self, name: str):
        self.name = name
        self.queue: "queue.Queue[ProgressEvent]" = queue.Queue()
        self.executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
        self.future: Optional[Future] = None

    def __repr__(self):
        return f"Worker: {self.name}"

    def report(self, event: ProgressEvent) -> None:
        self.queue.put(event)

    def start(self, function: Callable, *args, **kwargs) -> Future:
        if self.future is not None:
            raise RuntimeError("Worker %s already started" % self.name)
        logger.debug("Starting worker %s", self.name)
        self.future = self.executor.submit(function, *args, report=self.report, **kwargs)
        self.executor.shutdown(wait=False)
        return self.future

    def events(self, poll: float = 0.2) -> Iterator[ProgressEvent]:
        """
        Yields progress events until the action has finished and the queue
        is empty.
        """
        if self.future is None:
            raise RuntimeError("Worker %s not started" % self.name)
        while True:
            try:
                yield self.queue.get(timeout=poll)
            except queue.Empty:
                if self.future.done():
                    return

    def result(self):
        """
        Returns the action's result, re-raising anything it raised.
        """
        if self.future is None:
            raise RuntimeError("Worker %s not started" % self.name)
        return self.future.result()

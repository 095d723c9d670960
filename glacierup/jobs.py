import codecs
import enum
import logging
import os
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .exceptions import ExportError, JobFailedError
from .utils import ProgressLogger

logger = logging.getLogger(__name__)

# The service takes hours to prepare job output, so the first check waits
# three and a half hours and later ones come every ten minutes.
INITIAL_DELAY = 12600
POLL_INTERVAL = 600

COPY_CHUNK = 1024 * 1024


class JobKind(enum.Enum):
    INVENTORY = "inventory-retrieval"
    ARCHIVE = "archive-retrieval"


class JobState(enum.Enum):
    SUBMITTED = "submitted"
    PENDING = "pending"
    READY = "ready"
    FETCHED = "fetched"
    FAILED = "failed"


@dataclass
class RetrievalJob:
    job_id: str
    vault: str
    kind: JobKind
    submitted: datetime
    archive_id: Optional[str] = None
    state: JobState = JobState.SUBMITTED
    checks: int = 0
    failures: int = 0

    @property
    def completed(self) -> bool:
        return self.state in (JobState.READY, JobState.FETCHED)

    def move(self, state: JobState) -> None:
        logger.info("Job %s: %s -> %s", self.job_id, self.state.value, state.value)
        self.state = state


def inventory_file_name(vault: str, when: datetime) -> str:
    """
    Name for an inventory export, e.g. photos2026Oct19_142501.txt
    """
    return "%s%s.txt" % (vault, when.strftime("%Y%b%d_%H%M%S"))


class JobPoller:
    """
    Drives a retrieval job from submission to a file on disk.

    Polling is coarse: one long wait, then a status check
    every interval. A status check that raises is treated as "not done
    yet"; with max_failures unset that means polling never gives up, set
    it to turn a run of consecutive failures into JobFailedError.
    """

    def __init__(
        self,
        client,
        initial_delay: float = INITIAL_DELAY,
        interval: float = POLL_INTERVAL,
        max_failures: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.client = client
        self.initial_delay = initial_delay
        self.interval = interval
        self.max_failures = max_failures
        self.sleep = sleep
        self.clock = clock

    def submit(
        self, vault: str, kind: JobKind, archive_id: Optional[str] = None
    ) -> RetrievalJob:
        job_id = self.client.initiate_job(vault, kind.value, archive_id)
        job = RetrievalJob(
            job_id=job_id,
            vault=vault,
            kind=kind,
            submitted=self.clock(),
            archive_id=archive_id,
        )
        logger.info("Requested %s of vault %s as job %s", kind.value, vault, job_id)
        job.move(JobState.PENDING)
        return job

    def check(self, job: RetrievalJob) -> bool:
        """
        Asks the service once whether the job is done. Errors count as no.
        """
        job.checks += 1
        try:
            done = self.client.describe_job(job.vault, job.job_id)
        except Exception as e:
            job.failures += 1
            logger.warning("Status check %s for job %s failed: %s", job.checks, job.job_id, e)
            return False
        job.failures = 0
        return done

    def wait(self, job: RetrievalJob) -> RetrievalJob:
        """
        Blocks until the service reports the job complete.
        """
        self.sleep(self.initial_delay)
        while True:
            done = self.check(job)
            if self.max_failures is not None and job.failures >= self.max_failures:
                job.move(JobState.FAILED)
                raise JobFailedError(
                    "Job %s: %s status checks failed in a row"
                    % (job.job_id, job.failures)
                )
            if done:
                job.move(JobState.READY)
                return job
            logger.debug("Job %s not ready, checking again in %ss", job.job_id, self.interval)
            self.sleep(self.interval)

    def fetch(self, job: RetrievalJob, destination: str) -> str:
        """
        Writes the job output to destination. Inventories are copied line by
        line as text, archives byte for byte. No retries.
        """
        if job.state != JobState.READY:
            raise JobFailedError("Job %s is %s, not ready" % (job.job_id, job.state.value))
        try:
            body = self.client.get_job_output(job.vault, job.job_id)
            if job.kind is JobKind.INVENTORY:
                reader = codecs.getreader("utf-8")(body)
                with open(destination, "w", encoding="utf-8") as out:
                    for line in reader:
                        out.write(line)
            else:
                with open(destination, "wb") as out:
                    progress = ProgressLogger()
                    while True:
                        chunk = body.read(COPY_CHUNK)
                        if not chunk:
                            break
                        out.write(chunk)
                        progress(len(chunk))
        except Exception as e:
            job.move(JobState.FAILED)
            raise ExportError("Could not save output of job %s: %s" % (job.job_id, e)) from e
        job.move(JobState.FETCHED)
        logger.info("Saved output of job %s to %s", job.job_id, destination)
        return destination

    def inventory(self, vault: str, directory: Optional[str] = None) -> str:
        """
        Requests a vault inventory and saves it as <vault><timestamp>.txt.
        """
        job = self.submit(vault, JobKind.INVENTORY)
        self.wait(job)
        destination = os.path.join(
            directory or os.getcwd(),
            inventory_file_name(vault, job.submitted),
        )
        return self.fetch(job, destination)

    def retrieve(self, vault: str, archive_id: str, destination: str) -> str:
        """
        Requests an archive and saves it to destination.
        """
        job = self.submit(vault, JobKind.ARCHIVE, archive_id)
        self.wait(job)
        return self.fetch(job, destination)


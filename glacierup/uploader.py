import logging
import os
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .client import tree_hash
from .exceptions import GlacierUpError, LogWriteError
from .tasks import ProgressEvent
from .utils import human_size, path_to_description, percentage

logger = logging.getLogger(__name__)

NO_DIRECTORIES_ERROR = (
    "Directories, folders, and packages are not supported. "
    "Please compress %s into a single archive (such as a .zip) and try again."
)

# Pause between files in a batch
PAUSE = 0.1


def file_size(path: str) -> int:
    """
    Size of path in bytes, or 0 if it cannot be read; such a file then
    fails on its own when its turn to upload comes.
    """
    try:
        return os.path.getsize(path)
    except OSError:
        return 0


@dataclass
class UploadResult:
    path: str
    size: int
    archive_id: Optional[str] = None
    checksum: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def message(self, vault: str) -> str:
        if self.ok:
            return "Successfully uploaded %s to vault %s. Archive ID: %s" % (
                self.path,
                vault,
                self.archive_id,
            )
        return "Failed to upload %s: %s" % (self.path, self.error)


@dataclass
class UploadReport:
    vault: str
    results: List[UploadResult] = field(default_factory=list)

    @property
    def failed(self) -> List[UploadResult]:
        return [r for r in self.results if not r.ok]

    def summary(self) -> str:
        lines = ["Upload complete!"]
        lines.extend(r.message(self.vault) for r in self.results)
        return "\n".join(lines)


class Uploader:
    """
    Uploads a batch of files to the vault, one at a time and in order.

    A failed file is reported and skipped. A failure to write the upload
    log is not: LogWriteError propagates and ends the batch.
    """

    def __init__(
        self,
        state,
        client_factory: Optional[Callable] = None,
        report: Optional[Callable[[ProgressEvent], None]] = None,
        pause: float = PAUSE,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.state = state
        self.client_factory = client_factory or state.client
        self.report = report or (lambda event: None)
        self.pause = pause
        self.sleep = sleep
        self.log_writer = state.log_writer()

    def upload(self, paths: List[str]) -> UploadReport:
        if not paths:
            raise ValueError("No files to upload")
        for path in paths:
            if os.path.isdir(path):
                raise ValueError(NO_DIRECTORIES_ERROR % path)
        paths = [os.path.realpath(path) for path in paths]
        sizes = [file_size(path) for path in paths]
        total = sum(sizes)
        uploaded = 0
        report = UploadReport(self.state.vault)
        logger.info("Uploading %s files, %s", len(paths), human_size(total))
        for i, (path, size) in enumerate(zip(paths, sizes)):
            self.sleep(self.pause)
            logger.info("(%s/%s) Uploading: %s", i + 1, len(paths), path)
            result = self.upload_one(path, size)
            report.results.append(result)
            if result.ok:
                uploaded += size
            self.report(
                ProgressEvent(
                    kind="file",
                    path=path,
                    amount=uploaded,
                    total=total,
                    percent=percentage(uploaded, total),
                    message=result.message(self.state.vault),
                )
            )
        return report

    def upload_one(self, path: str, size: int) -> UploadResult:
        result = UploadResult(path=path, size=size)

        def progress(chunk_size):
            self.report(ProgressEvent(kind="bytes", path=path, amount=chunk_size, total=size))

        try:
            client = self.client_factory()
            archive_id, checksum = client.upload(
                self.state.vault,
                path,
                path_to_description(path),
                progress,
            )
        except (GlacierUpError, OSError) as e:
            logger.error("Upload of %s failed: %s", path, e)
            result.error = str(e)
            if self.log_writer is not None:
                self.log_writer.append_error(path, str(e))
            return result
        result.archive_id = archive_id
        result.checksum = checksum
        if self.log_writer is not None:
            try:
                result.checksum = tree_hash(path)
            except OSError as e:
                raise LogWriteError("Could not hash %s for the log: %s" % (path, e))
            self.log_writer.append(
                self.state.vault,
                self.state.region.name,
                path,
                size,
                result.checksum,
                archive_id,
            )
        return result

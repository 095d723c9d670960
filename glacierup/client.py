import contextlib
import logging
from typing import Callable, List, Optional, Tuple

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError
from botocore.utils import calculate_tree_hash

from .exceptions import ClientConfigError, ServiceError
from .regions import Region, by_index
from .utils import ProgressReader, printable

logger = logging.getLogger(__name__)

SOCKET_TIMEOUT_MS = 300000
MAX_RETRIES = 10


@contextlib.contextmanager
def translate_errors(action: str):
    """
    Converts SDK exceptions into this package's taxonomy: the service
    saying no is a ServiceError, anything that never got an answer is a
    ClientConfigError.
    """
    try:
        yield
    except ClientError as e:
        error = e.response.get("Error", {})
        raise ServiceError(
            "%s failed: %s" % (action, error.get("Message") or e),
            code=error.get("Code"),
        ) from e
    except BotoCoreError as e:
        raise ClientConfigError("%s failed: %s" % (action, e)) from e


def tree_hash(path: str) -> str:
    """
    Returns the SHA-256 tree hash the service uses to verify uploads.
    """
    with open(path, "rb") as fh:
        return calculate_tree_hash(fh)


class GlacierClient:
    """
    Thin wrapper around a boto3 glacier client bound to one region.
    """

    def __init__(self, client, region: Region):
        self.client = client
        self.region = region

    def __repr__(self):
        return f"GlacierClient: {self.region.name} ({self.region.glacier_endpoint})"

    def list_vaults(self) -> List[str]:
        """
        Returns all vault names, following the paging marker to the end.
        """
        names: List[str] = []
        marker = None
        with translate_errors("Listing vaults"):
            while True:
                kwargs = {"marker": marker} if marker else {}
                response = self.client.list_vaults(**kwargs)
                names.extend(v["VaultName"] for v in response.get("VaultList", []))
                marker = response.get("Marker")
                if not marker:
                    return names

    def create_vault(self, vault_name: str) -> str:
        with translate_errors("Creating vault %s" % vault_name):
            response = self.client.create_vault(vaultName=vault_name)
        return response.get("location", vault_name)

    def delete_archive(self, vault_name: str, archive_id: str) -> None:
        with translate_errors("Deleting archive"):
            self.client.delete_archive(
                vaultName=vault_name,
                archiveId=printable(archive_id),
            )

    def initiate_job(
        self, vault_name: str, kind: str, archive_id: Optional[str] = None
    ) -> str:
        params = {"Type": kind}
        if archive_id:
            params["ArchiveId"] = printable(archive_id)
        with translate_errors("Requesting %s" % kind):
            response = self.client.initiate_job(
                vaultName=vault_name,
                jobParameters=params,
            )
        return response["jobId"]

    def describe_job(self, vault_name: str, job_id: str) -> bool:
        """
        Returns True once the job has completed.
        """
        with translate_errors("Checking job"):
            response = self.client.describe_job(vaultName=vault_name, jobId=job_id)
        return bool(response.get("Completed"))

    def get_job_output(self, vault_name: str, job_id: str):
        """
        Returns the job's output as a streaming body.
        """
        with translate_errors("Fetching job output"):
            response = self.client.get_job_output(vaultName=vault_name, jobId=job_id)
        return response["body"]

    def upload(
        self,
        vault_name: str,
        path: str,
        description: str,
        callback: Optional[Callable[[int], None]] = None,
    ) -> Tuple[str, str]:
        """
        Uploads a single file, returning (archive id, tree hash). Hashing
        and request signing happen inside the SDK.
        """
        with open(path, "rb") as fh:
            body = ProgressReader(fh, callback) if callback else fh
            with translate_errors("Uploading %s" % path):
                response = self.client.upload_archive(
                    vaultName=vault_name,
                    archiveDescription=description,
                    body=body,
                )
        return response["archiveId"], response.get("checksum", "")


def build_client(
    access_key: str,
    secret_key: str,
    region_index: int,
    timeout_ms: int = SOCKET_TIMEOUT_MS,
    max_retries: int = MAX_RETRIES,
) -> GlacierClient:
    """
    Makes a client for the region. Nothing goes over the network here.
    """
    region = by_index(region_index)
    with translate_errors("Creating client"):
        client = boto3.client(
            "glacier",
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region.code,
            endpoint_url=region.glacier_endpoint,
            config=BotoConfig(
                connect_timeout=timeout_ms / 1000,
                read_timeout=timeout_ms / 1000,
                retries={"max_attempts": max_retries, "mode": "standard"},
            ),
        )
    logger.debug("Built glacier client for %s", region.name)
    return GlacierClient(client, region)

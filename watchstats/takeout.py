"""Delegated download of watch history through the Data Portability API"""

import asyncio
import io
import json
import logging
import zipfile
from typing import Any, Optional

import google_auth_httplib2
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from .config import config
from .exceptions import CredentialMissing, TakeoutError
from .normalizer import extract_takeout_history
from .youtube_client import TRANSPORT_ERRORS, describe_http_error

logger = logging.getLogger(__name__)

YOUTUBE_ACTIVITY_RESOURCE = "myactivity.youtube"
SCOPE = "https://www.googleapis.com/auth/dataportability.myactivity.youtube"


def decode_archive(content: bytes) -> list:
    """
    Decode a downloaded archive into the raw history array

    Accepts a JSON archive keyed by product and activity category, a bare
    JSON history array, or a zip holding a watch history JSON file.
    """
    if content[:2] == b"PK":
        try:
            with zipfile.ZipFile(io.BytesIO(content)) as archive:
                names = [name for name in archive.namelist() if name.endswith(".json")]
                history_names = [name for name in names if "history" in name.lower()]
                if not history_names:
                    raise TakeoutError("Archive does not contain a watch history file")
                content = archive.read(history_names[0])
        except zipfile.BadZipFile as e:
            raise TakeoutError(f"Corrupt archive: {e}") from e

    try:
        data = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise TakeoutError(f"Archive is not valid JSON: {e}") from e

    if isinstance(data, list):
        return data
    return extract_takeout_history(data)


class TakeoutDownloader:
    """Run a YouTube activity export job and fetch the resulting history"""

    def __init__(
        self,
        access_token: Optional[str] = None,
        service: Any = None,
        http: Any = None,
        poll_interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
    ):
        self.access_token = access_token or config.google_access_token
        if not self.access_token and service is None:
            raise CredentialMissing(
                "No access token available. Please authenticate with Google first."
            )

        if service is None or http is None:
            credentials = Credentials(
                token=self.access_token, client_id=config.google_client_id, scopes=[SCOPE]
            )
            service = service or build(
                "dataportability", "v1", credentials=credentials, cache_discovery=False
            )
            http = http or google_auth_httplib2.AuthorizedHttp(credentials)

        self.service = service
        self.http = http
        self.poll_interval = config.takeout_poll_interval if poll_interval is None else poll_interval
        self.max_attempts = config.takeout_max_attempts if max_attempts is None else max_attempts

    async def download_history(self) -> list:
        """
        Export, wait for and download the YouTube watch history

        Raises:
            TakeoutError: if the job fails, times out or the archive is unusable
        """
        loop = asyncio.get_running_loop()

        job_id = await loop.run_in_executor(None, self._initiate)
        logger.info(f"Export job {job_id} created, waiting for data to be prepared...")

        urls = await self._wait_for_archive(job_id)
        content = await loop.run_in_executor(None, self._download, urls[0])

        history = decode_archive(content)
        logger.info(f"Successfully downloaded {len(history)} YouTube history entries")
        return history

    async def _wait_for_archive(self, job_id: str) -> list[str]:
        loop = asyncio.get_running_loop()

        for attempt in range(1, self.max_attempts + 1):
            state = await loop.run_in_executor(None, self._get_state, job_id)
            status = state.get("state")

            if status == "COMPLETE":
                urls = state.get("urls") or []
                if not urls:
                    raise TakeoutError("Export job completed without an archive URL")
                return urls
            if status in ("FAILED", "CANCELLED"):
                raise TakeoutError(f"Export job {status.lower()}")

            logger.info(f"Preparing your data... ({attempt}/{self.max_attempts})")
            await asyncio.sleep(self.poll_interval)

        raise TakeoutError("Export job timed out. Please try again later.")

    def _initiate(self) -> str:
        try:
            response = self.service.portabilityArchive().initiate(
                body={"resources": [YOUTUBE_ACTIVITY_RESOURCE]}
            ).execute()
        except TRANSPORT_ERRORS as e:
            raise TakeoutError(f"Failed to create export job: {describe_http_error(e)}") from e

        job_id = response.get("archiveJobId")
        if not job_id:
            raise TakeoutError("Export job response did not include a job id")
        return job_id

    def _get_state(self, job_id: str) -> dict:
        try:
            return self.service.archiveJobs().getPortabilityArchiveState(
                name=f"archiveJobs/{job_id}/portabilityArchiveState"
            ).execute()
        except TRANSPORT_ERRORS as e:
            raise TakeoutError(f"Failed to check job status: {describe_http_error(e)}") from e

    def _download(self, url: str) -> bytes:
        try:
            response, content = self.http.request(url, "GET")
        except TRANSPORT_ERRORS as e:
            raise TakeoutError(f"Failed to download archive: {describe_http_error(e)}") from e

        if response.status != 200:
            raise TakeoutError(f"Failed to download archive: HTTP {response.status}")
        return content

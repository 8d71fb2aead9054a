"""
Repository Triage Engine

Decides whether a single repository looks like an archive drop and, if so,
fingerprints the archives found at its root.

Steps:
1. Collect distinct commit emails (best effort)
2. List root contents; no contents -> benign
3. Archive ratio below threshold -> undetermined, name/size only
4. Otherwise suspicious, and every root item is considered for escalation
5. Escalation: archive-named items under the size ceiling are downloaded,
   hashed, and their first entry extracted and hashed
"""

import asyncio
import logging
from typing import List, Optional

from repotriage.config import Settings, get_settings
from repotriage.integrations.github import GitHubGateway
from repotriage.models.triage import ContentFinding, RepositoryRecord, Verdict
from repotriage.utils.archive import inspect_first_entry, is_archive_name
from repotriage.utils.hashing import sha256_hex

logger = logging.getLogger(__name__)


def archive_ratio(contents: List[ContentFinding]) -> float:
    """Share of root items whose name ends in an archive extension."""
    if not contents:
        return 0.0
    archives = sum(1 for item in contents if is_archive_name(item.name))
    return archives / len(contents)


class RepositoryTriageEngine:
    """Applies the archive-ratio heuristic to one repository."""

    def __init__(self, gateway: GitHubGateway, settings: Optional[Settings] = None):
        self.gateway = gateway
        self.settings = settings or get_settings()

    async def triage(self, repository: RepositoryRecord) -> RepositoryRecord:
        """
        Triage a listed repository.

        Args:
            repository: Record produced by the repository listing

        Returns:
            A new RepositoryRecord with commit emails, contents and verdict set

        Raises:
            UpstreamError: If a lookup or an escalated download fails
            InspectionError: If an escalated archive cannot be read
        """
        commit_emails = await self.gateway.fetch_commit_emails(repository.api_url)

        contents = await self.gateway.fetch_root_contents(repository.api_url)
        if contents is None:
            logger.info(f"Repository {repository.name}: empty, verdict benign")
            return repository.model_copy(
                update={"commit_emails": commit_emails, "verdict": Verdict.BENIGN}
            )

        listing = [ContentFinding(name=item.name, size=item.size) for item in contents]
        ratio = archive_ratio(contents)
        logger.debug(
            f"Repository {repository.name}: {len(contents)} items, archive ratio {ratio:.2f}"
        )

        if ratio == 0.0 or ratio < self.settings.archive_ratio_threshold:
            logger.info(f"Repository {repository.name}: verdict undetermined")
            return repository.model_copy(
                update={
                    "commit_emails": commit_emails,
                    "contents": listing,
                    "verdict": Verdict.UNDETERMINED,
                }
            )

        logger.info(f"Repository {repository.name}: verdict suspicious, escalating")
        findings = await self._escalate_all(contents)
        return repository.model_copy(
            update={
                "commit_emails": commit_emails,
                "contents": findings,
                "verdict": Verdict.SUSPICIOUS,
            }
        )

    async def _escalate_all(self, contents: List[ContentFinding]) -> List[ContentFinding]:
        if self.settings.parallel_escalation:
            tasks = [asyncio.create_task(self.escalate(item)) for item in contents]
            try:
                # gather keeps results in listing order
                return list(await asyncio.gather(*tasks))
            except BaseException:
                for task in tasks:
                    task.cancel()
                raise
        return [await self.escalate(item) for item in contents]

    def should_escalate(self, item: ContentFinding) -> bool:
        """Archive-named items strictly under the size ceiling are inspected."""
        return (
            item.size < self.settings.archive_size_ceiling
            and is_archive_name(item.name)
            and bool(item.download_url)
        )

    async def escalate(self, item: ContentFinding) -> ContentFinding:
        """
        Download and fingerprint an archive, or return the item's listing.

        Raises:
            UpstreamError: If the download fails
            InspectionError: If the archive cannot be read
        """
        if not self.should_escalate(item):
            logger.debug(f"Not inspecting {item.name} ({item.size} bytes)")
            return ContentFinding(name=item.name, size=item.size)

        payload = await self.gateway.download_object(item.download_url)
        first_name, first_digest = await asyncio.to_thread(inspect_first_entry, payload)

        logger.debug(f"Inspected {item.name}: first entry {first_name or '<none>'}")
        return ContentFinding(
            name=item.name,
            size=item.size,
            sha256=sha256_hex(payload),
            first_content_name=first_name,
            first_content_sha256=first_digest,
        )

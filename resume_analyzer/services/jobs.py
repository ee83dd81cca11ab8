from abc import ABC, abstractmethod
from urllib.parse import urlparse

from resume_analyzer.models.analysis import JobDescription, JobReference
from resume_analyzer.services.errors import UnsupportedURL


class JobDescriptionResolver(ABC):
    """Turns a job-posting reference into descriptive text."""

    @abstractmethod
    async def resolve(self, job: JobReference) -> JobDescription:
        """Raises UnreachableSource or UnsupportedURL on failure."""


class PlaceholderJobResolver(JobDescriptionResolver):
    """Stand-in resolver that never fetches the posting.

    Returns a deterministic sentence naming the URL so prompts stay
    reproducible until real scraping exists.
    """

    SCHEMES = ("http", "https")

    async def resolve(self, job: JobReference) -> JobDescription:
        scheme = urlparse(job.url).scheme.lower()
        # Bare "example.com/jobs/1" style references have no scheme and are fine.
        if scheme and scheme not in self.SCHEMES:
            raise UnsupportedURL(f"Unsupported job URL: {job.url!r}")
        return JobDescription(text=f"Extracted job description from: {job.url}")

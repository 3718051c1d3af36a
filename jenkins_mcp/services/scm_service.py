"""
SCM Service Module

Extracts Git repository information from jobs and builds, and finds jobs
by repository URL and branch.
"""

import re
from typing import Any, Dict, Iterable, List, Optional

from loguru import logger

from jenkins_mcp.clients.jenkins_client import JenkinsClient
from jenkins_mcp.core.constants import (
    MAX_FOLDER_DEPTH,
    MAX_JOBS_PAGE_SIZE,
    TREE_BUILD_CHANGE_SETS,
    TREE_BUILD_SCM,
    TREE_JOB_SCM,
    TREE_SCM_SEARCH_FIELDS,
)
from jenkins_mcp.models.responses import ScmRecord
from jenkins_mcp.utils import build_path, job_full_name_to_path

_SCHEME_RE = re.compile(r"^(https?|git|ssh)://")
_USERINFO_RE = re.compile(r"^[^@]+@")

JobDescriptor = Dict[str, Any]


def normalize_scm_url(url: str) -> str:
    """
    Normalize a Git URL for loose comparison.

    Ignores scheme, user, a trailing ".git", trailing slashes, the
    SCP-style ":" separator and letter case.

    Example:
        >>> normalize_scm_url("git@GitHub.com:Org/Repo.git")
        'github.com/org/repo'
        >>> normalize_scm_url("https://github.com/org/repo.git/")
        'github.com/org/repo'
    """
    url = url.rstrip("/")
    if url.endswith(".git"):
        url = url[:-len(".git")]
    url = url.rstrip("/")
    url = _SCHEME_RE.sub("", url)
    url = _USERINFO_RE.sub("", url)
    url = url.replace(":", "/", 1)
    return url.lower()


def matches_scm_url(configured_url: str, target_url: str) -> bool:
    """Whether two Git URLs refer to the same repository."""
    return normalize_scm_url(configured_url) == normalize_scm_url(target_url)


def matches_branch(spec: str, branch: str) -> bool:
    """
    Match a Jenkins branch specifier against a branch name.

    "**" matches any branch. A leading "*/" on the specifier and a leading
    "refs/remotes/origin/" or "origin/" on the branch are ignored.

    Example:
        >>> matches_branch("*/main", "origin/main")
        True
    """
    if spec == "**":
        return True

    normalized_spec = spec[2:] if spec.startswith("*/") else spec

    normalized_branch = branch
    for prefix in ("refs/remotes/origin/", "origin/"):
        if normalized_branch.startswith(prefix):
            normalized_branch = normalized_branch[len(prefix):]

    return normalized_spec == normalized_branch


def flatten_jobs(jobs: Iterable[JobDescriptor]) -> List[JobDescriptor]:
    """
    Flatten a nested job tree, depth-first.

    A descriptor carrying a "jobs" collection is a folder: it is replaced
    by its flattened children and not returned itself.
    """
    result: List[JobDescriptor] = []
    for job in jobs:
        children = job.get("jobs")
        if children is not None:
            result.extend(flatten_jobs(children))
        else:
            result.append(job)
    return result


def build_scm_search_tree(depth: int = MAX_FOLDER_DEPTH) -> str:
    """
    Build a tree parameter fetching SCM fields for jobs nested up to depth folders.

    Example:
        >>> build_scm_search_tree(2).count("jobs[")
        2
    """
    tree = f"jobs[{TREE_SCM_SEARCH_FIELDS}]"
    for _ in range(max(depth, 1) - 1):
        tree = f"jobs[{TREE_SCM_SEARCH_FIELDS},{tree}]"
    return tree


def _unique(values: Iterable[Optional[str]]) -> List[str]:
    seen: Dict[str, None] = {}
    for value in values:
        if value:
            seen.setdefault(value, None)
    return list(seen)


def extract_scm_from_action(action: Optional[Dict[str, Any]]) -> Optional[ScmRecord]:
    """Build a record from a Git build action; None if it has no remote URLs."""
    if not action or not action.get("remoteUrls"):
        return None

    revision = action.get("lastBuiltRevision") or {}
    branches = [b.get("name") for b in revision.get("branch") or []]

    return ScmRecord(
        uris=_unique(action["remoteUrls"]),
        branches=_unique(branches),
        commit=revision.get("SHA1")
    )


def extract_scm_from_job(job: JobDescriptor) -> List[ScmRecord]:
    """Records from a job's SCM configuration and its Git actions."""
    records: List[ScmRecord] = []

    scm = job.get("scm") or {}
    uris = _unique(c.get("url") for c in scm.get("userRemoteConfigs") or [])
    if uris:
        records.append(ScmRecord(
            uris=uris,
            branches=_unique(b.get("name") for b in scm.get("branches") or [])
        ))

    records.extend(extract_scm_from_build(job))
    return records


def extract_scm_from_build(build: Dict[str, Any]) -> List[ScmRecord]:
    """Records from the Git actions of a build (or job)."""
    records = []
    for action in build.get("actions") or []:
        record = extract_scm_from_action(action)
        if record is not None:
            records.append(record)
    return records


def extract_job_scm_urls(job: JobDescriptor) -> List[str]:
    """All repository URLs a job refers to, configured or built."""
    scm = job.get("scm") or {}
    urls = [c.get("url") for c in scm.get("userRemoteConfigs") or []]
    for action in job.get("actions") or []:
        urls.extend((action or {}).get("remoteUrls") or [])
    return [u for u in urls if u]


def extract_job_branches(job: JobDescriptor) -> List[str]:
    """Branch specifiers from a job's SCM configuration."""
    scm = job.get("scm") or {}
    return [b["name"] for b in scm.get("branches") or [] if b.get("name")]


def job_matches(job: JobDescriptor, scm_url: str, branch: Optional[str] = None) -> bool:
    """Whether a job uses the repository and, if given, the branch."""
    if not any(matches_scm_url(url, scm_url) for url in extract_job_scm_urls(job)):
        return False

    if branch:
        return any(matches_branch(spec, branch) for spec in extract_job_branches(job))

    return True


class ScmService:
    """
    Service for SCM lookups.

    Example:
        >>> scm_service = ScmService(client)
        >>> jobs = await scm_service.find_jobs_with_scm_url("git@github.com:org/repo.git", branch="main")
    """

    def __init__(self, client: JenkinsClient):
        self.client = client

    async def get_job_scm(self, job_full_name: str) -> List[ScmRecord]:
        """SCM records of a job (empty list when it has none)."""
        logger.debug(f"getJobScm: {job_full_name}")

        job = await self.client.get_json(
            f"{job_full_name_to_path(job_full_name)}/api/json",
            {"tree": TREE_JOB_SCM}
        )
        return extract_scm_from_job(job)

    async def get_build_scm(self, job_full_name: str, build_number: Optional[int] = None) -> List[ScmRecord]:
        """SCM records of a build (empty list when it has none)."""
        logger.debug(f"getBuildScm: {job_full_name}#{build_number or 'last'}")

        build = await self.client.get_json(
            f"{build_path(job_full_name, build_number)}/api/json",
            {"tree": TREE_BUILD_SCM}
        )
        return extract_scm_from_build(build)

    async def get_build_change_sets(
        self,
        job_full_name: str,
        build_number: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Change log sets of a build."""
        logger.debug(f"getBuildChangeSets: {job_full_name}#{build_number or 'last'}")

        build = await self.client.get_json(
            f"{build_path(job_full_name, build_number)}/api/json",
            {"tree": TREE_BUILD_CHANGE_SETS}
        )
        return build.get("changeSets") or []

    async def find_jobs_with_scm_url(
        self,
        scm_url: str,
        branch: Optional[str] = None,
        skip: int = 0,
        limit: int = MAX_JOBS_PAGE_SIZE
    ) -> List[JobDescriptor]:
        """
        Find jobs using a repository, optionally filtered by branch.

        The whole job tree (folders up to MAX_FOLDER_DEPTH deep) is fetched
        in one request, flattened, filtered and then paginated.

        Args:
            scm_url: Repository URL in any common form (https, ssh, scp-style)
            branch: Branch name to filter by
            skip: Matching jobs to skip
            limit: Maximum jobs to return

        Returns:
            Matching job descriptors, in tree order
        """
        logger.debug(f"findJobsWithScmUrl: {scm_url}, branch={branch or 'any'}")

        data = await self.client.get_json("/api/json", {"tree": build_scm_search_tree()})
        matching = [job for job in flatten_jobs(data.get("jobs") or []) if job_matches(job, scm_url, branch)]

        logger.debug(f"findJobsWithScmUrl: {len(matching)} matching jobs")
        return matching[skip:skip + limit]

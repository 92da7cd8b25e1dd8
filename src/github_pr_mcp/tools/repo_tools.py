"""Repository lifecycle tool implementations.

``create_repository`` seeds a new repository with caller-supplied files in a
single commit using the Git data API:

    CREATE_REPO -> FETCH_DEFAULT_REF -> CREATE_BLOBS -> FETCH_BASE_TREE
      -> CREATE_TREE -> CREATE_COMMIT -> UPDATE_REF

Blobs are created concurrently; every other step needs the previous step's
SHA and runs in order.  A failure after CREATE_REPO leaves the repository in
place.  Nothing is rolled back, and the error names the step that failed.

``delete_repository`` refuses to do anything without ``confirmation=True``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from ..constants import BLOB_FILE_MODE, DEFAULT_INITIAL_COMMIT_MESSAGE
from ..envelope import ToolResult, failure, info, success
from ..errors import GitHubAPIError, describe_error
from ..github.api import GitHubAPI
from ..models import GitBlob, GitCommit, GitRef, GitTree, Repository, RepositoryFile, TreeEntry
from ..templates import render_repository

logger = logging.getLogger(__name__)


class CreateStep(str, Enum):
    CREATE_REPO = "create repository"
    FETCH_DEFAULT_REF = "fetch default branch ref"
    CREATE_BLOBS = "create blobs"
    FETCH_BASE_TREE = "fetch base tree"
    CREATE_TREE = "create tree"
    CREATE_COMMIT = "create commit"
    UPDATE_REF = "update branch ref"


@dataclass
class WorkflowOutcome:
    """What a ``CreateRepositoryWorkflow`` run did.

    ``failed_step`` is ``None`` on success.  ``repository`` is set as soon as
    CREATE_REPO succeeds, so callers can report what was left behind.
    """

    completed: list[CreateStep] = field(default_factory=list)
    failed_step: CreateStep | None = None
    error: GitHubAPIError | None = None
    repository: Repository | None = None
    commit: GitCommit | None = None

    @property
    def ok(self) -> bool:
        return self.failed_step is None


class StepFailed(Exception):
    def __init__(self, step: CreateStep, error: GitHubAPIError) -> None:
        super().__init__(f"{step.value} failed: {error}")
        self.step = step
        self.error = error


class CreateRepositoryWorkflow:
    """Create a repository and, when files are given, commit them in one go."""

    def __init__(
        self,
        api: GitHubAPI,
        name: str,
        *,
        owner: str | None = None,
        description: str | None = None,
        private: bool = False,
        files: Sequence[RepositoryFile] = (),
        initialize_with_readme: bool = True,
        commit_message: str = DEFAULT_INITIAL_COMMIT_MESSAGE,
    ) -> None:
        self.api = api
        self.name = name
        self.owner = owner
        self.description = description
        self.private = private
        self.files = list(files)
        self.initialize_with_readme = initialize_with_readme
        self.commit_message = commit_message
        self.outcome = WorkflowOutcome()

    async def _step(self, step: CreateStep, call):
        """Await ``call`` and record ``step`` as completed, or raise ``StepFailed``."""
        logger.debug("create-repository %s: %s", self.name, step.value)
        try:
            result = await call
        except GitHubAPIError as exc:
            raise StepFailed(step, exc) from exc
        except Exception as exc:
            # Malformed payloads surface as KeyError/TypeError from the model parsing
            logger.exception("create-repository %s: unexpected failure in %s", self.name, step.value)
            error = GitHubAPIError(f"Unexpected response from GitHub: {exc!r}")
            raise StepFailed(step, error) from exc
        self.outcome.completed.append(step)
        return result

    async def run(self) -> WorkflowOutcome:
        try:
            await self._run()
        except StepFailed as exc:
            logger.error("create-repository %s stopped at %s: %s", self.name, exc.step.value, exc.error)
            self.outcome.failed_step = exc.step
            self.outcome.error = exc.error
        return self.outcome

    async def _run(self) -> None:
        repository = await self._step(CreateStep.CREATE_REPO, self.create_repo())
        self.outcome.repository = repository
        if not self.files:
            return

        owner, repo = repository.owner, repository.name
        head: GitRef = await self._step(
            CreateStep.FETCH_DEFAULT_REF,
            self.api.get_ref(owner, repo, repository.default_branch),
        )
        blobs: list[GitBlob] = await self._step(CreateStep.CREATE_BLOBS, self.create_blobs(owner, repo))
        base: GitTree = await self._step(CreateStep.FETCH_BASE_TREE, self.api.get_tree(owner, repo, head.sha))
        entries = [
            TreeEntry(path=f.path, sha=blob.sha, mode=BLOB_FILE_MODE, type="blob")
            for f, blob in zip(self.files, blobs)
        ]
        tree: GitTree = await self._step(
            CreateStep.CREATE_TREE,
            self.api.create_tree(owner, repo, entries, base_tree=base.sha),
        )
        commit: GitCommit = await self._step(
            CreateStep.CREATE_COMMIT,
            self.api.create_commit(owner, repo, self.commit_message, tree.sha, [head.sha]),
        )
        self.outcome.commit = commit
        await self._step(
            CreateStep.UPDATE_REF,
            self.api.update_ref(owner, repo, repository.default_branch, commit.sha),
        )

    async def create_repo(self) -> Repository:
        # Seeding files needs an initial ref to build on, so files force auto-init.
        auto_init = self.initialize_with_readme or bool(self.files)
        if self.owner:
            return await self.api.create_org_repo(
                self.owner,
                self.name,
                description=self.description,
                private=self.private,
                auto_init=auto_init,
            )
        return await self.api.create_user_repo(
            self.name,
            description=self.description,
            private=self.private,
            auto_init=auto_init,
        )

    async def create_blobs(self, owner: str, repo: str) -> list[GitBlob]:
        """Create one blob per file concurrently; any failure fails the whole step."""
        results = await asyncio.gather(
            *(self.api.create_blob(owner, repo, f.content, f.encoding) for f in self.files),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return list(results)


def _coerce_files(files: Sequence[RepositoryFile | dict[str, str]] | None) -> list[RepositoryFile]:
    coerced: list[RepositoryFile] = []
    for item in files or []:
        if isinstance(item, RepositoryFile):
            coerced.append(item)
        else:
            coerced.append(
                RepositoryFile(
                    path=item["path"],
                    content=item.get("content", ""),
                    encoding=item.get("encoding") or "utf-8",
                )
            )
    return coerced


async def create_repository(
    api: GitHubAPI,
    name: str,
    owner: str | None = None,
    description: str | None = None,
    private: bool = False,
    files: Sequence[RepositoryFile | dict[str, str]] | None = None,
    initialize_with_readme: bool = True,
    commit_message: str | None = None,
) -> ToolResult:
    """Create a repository under ``owner`` (an organization) or the token's user."""
    try:
        repo_files = _coerce_files(files)
    except (KeyError, ValueError) as exc:
        return failure(f"Error creating repository: invalid file entry: {exc}")

    workflow = CreateRepositoryWorkflow(
        api,
        name,
        owner=owner,
        description=description,
        private=private,
        files=repo_files,
        initialize_with_readme=initialize_with_readme,
        commit_message=commit_message or DEFAULT_INITIAL_COMMIT_MESSAGE,
    )
    outcome = await workflow.run()
    return render_create_outcome(name, owner, repo_files, outcome)


def render_create_outcome(
    name: str,
    owner: str | None,
    files: Sequence[RepositoryFile],
    outcome: WorkflowOutcome,
) -> ToolResult:
    target = f"{owner}/{name}" if owner else name
    if outcome.failed_step is CreateStep.CREATE_REPO:
        subject = f"Owner {owner}" if owner else None
        return failure(f"Error creating repository {target}: {describe_error(outcome.error, subject)}")

    repository = outcome.repository
    if not outcome.ok:
        return failure(
            f"Repository {repository.full_name} was created ({repository.url}) but initializing it "
            f"failed at step '{outcome.failed_step.value}': {describe_error(outcome.error)}\n"
            "The repository was left in place; delete it or add the files manually."
        )

    paths = [f.path for f in files]
    if paths:
        header = f"✅ Created repository {repository.full_name} with {len(paths)} file(s) in one commit."
    else:
        header = f"✅ Created repository {repository.full_name}."
    return success(f"{header}\n\n{render_repository(repository, paths)}")


async def delete_repository(
    api: GitHubAPI,
    owner: str,
    repo: str,
    confirmation: bool = False,
) -> ToolResult:
    """Delete ``owner/repo``.  Irreversible, so ``confirmation`` must be ``True``."""
    full_name = f"{owner}/{repo}"
    if confirmation is not True:
        return info(
            f"Deletion of {full_name} not performed: set confirmation to true to delete it. "
            "This cannot be undone."
        )

    try:
        existing = await api.find_repo(owner, repo)
    except GitHubAPIError as exc:
        logger.error("Existence check for %s failed: %s", full_name, exc)
        return failure(f"Error deleting repository {full_name}: {describe_error(exc)}")
    if existing is None:
        return info(f"Repository {full_name} does not exist. Nothing to delete.")

    try:
        await api.delete_repo(owner, repo)
    except GitHubAPIError as exc:
        logger.error("Deleting %s failed: %s", full_name, exc)
        return failure(f"Error deleting repository {full_name}: {describe_error(exc, f'Repository {full_name}')}")

    logger.info("Deleted repository %s", full_name)
    return success(f"✅ Repository {full_name} has been permanently deleted.")

"""Identity keys shared across the store, services and event handlers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RepoKey:
    """Identifies a repository."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class IssueKey:
    """Identifies an issue within a repository."""

    owner: str
    repo: str
    issue_number: int

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}#{self.issue_number}"


@dataclass(frozen=True)
class PullKey:
    """Identifies a pull request within a repository."""

    owner: str
    repo: str
    pull_number: int

    def to_issue_key(self) -> IssueKey:
        """Pull requests share their number space with issues."""
        return IssueKey(self.owner, self.repo, self.pull_number)

    @property
    def repo_key(self) -> RepoKey:
        return RepoKey(self.owner, self.repo)

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}#{self.pull_number}"

from offer_radar.stores.base import ContentStore, RecordSource, StoredContent
from offer_radar.stores.github import (
    GitHubClient,
    GitHubContentStore,
    GitHubError,
    GitHubIssueSource,
)

__all__ = [
    "ContentStore",
    "GitHubClient",
    "GitHubContentStore",
    "GitHubError",
    "GitHubIssueSource",
    "RecordSource",
    "StoredContent",
]

import pytest

from offer_radar.config import Settings


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        github_token="ghp_test",
        github_repo="owner/repo",
        firebase_config="{}",
    )

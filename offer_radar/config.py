from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # GitHub (registrations + last offer storage)
    github_token: str = ""
    github_repo: str = ""  # "owner/name"
    github_api_url: str = "https://api.github.com"
    registry_label: str = "device-token"
    registry_state: str = "open"
    state_path: str = "last-offer.json"
    http_timeout: int = 30  # seconds

    # Firebase service account JSON
    firebase_config: str = "{}"

    # Target page
    target_url: str = "https://www.lagonika.gr/"
    offer_container_selector: str = "#tour-offerContainer"
    offer_title_selector: str = "#tour-offerContainer h3"
    offer_link_selector: str = "#tour-offerContainer a.linkTag"
    page_load_timeout_ms: int = 60000
    container_timeout_ms: int = 30000
    browser_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    accept_language: str = "en-US,en;q=0.9,el;q=0.8"

    # Notifications
    notification_title: str = "🚀 Νέα Προσφορά!"
    batch_size: int = 5

    log_level: str = "INFO"

    @property
    def github_owner(self) -> str:
        return self._split_repo()[0]

    @property
    def github_repo_name(self) -> str:
        return self._split_repo()[1]

    def _split_repo(self) -> tuple:
        owner, _, name = self.github_repo.partition("/")
        if not owner or not name or "/" in name:
            raise ValueError(
                f"GITHUB_REPO must look like 'owner/name', got {self.github_repo!r}"
            )
        return owner, name


@lru_cache
def get_settings() -> Settings:
    return Settings()

from pydantic import BaseModel, ConfigDict, Field


class SourceConfig(BaseModel):
    """
    One owner's list of Moxfield deck/collection URLs.

    Older configs use a single `url`; newer ones use `urls`. Both may be
    present, in which case `url` is processed first.
    """

    owner: str
    url: str | None = None
    urls: list[str] = Field(default_factory=list)

    def all_urls(self) -> list[str]:
        """Every URL configured for this source, legacy `url` first."""
        urls = [self.url] if self.url else []
        urls.extend(self.urls)
        return urls


class TrackerConfig(BaseModel):
    """The config.json document."""

    model_config = ConfigDict(populate_by_name=True)

    sources: list[SourceConfig]
    phone_secret_names: dict[str, str] = Field(default_factory=dict, alias="phoneSecretNames")

"""List providers use case."""

from pydantic import BaseModel

from gatekeep.config import AuthSettings


class ProvidersResponse(BaseModel):
    """Public client identifiers clients need to start a provider sign-in."""

    google_client_id: str | None
    microsoft_client_id: str | None
    facebook_app_id: str | None


class ListProvidersUseCase:
    """Use case for listing configured providers."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        self.auth_settings = auth_settings

    async def execute(self) -> ProvidersResponse:
        return ProvidersResponse(
            google_client_id=self.auth_settings.google.client_id,
            microsoft_client_id=self.auth_settings.microsoft.client_id,
            facebook_app_id=self.auth_settings.facebook.app_id,
        )

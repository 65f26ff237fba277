from supabase import create_client, Client, ClientOptions
from typing import Optional
from portfolio.config import settings as default_settings
from portfolio.config.settings import Settings


class SupabaseClient:
    _client: Client = None

    @classmethod
    def get_client(cls, settings: Optional[Settings] = None) -> Client:
        if cls._client is None:
            settings = settings or default_settings
            settings.validate_backend()
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def for_session(cls, access_token: str, settings: Optional[Settings] = None) -> Client:
        """Fresh client whose table calls run as the holder of `access_token`; never cached."""
        settings = settings or default_settings
        settings.validate_backend()
        options = ClientOptions(
            headers={"Authorization": f"Bearer {access_token}"},
            auto_refresh_token=False,
            persist_session=False,
        )
        return create_client(settings.supabase_url, settings.supabase_key, options=options)

    @classmethod
    def reset_client(cls):
        cls._client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()

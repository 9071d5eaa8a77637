from supabase import create_client, Client, ClientOptions
from app.config import settings


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Use only for bootstrap and the admin document read."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def create_anon_client(cls) -> Client:
        """Fresh anon client whose auth session is not shared with other requests (sign-in flows)."""
        return create_client(settings.supabase_url, settings.supabase_key)

    @classmethod
    def for_user(cls, access_token: str) -> Client:
        """Client that sends the caller's JWT so RLS evaluates auth.uid() as that caller."""
        return create_client(
            settings.supabase_url,
            settings.supabase_key,
            options=ClientOptions(headers={"Authorization": f"Bearer {access_token}"}),
        )

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_service_supabase() -> Client:
    return SupabaseClient.get_service_client()


def get_client_factory():
    """Dependency returning the per-caller client factory (overridden in tests)."""
    return SupabaseClient.for_user


def get_anon_client_factory():
    return SupabaseClient.create_anon_client

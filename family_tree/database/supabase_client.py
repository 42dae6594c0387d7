from supabase import create_client, Client, ClientOptions
from family_tree.config import settings
from family_tree.database.backend import Backend


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None
    _backend: Backend = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Needed for auth admin calls."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def get_backend(cls) -> Backend:
        if cls._backend is None:
            cls._backend = Backend(cls.get_client())
        return cls._backend

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None
        cls._backend = None


def create_auth_client() -> Client:
    """Throwaway anon client for one sign-up or sign-in.

    Signing in on a client rebinds its PostgREST headers to the user's JWT, so
    these calls never run on the shared client behind the Backend.
    """
    return create_client(
        settings.supabase_url,
        settings.supabase_key,
        options=ClientOptions(persist_session=False, auto_refresh_token=False),
    )


def get_backend() -> Backend:
    return SupabaseClient.get_backend()


def get_admin_client() -> Client:
    """Service-role client for auth admin calls (deleting users, revoking sessions)"""
    return SupabaseClient.get_service_client()

from fastapi import Request
from supabase import create_client, Client
from app.config import Settings


def create_supabase_client(settings: Settings) -> Client:
    """Build the Supabase client once at startup. Prefers the service_role key when configured."""
    if not settings.supabase_url:
        raise ValueError("SUPABASE_URL must be configured")
    key = settings.supabase_service_role_key or settings.supabase_key
    if not key:
        raise ValueError("SUPABASE_KEY or SUPABASE_SERVICE_ROLE_KEY must be configured")
    return create_client(settings.supabase_url, key)


def get_supabase(request: Request) -> Client:
    """Dependency returning the client attached to the application at startup."""
    client = getattr(request.app.state, "supabase", None)
    if client is None:
        raise RuntimeError("Supabase client has not been initialised")
    return client

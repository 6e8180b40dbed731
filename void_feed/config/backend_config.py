"""Connection settings for the hosted content backend."""

from pydantic import BaseModel, Field


class BackendConfig(BaseModel):
    """Configuration for the REST gateways."""

    base_url: str = Field(..., description="Root of the REST API, e.g. https://x.supabase.co/rest/v1")
    api_key: str
    items_table: str = "memos"
    profiles_table: str = "profiles"
    timeout: float = Field(10.0, gt=0)
    max_retries: int = Field(3, ge=1)
    retry_backoff: float = Field(0.5, ge=0)
    failure_threshold: int = Field(5, ge=1)
    reset_timeout: float = Field(30.0, ge=0)

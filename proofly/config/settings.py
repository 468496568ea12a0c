from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    forms_root: str = "forms"
    request_type: str = "birth_certificate"

    blob_api_url: str = "https://blob.vercel-storage.com"
    blob_read_write_token: str = ""
    fetch_timeout_seconds: int = 30

    mailing_provider: str = "lob"
    lob_api_url: str = "https://api.lob.com/v1"
    lob_api_key: str = ""
    lob_bank_account_id: str = ""
    mailing_timeout_seconds: int = 60

    attestation_provider: str = "eas"
    attestation_rpc_url: str = "https://mainnet.base.org"
    attestation_contract_address: str = "0x4200000000000000000000000000000000000021"
    attestation_signer_private_key: str = ""
    attestation_schema_authorization: str = ""
    attestation_schema_fulfillment: str = ""
    attestation_schema_deletion: str = ""
    attestation_receipt_timeout_seconds: int = 120
    attestation_explorer_url: str = "https://base.easscan.org/attestation/view"

    email_provider: str = "postmark"
    postmark_server_token: str = ""
    from_email: str = "Hello@HudsonRnD.com"
    support_email: str = "Hello@HudsonRnD.com"

    result_cache_backend: str = "memory"
    redis_url: str = ""
    result_cache_ttl_seconds: int = 60 * 60 * 24 * 7
    status_timeout_seconds: int = 600

    dispatcher_max_workers: int = 4
    dedupe_runs: bool = False

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List

# Values shipped in example env files or injected at build time
PLACEHOLDER_VALUES = {
    "your_gemini_api_key_here",
    "your_anon_key_here",
    "https://your-project-id.supabase.co",
    "build-time-gemini-key",
    "build-time-anon-key",
}
PLACEHOLDER_MARKERS = ("your_", "placeholder", "example")
REQUIRED_SETTINGS = ("gemini_api_key", "supabase_url", "supabase_key")


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for credit RPCs and storage writes
    generated_bucket: str = "generated-tryons"

    # Google Generative AI
    gemini_api_key: str = ""
    gemini_image_model: str = "gemini-2.5-flash-image-preview"
    gemini_max_output_tokens: int = 2048

    # Razorpay
    razorpay_key_id: str = ""
    razorpay_key_secret: str = ""
    razorpay_webhook_secret: str = ""
    razorpay_api_base: str = "https://api.razorpay.com/v1"

    # Admin console
    admin_username: str = "super_admin"
    admin_password: str = ""  # empty disables admin login
    admin_jwt_secret: str = "dev_admin_secret_please_change"
    admin_session_days: int = 7

    # Browser extension / site
    app_url: str = "http://localhost:3000"
    extension_origin: Optional[str] = None
    extension_id: Optional[str] = None
    cookie_secure: bool = False

    # Try-on
    tryon_credit_cost: int = 1
    image_fetch_timeout: float = 30.0

    # App
    app_name: str = "wearly-api"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    tryon_rate_limit: str = "20/minute"
    rate_limit_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def secure_cookies(self) -> bool:
        return self.is_production or self.cookie_secure

    def get_cors_origins_list(self) -> List[str]:
        origins = [self.app_url, "http://localhost:3000", "https://localhost:3000"]
        if self.extension_origin:
            origins.append(self.extension_origin)
        seen = []
        for o in origins:
            o = (o or "").strip()
            if o and o not in seen:
                seen.append(o)
        return seen

    def validate_environment(self) -> List[str]:
        """Return a list of problems with required settings (missing or placeholder values)."""
        problems = []
        for name in REQUIRED_SETTINGS:
            value = getattr(self, name)
            if not value:
                problems.append(f"Missing required setting: {name.upper()}")
            elif value in PLACEHOLDER_VALUES or any(m in value for m in PLACEHOLDER_MARKERS):
                problems.append(f"{name.upper()} appears to contain a placeholder value")
        return problems

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()

from pydantic_settings import BaseSettings

# Bases that got concatenated twice by a misconfigured proxy
_MALFORMED_BASES = {
    "https://proptech.com.py/https/api.proptech.com.py": "https://api.proptech.com.py",
    "http://proptech.com.py/http/api.proptech.com.py": "http://api.proptech.com.py",
}

class Settings(BaseSettings):
    PROPTECH_API_URL: str = "http://localhost:8080"
    PUBLIC_API_URL: str | None = None
    HTTP_TIMEOUT_SECONDS: float = 30.0
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @property
    def api_base(self) -> str:
        return resolve_api_url(self.PROPTECH_API_URL)

    @property
    def public_base(self) -> str:
        return resolve_api_url(self.PUBLIC_API_URL or self.PROPTECH_API_URL)

def resolve_api_url(raw: str) -> str:
    base = (raw or "").strip()
    for broken, fixed in _MALFORMED_BASES.items():
        if broken in base:
            base = fixed
            break
    base = base.rstrip("/")
    # Callers always pass paths starting with /api
    if base.endswith("/api"):
        base = base[: -len("/api")]
    return base

settings = Settings()

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    server_host: str = "0.0.0.0"
    server_port: int = 8080
    # Optional full database URL override (useful for tests)
    database_url: str = ""
    db_host: str = "db"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "flixauth"
    # Database connection pool settings
    db_pool_size: int = 20
    db_max_overflow: int = 30
    db_pool_recycle: int = 3600  # Recycle connections after 1 hour
    db_pool_pre_ping: bool = True
    # Public base URL used to build links in outgoing emails
    app_url: str = "http://localhost:3000"
    # Email / SendGrid
    sendgrid_api_key: str = ""
    email_from: str = "no-reply@example.com"
    # Lifetime of verification and password reset tokens (seconds)
    token_ttl_seconds: int = 3600
    # First scheme is used for new hashes; the rest are accepted on verify
    password_hash_schemes: list[str] = ["pbkdf2_sha256", "bcrypt"]


# module-level settings instance for convenience across the app
settings = Settings()

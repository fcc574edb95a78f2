from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="INVOICER_", extra="ignore")

    db_url: str = "sqlite:///invoicer.db"

    storage_backend: str = "local"
    storage_local_path: str = "./invoices"
    storage_prefix: str = "invoices"

    default_currency: str = "USD"
    invoice_number_start: int = 1000
    pdf_template: str = "classic"

    log_level: str = "INFO"
    log_json: bool = False
    log_file: str = ""


settings = Settings()

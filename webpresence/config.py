from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    log_level: str = "INFO"
    enable_crawlee: bool = True
    fast_mode: bool = False
    use_headless: bool = True
    fetch_timeout: float = 30.0
    fetch_retries: int = 3
    fast_fetch_timeout: float = 3.0
    probe_timeout: float = 10.0
    redirect_probe_timeout: float = 5.0
    browser_timeout: float = 60.0
    max_secondary_pages: int = 5
    secondary_page_retries: int = 2
    crawl_delay: float = 0.5
    probe_social_profiles: bool = False

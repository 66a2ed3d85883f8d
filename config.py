# config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from typing import List

# Load .env file
load_dotenv()

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    DEBUG: bool = True
    ALLOWED_ORIGINS: str = ""  # Comma-separated list of allowed origins in production
    LOG_LEVEL: str = "INFO"

    # Admin settings
    ADMIN_TOKEN: str = ""  # Generated at startup when empty
    ADMIN_RECENT_EVENTS: int = 50

    # Pool settings
    POOL_FEE: float = 3.0  # percent
    REWARD_PER_SHARE: int = 1
    ALGORITHM: str = "sha256"
    DIFFICULTY: str = "0x0000ffff00000000000000000000000000000000000000000000000000000000"
    DIFFICULTY_PREFIX: str = "0000"

    # Token settings
    TOKEN_ADDRESS: str = "placeholder-mint-address"
    TOKEN_DECIMALS: int = 9
    NETWORK: str = "devnet"

    # Issuance service settings
    ISSUANCE_URL: str = ""
    ISSUANCE_API_KEY: str = ""
    ISSUANCE_TIMEOUT: int = 30

    # Share validation settings
    ACTIVE_WINDOW_MS: int = 300000  # 5 minutes
    SHARE_INTERVAL_MS: int = 1000
    TIMESTAMP_TOLERANCE_MS: int = 300000

    # Security log settings
    SECURITY_LOG_CAPACITY: int = 1000
    SECURITY_LOG_RETAIN: int = 500

    # Rate limit settings (disabled when REDIS_URL is empty)
    REDIS_URL: str = ""
    API_RATE_LIMIT: int = 100
    API_RATE_WINDOW: int = 900  # 15 minutes
    MINER_RATE_LIMIT: int = 60
    MINER_RATE_WINDOW: int = 60

    # Monitoring settings
    STATS_LOG_INTERVAL: int = 30  # seconds
    SNAPSHOT_PATH: str = "miners-backup.json"

    def get_allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(',') if origin.strip()]

    @property
    def reward_raw_amount(self) -> int:
        """Per-share reward expressed in the token's smallest unit"""
        return self.REWARD_PER_SHARE * 10 ** self.TOKEN_DECIMALS

# Create settings instance
settings = Settings()

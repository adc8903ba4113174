from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    # Протокол подачи звезд
    submission_window_seconds: int = 300  # 5 минут на подпись сообщения
    challenge_tag: str = "starRegistry"
    message_delimiter: str = ":"

    # Цепочка
    genesis_data: str = "Genesis Block"

    # Фоновый аудит цепочки
    chain_audit_enabled: bool = True
    chain_audit_interval: int = 60  # секунды

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Логирование
    log_to_file: bool = True
    log_dir: str = "logs"

    # Разработка
    debug: bool = False

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


settings = Settings()

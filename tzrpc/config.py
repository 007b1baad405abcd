from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    # Node connection
    rpc_url: str = "http://localhost:8732"
    request_timeout: float = 10.0

    # How long GET /network/log is followed before giving up (seconds)
    log_duration: float = 30.0

    debug: bool = False

    class Config:
        env_prefix = "TZRPC_"
        env_file = ".env"


settings = ClientSettings()

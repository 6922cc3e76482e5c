import logging
import os
from dataclasses import dataclass

APP_VERSION = "1.0.0"

DEFAULT_API_URL = "https://api.imgflip.com/get_memes"


@dataclass(frozen=True)
class ViewerSettings:
    api_url: str
    port: int
    timeout: float
    view_timeout: float
    user_agent: str
    log_level: str

    @classmethod
    def from_env(cls) -> "ViewerSettings":
        return cls(
            api_url=os.getenv("MEME_API_URL", DEFAULT_API_URL),
            port=int(os.getenv("PORT", "5600")),
            timeout=float(os.getenv("REQUEST_TIMEOUT", "10.0")),
            view_timeout=float(os.getenv("VIEW_TIMEOUT", "30.0")),
            user_agent=os.getenv("USER_AGENT", f"meme-viewer/{APP_VERSION}"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


SETTINGS = ViewerSettings.from_env()


def configure_logging() -> logging.Logger:
    logging.basicConfig(level=SETTINGS.log_level)
    return logging.getLogger("meme-viewer")

from gsv_backend.config.settings import settings

__all__ = ["settings"]

from wearly.config.settings import settings

__all__ = ["settings"]

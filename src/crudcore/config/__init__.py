from .settings import CommonConfigOptions, Platform, Settings, get_settings

__all__ = ["CommonConfigOptions", "Platform", "Settings", "get_settings"]

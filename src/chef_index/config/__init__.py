from chef_index.config.settings import IndexSettings, ObservabilitySettings, Settings

__all__ = ["IndexSettings", "ObservabilitySettings", "Settings"]

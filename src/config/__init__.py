from .backend import BackendKind, BackendMode, NotionConfig, NotionConfigError, get_backend_mode
from .features import FeatureFlags, get_features, load_features
from .settings import settings

__all__ = [
    "settings",
    "FeatureFlags",
    "get_features",
    "load_features",
    "BackendKind",
    "BackendMode",
    "NotionConfig",
    "NotionConfigError",
    "get_backend_mode",
]

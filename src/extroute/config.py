"""Application configuration.

AppConfig is a frozen dataclass. Fields are attributes, not string-key
dict lookups, and cannot change after creation.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, ext_routes=False)
    """

    debug: bool = False

    # Ext routes: duplicate @ext_mapping handlers under ext_prefix at freeze time
    ext_routes: bool = True
    ext_prefix: str = "/ext"

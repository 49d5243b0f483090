"""Role bridge between a chat community and the game server.

To use the admin API:
    from rolebridge.flask_app import create_app

To use the sync service directly:
    from rolebridge.config import load_settings
    from rolebridge.core.role_sync import RoleSyncService

    service = RoleSyncService.from_config(load_settings())
"""
# Note: flask_app is not imported here so the core can be used without Flask

__version__ = "1.0.0"

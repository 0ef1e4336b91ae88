"""StarCraft: Mass Recall installer (state-driven, offline-capable).

Core design goals:
- Download packages from a manifest, or use ZIPs placed next to the installer
- Copy-only placement into the game's Maps/Mods folders
- Idempotent, resumable steps
- Centralized logging
"""

__all__ = []

from __future__ import annotations

from figma_i18n import __version__

USER_AGENT = f"figma-i18n-sync/{__version__}"

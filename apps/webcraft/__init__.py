# -*- coding: utf-8 -*-
"""WebCraft (HTTP front-end for the craft store).

- Backend: FastAPI (ASGI)
- Data: CraftStore snapshot (JSON file or SQLite)
- Clients: any renderer; it re-ranks after the /meta revision changes
"""

__all__ = ["__version__"]
__version__ = "0.3.0"

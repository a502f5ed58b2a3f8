"""mboxclass module entrypoint.

Delegates to the typer application so that ``python -m mboxclass`` behaves
exactly like the installed ``mboxclass`` script.
"""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":  # pragma: no cover - module execution guard
    main()

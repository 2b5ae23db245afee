from __future__ import annotations

import rich.traceback

rich.traceback.install()

"""fluidflow: multi-flow conversational workspace with artifacts and undo.

The package is split into:

- :mod:`fluidflow.core`  - data contracts, stores, undo engine, tool dispatch
  and the conversation controller.
- :mod:`fluidflow.llm`   - the model gateway protocol and the Gemini adapter.
- :mod:`fluidflow.cli`   - the terminal client.
- :mod:`fluidflow.api`   - the HTTP interface.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"

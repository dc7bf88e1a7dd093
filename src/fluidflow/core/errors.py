"""Exception taxonomy for the flow engine.

Every error below is handled at the boundary where it occurs and turned into
either a no-op or a narrated model message; none of them is meant to reach
the top of the process.

- :class:`PersistenceError` - the key-value backend failed or held garbage.
- :class:`GatewayError`     - the model service failed during ``send``.
- :class:`ToolLookupError`  - ``modify_artifact`` named an unknown artifact.
- :class:`LastFlowError`    - attempt to delete the only remaining flow.
- :class:`UnknownToolError` - the model issued a tool name we do not know.
- :class:`FlowNotFoundError` - a flow id that is not in the store.
"""

from __future__ import annotations


class FluidError(Exception):
    """Base class for all fluidflow errors."""


class PersistenceError(FluidError):
    """Reading or writing the persisted store failed."""


class GatewayError(FluidError):
    """The model gateway could not produce a reply."""


class ToolLookupError(FluidError, LookupError):
    """An artifact referenced by id does not exist in the flow."""

    def __init__(self, artifact_id: str, flow_id: str | None = None) -> None:
        self.artifact_id = artifact_id
        self.flow_id = flow_id
        super().__init__(f"artifact {artifact_id!r} not found")


class LastFlowError(FluidError):
    """Deleting the flow would leave the store empty."""

    def __init__(self, flow_id: str) -> None:
        self.flow_id = flow_id
        super().__init__("Cannot delete the last flow.")


class UnknownToolError(FluidError):
    """The gateway returned a tool call with an unrecognized name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unknown tool {name!r}")


class FlowNotFoundError(FluidError, KeyError):
    """A flow id that is not present in the store."""

    def __init__(self, flow_id: str) -> None:
        self.flow_id = flow_id
        super().__init__(flow_id)

    def __str__(self) -> str:
        return f"flow {self.flow_id!r} not found"


__all__ = [
    "FluidError",
    "PersistenceError",
    "GatewayError",
    "ToolLookupError",
    "LastFlowError",
    "UnknownToolError",
    "FlowNotFoundError",
]

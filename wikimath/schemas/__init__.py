from wikimath.schemas.schemas import (
    RenderRequest, RenderResponse,
    VersionResponse,
)

__all__ = [
    "RenderRequest", "RenderResponse",
    "VersionResponse",
]

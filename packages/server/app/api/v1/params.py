"""Path parameter types shared by the v1 routers."""

from typing import Annotated

from fastapi import Path

from taskforge_shared.schemas.common import MAX_ID

ResourceId = Annotated[int, Path(ge=1, le=MAX_ID)]

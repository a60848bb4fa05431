"""Built-in modeler tools."""

from dynmodeler.tools.add_geometry import AddGeometryTool
from dynmodeler.tools.append import AppendTool
from dynmodeler.tools.create_arrow import CreateArrowTool
from dynmodeler.tools.create_cube import CreateCubeTool
from dynmodeler.tools.transform_maker import TransformMakerTool

BUILTIN_TOOLS = (
    TransformMakerTool,
    AppendTool,
    CreateCubeTool,
    CreateArrowTool,
    AddGeometryTool,
)

__all__ = [
    "AddGeometryTool",
    "AppendTool",
    "BUILTIN_TOOLS",
    "CreateArrowTool",
    "CreateCubeTool",
    "TransformMakerTool",
]

import pytest

from dynmodeler.composition import USE_PARENT_TRANSFORMS, compose, sources_from_nodes
from dynmodeler.geom import point, vclose
from dynmodeler.mesh import Mesh, same_geometry
from dynmodeler.scene import (
    AngleNode,
    Events,
    ModelNode,
    OperationNode,
    PlaneNode,
    PointListNode,
    Scene,
    TransformNode,
)
from dynmodeler.tools import (
    AddGeometryTool,
    AppendTool,
    CreateArrowTool,
    CreateCubeTool,
    TransformMakerTool,
)
from dynmodeler.tools.add_geometry import GENERATORS
from dynmodeler.xform import Rotation, Translation

R = TransformMakerTool.Roles


def _quad_cube():
    pts = [[dx, dy, dz] for dz in (0, 1) for dy in (0, 1) for dx in (0, 1)]
    faces = [(0, 2, 3, 1), (4, 5, 7, 6), (0, 1, 5, 4), (2, 6, 7, 3), (0, 4, 6, 2), (1, 3, 7, 5)]
    return Mesh(pts, faces)


def _transform_maker_op(sources):
    op = OperationNode(tool_name=TransformMakerTool.name)
    op.set_references(R.TRANSFORM_SOURCE, sources)
    outputs = {
        R.OUTPUT_POSITION: PointListNode(),
        R.OUTPUT_ANGLE: AngleNode(),
        R.OUTPUT_PLANE: PlaneNode(),
        R.OUTPUT_TRANSFORM: TransformNode(),
    }
    for role, node in outputs.items():
        op.set_reference(role, node)
    return op, outputs


def _z_angle(degrees):
    tip = Rotation(point(0, 0, 1), degrees).transform_point(point(1, 0, 0))
    return AngleNode(points=[point(1, 0, 0), point(0, 0, 0), tip])


class TestTransformMaker:

    def test_all_outputs(self):
        tool = TransformMakerTool()
        op, out = _transform_maker_op([PointListNode(points=[point(10, 0, 0)]), _z_angle(90)])
        assert tool.run(op)

        matrix = out[R.OUTPUT_TRANSFORM].matrix_to_parent
        assert vclose(matrix.transform_point(point(1, 0, 0)), point(10, 1, 0))
        assert vclose(out[R.OUTPUT_POSITION].control_point(0), point(10, 0, 0))

        angle = compose(sources_from_nodes([out[R.OUTPUT_ANGLE]]))
        assert angle.matrix.isclose(Rotation(point(0, 0, 1), 90), 1e-6)

        plane = out[R.OUTPUT_PLANE]
        assert plane.plane_type == PlaneNode.PLANE_TYPE_3POINTS
        assert plane.object_to_node_matrix().isclose(matrix, 1e-6)

    def test_angle_output_keeps_vertex(self):
        tool = TransformMakerTool()
        op, out = _transform_maker_op([_z_angle(30)])
        out[R.OUTPUT_ANGLE].set_control_points([point(6, 5, 5), point(5, 5, 5), point(5, 6, 5)])
        assert tool.run(op)
        assert vclose(out[R.OUTPUT_ANGLE].control_point(1), point(5, 5, 5))

    def test_parent_transforms_parameter(self):
        parent = TransformNode(matrix=Translation(point(0, 0, 7)))
        pts = PointListNode(points=[point(1, 0, 0)])
        pts.set_parent(parent)
        tool = TransformMakerTool()
        op, out = _transform_maker_op([pts])

        assert tool.run(op)
        assert vclose(out[R.OUTPUT_POSITION].control_point(0), point(1, 0, 0))
        op.set_parameter("UseParentTransforms", USE_PARENT_TRANSFORMS)
        assert tool.run(op)
        assert vclose(out[R.OUTPUT_POSITION].control_point(0), point(1, 0, 7))

    def test_rerun_is_idempotent_and_notifies_once(self):
        tool = TransformMakerTool()
        op, out = _transform_maker_op([_z_angle(45), PointListNode(points=[point(1, 2, 3)])])
        fired = []
        out[R.OUTPUT_TRANSFORM].add_observer(Events.MODIFIED, lambda n, e: fired.append(e))
        assert tool.run(op)
        first = out[R.OUTPUT_TRANSFORM].matrix_to_parent.copy()
        assert tool.run(op)
        assert out[R.OUTPUT_TRANSFORM].matrix_to_parent.isclose(first, 0.0)
        assert fired == [Events.MODIFIED, Events.MODIFIED]

    def test_unconnected_outputs(self):
        tool = TransformMakerTool()
        op = OperationNode(tool_name=tool.name)
        source = PointListNode(points=[point(1, 0, 0)])
        op.set_reference(R.TRANSFORM_SOURCE, source)
        assert tool.run(op)
        assert source.control_point(0) == point(1, 0, 0)

    def test_requires_a_source(self):
        tool = TransformMakerTool()
        op, out = _transform_maker_op([])
        assert not tool.run(op)
        assert out[R.OUTPUT_TRANSFORM].matrix_to_parent.isidentity()
        assert out[R.OUTPUT_POSITION].n_control_points == 0

    def test_degenerate_inputs_give_identity(self):
        tool = TransformMakerTool()
        op, out = _transform_maker_op([PointListNode(), None])
        assert tool.run(op)
        assert out[R.OUTPUT_TRANSFORM].matrix_to_parent.isidentity()


class TestAppend:

    def _op(self, inputs, output):
        op = OperationNode(tool_name=AppendTool.name)
        op.set_references(AppendTool.Roles.INPUT_MODEL, inputs)
        op.set_reference(AppendTool.Roles.OUTPUT_MODEL, output)
        return op

    def test_shared_face(self):
        a = ModelNode(mesh=_quad_cube())
        b = ModelNode(mesh=_quad_cube())
        b.set_parent(TransformNode(matrix=Translation(point(1, 0, 0))))
        output = ModelNode()
        assert AppendTool().run(self._op([a, b], output))
        assert output.mesh.n_points == 12
        assert output.mesh.n_cells == 11

    def test_generated_cubes_share_face(self):
        tool = CreateCubeTool()
        a, b = ModelNode(), ModelNode()
        for model in (a, b):
            op = OperationNode(tool_name=CreateCubeTool.name)
            op.set_reference(CreateCubeTool.Roles.OUTPUT_MODEL, model)
            assert tool.run(op)
        b.set_parent(TransformNode(matrix=Translation(point(10, 0, 0))))
        output = ModelNode()
        assert AppendTool().run(self._op([a, b], output))
        assert output.mesh.n_points == 12
        assert output.mesh.n_cells == 11

    def test_rerun_is_stable(self):
        a = ModelNode(mesh=_quad_cube())
        b = ModelNode(mesh=_quad_cube())
        b.set_parent(TransformNode(matrix=Translation(point(1, 0, 0))))
        output = ModelNode()
        op = self._op([a, b], output)
        tool = AppendTool()
        assert tool.run(op)
        first = output.mesh.copy()
        assert tool.run(op)
        assert same_geometry(output.mesh, first)
        assert output.mesh.n_cells == 11

    def test_output_frame(self):
        a = ModelNode(mesh=_quad_cube())
        output = ModelNode()
        output.set_parent(TransformNode(matrix=Translation(point(0, 0, 10))))
        assert AppendTool().run(self._op([a], output))
        lo, hi = output.mesh.bounds()
        assert lo == pytest.approx([0, 0, -10])
        assert hi == pytest.approx([1, 1, -9])

    def test_no_meshes_is_noop(self):
        output = ModelNode()
        fired = []
        output.add_observer(Events.MODIFIED, lambda n, e: fired.append(e))
        assert AppendTool().run(self._op([ModelNode(), None], output))
        assert output.mesh is None
        assert fired == []

    def test_merge_tolerance_parameter(self):
        near = _quad_cube()
        near.points = near.points + [1.0001, 0.0, 0.0]
        op = self._op([ModelNode(mesh=_quad_cube()), ModelNode(mesh=near)], ModelNode())
        output = op.resolve(AppendTool.Roles.OUTPUT_MODEL)
        tool = AppendTool()
        assert tool.run(op)
        assert output.mesh.n_points == 16
        op.set_parameter("MergeTolerance", 1e-3)
        assert tool.run(op)
        assert output.mesh.n_points == 12

    def test_negative_tolerance_fails(self):
        op = self._op([ModelNode(mesh=_quad_cube())], ModelNode())
        op.set_parameter("MergeTolerance", -1.0)
        assert not AppendTool().run(op)


class TestGenerators:

    def test_create_cube(self):
        output = ModelNode()
        op = OperationNode(tool_name=CreateCubeTool.name)
        op.set_reference(CreateCubeTool.Roles.OUTPUT_MODEL, output)
        assert CreateCubeTool().run(op)
        lo, hi = output.mesh.bounds()
        assert hi - lo == pytest.approx([10, 25, 50])
        op.set_parameter("XLength", 2)
        assert CreateCubeTool().run(op)
        lo, hi = output.mesh.bounds()
        assert hi - lo == pytest.approx([2, 25, 50])

    def test_create_arrow_at_crosshair(self):
        scene = Scene()
        scene.set_crosshair((1, 2, 3))
        op = scene.add_node(OperationNode(tool_name=CreateArrowTool.name))
        model = scene.add_node(ModelNode())
        transform = scene.add_node(TransformNode())
        op.set_reference(CreateArrowTool.Roles.OUTPUT_MODEL, model)
        op.set_reference(CreateArrowTool.Roles.OUTPUT_TRANSFORM, transform)

        assert CreateArrowTool().run(op)
        assert model.parent is transform
        assert vclose(transform.matrix_to_parent.translation(), point(1, 2, 3))
        lo, hi = model.mesh.bounds()
        assert hi[2] - lo[2] == pytest.approx(50.0)

    def test_create_arrow_without_transform(self):
        model = ModelNode()
        op = OperationNode(tool_name=CreateArrowTool.name)
        op.set_reference(CreateArrowTool.Roles.OUTPUT_MODEL, model)
        op.set_parameter("Length", 20)
        assert CreateArrowTool().run(op)
        assert model.parent is None
        assert model.mesh.bounds()[1][2] == pytest.approx(20.0)

    def test_bad_arrow_parameters_fail(self):
        model = ModelNode()
        op = OperationNode(tool_name=CreateArrowTool.name)
        op.set_reference(CreateArrowTool.Roles.OUTPUT_MODEL, model)
        op.set_parameter("TipLength", 80)
        assert not CreateArrowTool().run(op)
        assert model.mesh is None

    @pytest.mark.parametrize("source", sorted(GENERATORS))
    def test_add_geometry(self, source):
        output = ModelNode()
        op = OperationNode(tool_name=AddGeometryTool.name)
        op.set_reference(AddGeometryTool.Roles.OUTPUT_MODEL, output)
        op.set_parameter("GeometrySource", source)
        op.set_parameter("Resolution", 8)
        assert AddGeometryTool().run(op)
        assert output.mesh.n_cells > 0

    def test_add_geometry_default_is_cube(self):
        output = ModelNode()
        op = OperationNode(tool_name=AddGeometryTool.name)
        op.set_reference(AddGeometryTool.Roles.OUTPUT_MODEL, output)
        op.set_parameter("GeometrySource", "TorusSource")
        assert AddGeometryTool().run(op)
        lo, hi = output.mesh.bounds()
        assert hi - lo == pytest.approx([10, 10, 10])

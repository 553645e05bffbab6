"""
Unit tests for the block registry.
"""

import pytest
from physics_ide_core.block_registry import (
    BlockRegistry, FieldKind, FieldSpec, ValueSlot, get_default_registry
)
from physics_ide_core.code_generator import Order


EXPECTED_KINDS = [
    # values
    'vector_block', 'colour_block', 'expr_block', 'python_raw_expr_block', 'physics_const_block',
    'get_prop_block', 'get_component_block', 'mag_block', 'norm_block',
    # objects
    'sphere_block', 'sphere_trail_block', 'sphere_emissive_block', 'box_block',
    'box_opacity_block', 'cylinder_block', 'arrow_block', 'helix_block', 'helix_full_block',
    'label_block', 'label_full_block', 'preset_sphere_block', 'preset_box_block',
    'cylinder_expr_block', 'sphere_expr_block',
    # motion
    'set_velocity_block', 'update_position_block', 'apply_force_block', 'set_gravity_block',
    'set_scalar_block', 'set_vector_expr_block', 'set_attr_expr_block', 'add_attr_expr_block',
    'define_constant_block',
    # control
    'rate_block', 'time_step_block', 'forever_loop_block', 'for_range_block', 'if_block',
    'if_else_block', 'break_loop_block',
    # scene and utility
    'scene_setup_block', 'scene_range_block', 'scene_forward_block', 'scene_center_block',
    'scene_caption_block', 'scene_ambient_block', 'local_light_block', 'comment_block',
    'python_raw_block', 'exec_block', 'telemetry_update_block',
    # standard library
    'math_number', 'math_arithmetic', 'logic_compare', 'logic_operation', 'logic_negate',
    'logic_boolean', 'text', 'variables_get', 'variables_set',
]


class TestBlockRegistry:
    """Test cases for BlockRegistry."""

    @pytest.fixture
    def registry(self):
        registry = BlockRegistry()

        @registry.block_kind('double_block', category='test',
                             fields=(FieldSpec('N', FieldKind.NUMBER, 1),),
                             value_slots=(ValueSlot('X', '0'),),
                             produces_value=True)
        def double_block(block, ctx):
            """Twice the input."""
            return f"2 * {ctx.render_value(block, 'X')}", Order.MULTIPLICATIVE

        return registry

    def test_decorator_registers_kind(self, registry):
        kind = registry.get('double_block')

        assert kind is not None
        assert kind.produces_value is True
        assert kind.description == 'Twice the input.'
        assert kind.get_value_slot('X').fallback == '0'
        assert 'double_block' in registry
        assert len(registry) == 1

    def test_duplicate_registration_raises(self, registry):
        with pytest.raises(ValueError):
            @registry.block_kind('double_block')
            def again(block, ctx):
                return ''

    def test_alias_shares_shape_and_generator(self, registry):
        alias = registry.alias('twice_block', 'double_block')

        original = registry.get('double_block')
        assert alias.generator is original.generator
        assert alias.value_slots == original.value_slots

    def test_alias_of_unknown_kind_raises(self, registry):
        with pytest.raises(KeyError):
            registry.alias('x', 'missing')

    def test_create_block_has_defaults_and_empty_slots(self, registry):
        block = registry.create_block('double_block')

        assert block.kind == 'double_block'
        assert block.fields == {'N': 1}
        assert block.value_slots == {'X': None}
        assert block.produces_value is True

    def test_create_block_overrides_fields(self, registry):
        assert registry.create_block('double_block', N=5).fields['N'] == 5

    def test_create_unknown_block_raises(self, registry):
        with pytest.raises(KeyError):
            registry.create_block('missing')

    def test_to_dict_groups_by_category(self, registry):
        data = registry.to_dict()

        assert data['total_kinds'] == 1
        descriptor = data['categories']['test'][0]
        assert descriptor['kind'] == 'double_block'
        assert descriptor['value_slots'] == [{'name': 'X', 'fallback': '0', 'check': None}]
        assert descriptor['fields'][0]['kind'] == 'number'


class TestDefaultRegistry:
    """Test cases for the built-in block kinds."""

    def test_every_kind_is_registered(self):
        registry = get_default_registry()
        missing = [name for name in EXPECTED_KINDS if name not in registry]
        assert missing == []

    def test_every_kind_has_a_generator(self):
        for kind in get_default_registry():
            assert callable(kind.generator), kind.name

    def test_categories(self):
        categories = get_default_registry().categories()

        assert 'sphere_block' in categories['objects']
        assert 'forever_loop_block' in categories['control']
        assert 'telemetry_update_block' in categories['utility']

    def test_loop_and_branch_shapes(self):
        registry = get_default_registry()

        assert registry.get('forever_loop_block').statement_slots == ('BODY',)
        assert registry.get('if_else_block').statement_slots == ('BODY_IF', 'BODY_ELSE')
        assert registry.get('if_block').get_value_slot('COND').fallback == 'True'

    def test_documented_fallbacks(self):
        registry = get_default_registry()

        assert registry.get('sphere_block').get_value_slot('RADIUS').fallback == '1'
        assert registry.get('sphere_trail_block').get_value_slot('TRAIL_COL').fallback == 'color.yellow'
        assert registry.get('box_block').get_value_slot('SIZE').fallback == 'vector(1, 1, 1)'
        assert registry.get('helix_full_block').get_value_slot('COILS').fallback == '10'
        assert registry.get('update_position_block').get_value_slot('DT').fallback == 'dt'
        assert registry.get('scene_forward_block').get_value_slot('VEC').fallback == 'vector(0, 0, -1)'
        assert registry.get('telemetry_update_block').get_value_slot('V1').fallback is None

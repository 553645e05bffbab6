"""
Unit tests for loading and saving Blockly workspace JSON.
"""

import copy
import pytest
from physics_ide_core.code_generator import WorkspaceCompiler
from physics_ide_core.config import CompilerSettings
from physics_ide_core.models import ValidationError, VariableRef
from physics_ide_core.serialization import workspace_from_dict, workspace_to_dict
from physics_ide_core.symbols import VariableTable


MINIMAL_LOOP_JSON = {
    'blocks': {
        'languageVersion': 0,
        'blocks': [{
            'type': 'time_step_block',
            'id': 'ts',
            'x': 20,
            'y': 20,
            'fields': {'DT': 0.01},
            'next': {'block': {
                'type': 'forever_loop_block',
                'id': 'loop',
                'inputs': {'BODY': {'block': {
                    'type': 'rate_block',
                    'id': 'rate',
                    'fields': {'N': 100},
                    'next': {'block': {
                        'type': 'update_position_block',
                        'id': 'step',
                        'fields': {'OBJ': {'id': 'v_ball'}},
                    }},
                }}},
            }},
        }],
    },
    'variables': [{'name': 'ball', 'id': 'v_ball'}],
}

MINIMAL_LOOP_CODE = (
    "dt = 0.01\n"
    "while True:\n"
    "    rate(100)\n"
    "    ball.pos = ball.pos + ball.velocity * dt\n"
)


def compile_json(data, variables=None):
    workspace = workspace_from_dict(data, variables=variables)
    return WorkspaceCompiler(settings=CompilerSettings()).compile(workspace)


def sphere_json(pos_input):
    return {'blocks': [{
        'type': 'sphere_block',
        'fields': {'NAME': 'ball'},
        'inputs': {'POS': pos_input},
    }]}


class TestWorkspaceFromDict:
    """Test cases for workspace_from_dict."""

    def test_minimal_loop(self):
        assert compile_json(MINIMAL_LOOP_JSON) == MINIMAL_LOOP_CODE

    def test_structure_is_restored(self):
        workspace = workspace_from_dict(MINIMAL_LOOP_JSON)

        head = workspace.top_level_chains[0]
        loop = head.next
        body = loop.get_statement_head('BODY')

        assert head.id == 'ts'
        assert loop.kind == 'forever_loop_block'
        assert [block.kind for block in body.iter_chain()] == ['rate_block', 'update_position_block']
        assert body.next.get_field('OBJ') == VariableRef('v_ball', '')
        assert body.next.value_slots == {'DT': None}
        assert workspace.block_count() == 4

    def test_blocks_section_may_be_a_list(self):
        data = {'blocks': MINIMAL_LOOP_JSON['blocks']['blocks'],
                'variables': MINIMAL_LOOP_JSON['variables']}
        assert compile_json(data) == MINIMAL_LOOP_CODE

    def test_empty_workspace(self):
        workspace = workspace_from_dict({})
        assert workspace.is_empty()

    def test_shadow_block_fills_empty_input(self):
        data = sphere_json({'shadow': {'type': 'vector_block', 'fields': {'X': 1}}})
        assert 'ball = sphere(pos=vector(1, 0, 0),' in compile_json(data)

    def test_real_block_is_preferred_over_shadow(self):
        data = sphere_json({
            'block': {'type': 'vector_block', 'fields': {'X': 2}},
            'shadow': {'type': 'vector_block', 'fields': {'X': 1}},
        })
        assert 'pos=vector(2, 0, 0)' in compile_json(data)

    def test_empty_input_entry_is_ignored(self):
        assert 'pos=vector(0, 0, 0)' in compile_json(sphere_json({}))

    def test_unknown_kind_is_loaded_and_commented(self):
        data = {'blocks': {'blocks': [{'type': 'legacy_block', 'fields': {'A': 1}}]}}
        assert compile_json(data) == "# unknown block: legacy_block\n"

    def test_unknown_kind_inputs_are_classified_by_child_shape(self):
        data = {'blocks': {'blocks': [{
            'type': 'legacy_block',
            'inputs': {
                'DO': {'block': {'type': 'rate_block'}},
                'VALUE': {'block': {'type': 'vector_block'}},
                'THEN': {'block': {'type': 'other_legacy_block',
                                   'next': {'block': {'type': 'break_loop_block'}}}},
                'ARG': {'block': {'type': 'other_legacy_block'}},
            },
        }]}}

        block = workspace_from_dict(data).top_level_chains[0]

        assert set(block.statement_slots) == {'DO', 'THEN'}
        assert set(block.value_slots) == {'VALUE', 'ARG'}
        assert block.value_slots['ARG'].produces_value is True

    def test_variables_are_merged_into_existing_table(self):
        table = VariableTable({'v_ball': 'ball', 'v_keep': 'keep'})
        data = {'variables': [
            {'name': 'puck', 'id': 'v_ball'},
            {'name': 'spring', 'id': 'v_new'},
            {'name': 'keep'},
        ]}

        workspace = workspace_from_dict(data, variables=table)

        assert workspace.variables is table
        assert table.get_name('v_ball') == 'puck'
        assert table.get_name('v_new') == 'spring'
        assert len(table) == 3

    def test_renamed_variable_changes_generated_code(self):
        data = copy.deepcopy(MINIMAL_LOOP_JSON)
        data['variables'] = [{'name': 'puck', 'id': 'v_ball'}]

        code = compile_json(data, variables=VariableTable({'v_ball': 'ball'}))

        assert "puck.pos = puck.pos + puck.velocity * dt\n" in code


class TestMalformedJson:
    """Test cases for rejected workspace JSON."""

    @pytest.mark.parametrize('data', [None, [], 'blocks', 3])
    def test_non_object_is_rejected(self, data):
        with pytest.raises(ValidationError):
            workspace_from_dict(data)

    def test_blocks_of_wrong_type(self):
        with pytest.raises(ValidationError):
            workspace_from_dict({'blocks': 'nope'})

    def test_block_without_type(self):
        with pytest.raises(ValidationError, match='type'):
            workspace_from_dict({'blocks': [{'id': 'x'}]})

    def test_block_that_is_not_an_object(self):
        with pytest.raises(ValidationError):
            workspace_from_dict({'blocks': ['rate_block']})

    def test_fields_must_be_an_object(self):
        with pytest.raises(ValidationError, match='fields'):
            workspace_from_dict({'blocks': [{'type': 'rate_block', 'fields': [100]}]})

    def test_inputs_must_be_an_object(self):
        with pytest.raises(ValidationError, match='inputs'):
            workspace_from_dict({'blocks': [{'type': 'forever_loop_block', 'inputs': []}]})

    def test_value_block_with_next(self):
        data = {'blocks': [{'type': 'vector_block',
                            'next': {'block': {'type': 'rate_block'}}}]}
        with pytest.raises(ValidationError, match='next'):
            workspace_from_dict(data)

    def test_nested_error_reports_path(self):
        data = sphere_json({'block': {'fields': {}}})
        with pytest.raises(ValidationError, match=r'blocks\[0\]\.inputs\.POS'):
            workspace_from_dict(data)

    def test_malformed_variable_entry(self):
        with pytest.raises(ValidationError):
            workspace_from_dict({'variables': [{'id': 'v1'}]})
        with pytest.raises(ValidationError):
            workspace_from_dict({'variables': {'v1': 'ball'}})


class TestWorkspaceToDict:
    """Test cases for saving workspaces."""

    def test_round_trip_compiles_identically(self):
        workspace = workspace_from_dict(MINIMAL_LOOP_JSON)

        saved = workspace_to_dict(workspace)
        reloaded = workspace_from_dict(saved)

        compiler = WorkspaceCompiler(settings=CompilerSettings())
        assert compiler.compile(reloaded) == compiler.compile(workspace) == MINIMAL_LOOP_CODE
        assert saved['variables'] == [{'name': 'ball', 'id': 'v_ball'}]

    def test_saved_form_keeps_ids(self):
        saved = workspace_to_dict(workspace_from_dict(MINIMAL_LOOP_JSON))

        head = saved['blocks']['blocks'][0]
        assert head['id'] == 'ts'
        assert head['next']['block']['inputs']['BODY']['block']['id'] == 'rate'

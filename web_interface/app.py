"""
Flask web interface for the Physics IDE block compiler.

The block editor posts its workspace JSON here and receives the generated VPython
program. This process also owns the session-scoped variable table and custom
constant registry that the editor mutates through the rename and "define constant"
dialogs.
"""

from flask import Flask, request, jsonify
from flask_cors import CORS
from flask_socketio import SocketIO, emit
import logging
import uuid
from typing import Dict, Any

# Import our compiler components
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from physics_ide_core import __version__
from physics_ide_core.block_registry import get_default_registry
from physics_ide_core.code_generator import WorkspaceCompiler, get_code_metrics, with_program_header
from physics_ide_core.models import ValidationError
from physics_ide_core.serialization import workspace_from_dict
from physics_ide_core.symbols import PHYSICS_CONSTANTS, ConstantRegistry, VariableTable
from physics_ide_core.templates import WORKED_EXAMPLES, list_templates, load_template

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['SECRET_KEY'] = os.environ.get('PHYSICS_IDE_SECRET_KEY', 'physics-ide-secret-key')
CORS(app)
socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading')

# Global instances. Both tables live for the process and are never persisted.
block_registry = get_default_registry()
compiler = WorkspaceCompiler(registry=block_registry)
variable_table = VariableTable()
constant_registry = ConstantRegistry()

sessions: Dict[str, Dict[str, Any]] = {}


def _compile_payload(data: Any) -> str:
    """Load workspace JSON against the session tables and compile it."""
    workspace = workspace_from_dict(
        data,
        variables=variable_table,
        constants=constant_registry,
        registry=block_registry,
    )
    return compiler.compile(workspace)


def _bad_request(error: Exception):
    message = error.args[0] if isinstance(error, KeyError) and error.args else str(error)
    return jsonify({
        'success': False,
        'error': message
    }), 400


@app.route('/')
def index():
    """Describe the service."""
    return jsonify({
        'success': True,
        'data': {
            'name': 'Physics IDE block compiler',
            'version': __version__,
            'target': compiler.settings.program_header,
        }
    })


@app.route('/favicon.ico')
def favicon():
    """Suppress favicon 404 errors."""
    return '', 204


# Block registry API endpoints
@app.route('/api/blocks', methods=['GET'])
def get_blocks():
    """Get every block kind grouped by toolbox category."""
    try:
        return jsonify({
            'success': True,
            'data': block_registry.to_dict()
        })
    except Exception as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


# Compilation API endpoints
@app.route('/api/compile', methods=['POST'])
def compile_code():
    """Compile Blockly workspace JSON into VPython source."""
    try:
        data = request.get_json(silent=True)
        code = _compile_payload(data)
        return jsonify({
            'success': True,
            'data': {
                'code': code,
                'metrics': get_code_metrics(code)
            }
        })
    except ValidationError as e:
        return _bad_request(e)
    except Exception as e:
        logger.error(f"Compile request failed: {e}", exc_info=True)
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@app.route('/api/export/code', methods=['POST'])
def export_code():
    """Compile a workspace into a runnable program with the dialect header."""
    try:
        data = request.get_json(silent=True)
        code = with_program_header(_compile_payload(data), compiler.settings.program_header)
        filename = 'simulation.py'
        if isinstance(data, dict) and data.get('filename'):
            filename = str(data['filename'])
        return jsonify({
            'success': True,
            'data': {
                'code': code,
                'filename': filename
            }
        })
    except ValidationError as e:
        return _bad_request(e)
    except Exception as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


# Constant registry API endpoints
@app.route('/api/constants', methods=['GET'])
def get_constants():
    """List the built-in physics constants and the session's custom constants."""
    try:
        builtin = [
            {
                'key': key,
                'symbol': constant.symbol,
                'value': constant.literal,
                'description': constant.description,
                'unit': constant.unit
            }
            for key, constant in PHYSICS_CONSTANTS.items()
        ]
        return jsonify({
            'success': True,
            'data': {
                'builtin': builtin,
                'custom': constant_registry.to_list()
            }
        })
    except Exception as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@app.route('/api/constants', methods=['POST'])
def define_constant():
    """Define a custom constant."""
    try:
        data = request.get_json(silent=True) or {}
        constant = constant_registry.define(data.get('name', ''), data.get('value', ''))
        return jsonify({
            'success': True,
            'data': constant.to_dict()
        })
    except ValueError as e:
        return _bad_request(e)
    except Exception as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


# Variable table API endpoints
@app.route('/api/variables', methods=['GET'])
def get_variables():
    """List the session's variables."""
    try:
        return jsonify({
            'success': True,
            'data': [{'id': var_id, 'name': name} for var_id, name in variable_table.items()]
        })
    except Exception as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@app.route('/api/variables', methods=['POST'])
def create_variable():
    """Create a variable."""
    try:
        data = request.get_json(silent=True) or {}
        name = str(data.get('name', '')).strip()
        if not name:
            return jsonify({
                'success': False,
                'error': 'Variable name is required'
            }), 400

        var_id = variable_table.create(name, var_id=data.get('id'))
        return jsonify({
            'success': True,
            'data': {'id': var_id, 'name': name}
        })
    except Exception as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@app.route('/api/variables/<var_id>', methods=['PUT'])
def rename_variable(var_id):
    """Rename a variable. Blocks referencing it pick up the new name on the next compile."""
    try:
        data = request.get_json(silent=True) or {}
        name = str(data.get('name', '')).strip()
        if not name:
            return jsonify({
                'success': False,
                'error': 'Variable name is required'
            }), 400

        variable_table.rename(var_id, name)
        return jsonify({
            'success': True,
            'data': {'id': var_id, 'name': name}
        })
    except KeyError as e:
        return _bad_request(e)
    except Exception as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


# Worked example API endpoints
@app.route('/api/templates', methods=['GET'])
def get_templates():
    """List the built-in worked examples."""
    try:
        return jsonify({
            'success': True,
            'data': list_templates()
        })
    except Exception as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


@app.route('/api/templates/<template_id>', methods=['GET'])
def get_template(template_id):
    """Get a worked example's workspace JSON and its compiled program."""
    try:
        example = WORKED_EXAMPLES.get(template_id)
        if example is None:
            return jsonify({
                'success': False,
                'error': f'Unknown template: {template_id}'
            }), 404

        workspace = load_template(template_id, constants=constant_registry, registry=block_registry)
        return jsonify({
            'success': True,
            'data': {
                'template': example.to_dict(),
                'workspace': example.to_workspace_json(),
                'code': compiler.compile(workspace)
            }
        })
    except Exception as e:
        return jsonify({
            'success': False,
            'error': str(e)
        }), 500


# WebSocket events
@socketio.on('connect')
def handle_connect():
    """Handle client connection."""
    session_id = str(uuid.uuid4())
    # Flask-SocketIO adds 'sid' attribute to Flask's request object during Socket.IO events
    sid = request.sid  # type: ignore[attr-defined]
    sessions[sid] = {'session_id': session_id}
    emit('connected', {'session_id': session_id})
    logger.info(f"Client connected: {sid}")


@socketio.on('disconnect')
def handle_disconnect():
    """Handle client disconnection."""
    sid = request.sid  # type: ignore[attr-defined]
    sessions.pop(sid, None)
    logger.info(f"Client disconnected: {sid}")


@socketio.on('workspace_changed')
def handle_workspace_changed(data):
    """Recompile after every graph mutation the editor reports."""
    try:
        emit('code_updated', {'code': _compile_payload(data)})
    except ValidationError as e:
        emit('error', {'message': str(e)})


if __name__ == '__main__':
    logging.basicConfig(
        level=os.environ.get('PHYSICS_IDE_LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    host = os.environ.get('PHYSICS_IDE_HOST', '0.0.0.0')
    port = int(os.environ.get('PHYSICS_IDE_PORT', '5002'))

    logger.info(f"Starting Physics IDE compiler service on http://{host}:{port}")

    socketio.run(
        app,
        debug=False,
        host=host,
        port=port,
        allow_unsafe_werkzeug=True,
    )

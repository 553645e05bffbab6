"""
Built-in worked examples, written as block workspaces.

Each example is a list of statement descriptors turned into Blockly workspace JSON
by ``build_workspace_json`` and loaded with ``workspace_from_dict``, so the examples
go through the same path as any workspace the editor sends.

Descriptor keys:

    type      block kind
    fields    plain field values
    values    value-slot children, built with vec/num/col/expr/var/op
    body      statement list for BODY (BODY_IF on if_else_block)
    else_body statement list for BODY_ELSE
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .block_registry import BlockRegistry
from .models import Workspace
from .serialization import workspace_from_dict
from .symbols import ConstantRegistry, VariableTable


# =============================================================================
# VALUE BUILDERS
# =============================================================================

def vec(x, y, z) -> Dict[str, Any]:
    return {'type': 'vector_block', 'fields': {'X': x, 'Y': y, 'Z': z}}


def num(n) -> Dict[str, Any]:
    return {'type': 'math_number', 'fields': {'NUM': n}}


def col(hex_color: str) -> Dict[str, Any]:
    return {'type': 'colour_block', 'fields': {'COL': hex_color}}


def expr(text: str) -> Dict[str, Any]:
    return {'type': 'expr_block', 'fields': {'EXPR': text}}


def var(name: str) -> Dict[str, Any]:
    return {'type': 'variables_get', 'fields': {'VAR': name}}


def op(operator: str, left: Dict[str, Any], right: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'type': 'math_arithmetic',
        'fields': {'OP': operator},
        'inputs': {'A': {'block': left}, 'B': {'block': right}},
    }


def add(a, b):
    return op('ADD', a, b)


def sub(a, b):
    return op('MINUS', a, b)


def mul(a, b):
    return op('MULTIPLY', a, b)


def div(a, b):
    return op('DIVIDE', a, b)


def set_scalar(name: str, value: Dict[str, Any]) -> Dict[str, Any]:
    return {'type': 'set_scalar_block', 'fields': {'NAME': name}, 'values': {'VALUE': value}}


def set_attr(obj: str, attr: str, value: Dict[str, Any]) -> Dict[str, Any]:
    return {'type': 'set_attr_expr_block', 'fields': {'OBJ': obj, 'ATTR': attr},
            'values': {'VALUE': value}}


def add_attr(obj: str, attr: str, value: Dict[str, Any]) -> Dict[str, Any]:
    return {'type': 'add_attr_expr_block', 'fields': {'OBJ': obj, 'ATTR': attr},
            'values': {'VALUE': value}}


def comment(text: str) -> Dict[str, Any]:
    return {'type': 'comment_block', 'fields': {'TEXT': text}}


def telemetry(label: str, *rows) -> Dict[str, Any]:
    """Telemetry update from ``(metric, value_expr, decimals, unit)`` rows."""
    fields = {'LABEL': label}
    for i, (metric, value, decimals, unit) in enumerate(rows, start=1):
        fields.update({f'M{i}': metric, f'V{i}': value, f'D{i}': decimals, f'U{i}': unit})
    return {'type': 'telemetry_update_block', 'fields': fields}


# =============================================================================
# WORKSPACE JSON
# =============================================================================

def _build_block(descriptor: Dict[str, Any]) -> Dict[str, Any]:
    block: Dict[str, Any] = {'type': descriptor['type']}
    if descriptor.get('fields'):
        block['fields'] = dict(descriptor['fields'])

    inputs = {name: {'block': child} for name, child in descriptor.get('values', {}).items()}
    if descriptor.get('body'):
        slot = 'BODY_IF' if descriptor['type'] == 'if_else_block' else 'BODY'
        inputs[slot] = {'block': _build_chain(descriptor['body'])}
    if descriptor.get('else_body'):
        inputs['BODY_ELSE'] = {'block': _build_chain(descriptor['else_body'])}
    if inputs:
        block['inputs'] = inputs
    return block


def _build_chain(descriptors: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    head = None
    for descriptor in reversed(descriptors):
        block = _build_block(descriptor)
        if head is not None:
            block['next'] = {'block': head}
        head = block
    return head


def build_workspace_json(descriptors: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Blockly workspace JSON holding ``descriptors`` as one top-level chain."""
    head = _build_chain(descriptors)
    return {
        'blocks': {'languageVersion': 0, 'blocks': [head] if head else []},
        'variables': [],
    }


# =============================================================================
# PROJECTILE
# =============================================================================

PROJECTILE_BLOCKS = [
    {'type': 'scene_setup_block', 'fields': {'TITLE': 'Projectile Motion', 'BG': '#0d1629'}},
    {'type': 'scene_range_block', 'fields': {'R': '18'}},
    set_scalar('c_light_a', col('#e6e6d9')),
    {'type': 'local_light_block', 'values': {'POS': vec(-8, 18, 10), 'COL': var('c_light_a')}},
    {'type': 'scene_forward_block', 'values': {'VEC': vec(-0.35, -0.2, -1)}},
    {'type': 'scene_center_block', 'values': {'VEC': vec(11, 3.5, 0)}},
    {'type': 'scene_caption_block', 'fields': {'TEXT': 'Projectile motion with drag and telemetry\n'}},
    {'type': 'scene_ambient_block', 'fields': {'GRAY': '0.35'}},

    set_scalar('c_ground', col('#337346')),
    set_scalar('c_track', col('#6b6b7a')),
    set_scalar('c_marker', col('#ffcc40')),
    set_scalar('c_axis_x', col('#ff3333')),
    set_scalar('c_axis_y', col('#33dd66')),
    set_scalar('c_ball', col('#f25940')),
    set_scalar('c_trail', col('#ffe040')),
    set_scalar('c_velocity', col('#59e6ff')),
    set_scalar('c_tick', col('#f2f2f2')),
    set_scalar('c_light_b', col('#737f99')),

    {'type': 'local_light_block', 'values': {'POS': vec(26, 12, -12), 'COL': var('c_light_b')}},
    {'type': 'box_block', 'fields': {'NAME': 'ground'},
     'values': {'POS': vec(11, -0.55, 0), 'SIZE': vec(34, 1.1, 10), 'COL': var('c_ground')}},
    {'type': 'box_block', 'fields': {'NAME': 'track'},
     'values': {'POS': vec(1.6, 0.2, 0), 'SIZE': vec(3.2, 0.12, 0.9), 'COL': var('c_track')}},
    {'type': 'cylinder_block', 'fields': {'NAME': 'origin_marker'},
     'values': {'POS': vec(0, -0.5, 0), 'AXIS': vec(0, 0.45, 0),
                'RADIUS': num(0.06), 'COL': var('c_marker')}},

    {'type': 'for_range_block', 'fields': {'VAR': 'i', 'START': '0', 'STOP': '31', 'STEP': '5'},
     'body': [
         {'type': 'cylinder_block', 'fields': {'NAME': ''},
          'values': {'POS': expr('vector(i, -0.02, -0.18)'), 'AXIS': vec(0, 0.04, 0),
                     'RADIUS': num(0.018), 'COL': var('c_tick')}},
     ]},

    {'type': 'arrow_block', 'fields': {'NAME': 'x_axis_hint'},
     'values': {'POS': vec(0, 0, 0), 'AXIS': vec(2.4, 0, 0), 'COL': var('c_axis_x')}},
    {'type': 'arrow_block', 'fields': {'NAME': 'y_axis_hint'},
     'values': {'POS': vec(0, 0, 0), 'AXIS': vec(0, 2.2, 0), 'COL': var('c_axis_y')}},

    {'type': 'sphere_trail_block', 'fields': {'NAME': 'ball'},
     'values': {'POS': vec(0, 0.35, 0), 'RADIUS': num(0.28), 'COL': var('c_ball'),
                'TRAIL_R': num(0.035), 'TRAIL_COL': var('c_trail'), 'RETAIN': num(260)}},
    {'type': 'arrow_block', 'fields': {'NAME': 'v_arrow'},
     'values': {'POS': vec(0, 0.35, 0), 'AXIS': vec(0, 0, 0), 'COL': var('c_velocity')}},

    set_scalar('g', vec(0, -9.81, 0)),
    set_scalar('rho', num(1.225)),
    set_scalar('Cd', num(0.47)),
    comment('A = cross-sectional area of the ball'),
    set_scalar('A', expr('pi * ball.radius**2')),
    set_scalar('m', num(0.34)),
    comment('drag_k = drag coefficient factor'),
    set_scalar('drag_k', mul(mul(mul(num(0.5), var('rho')), var('Cd')), var('A'))),
    set_scalar('v0', num(17.5)),
    comment('Convert 52 degrees to radians'),
    set_scalar('angle', expr('radians(52)')),

    comment('Set initial velocity from speed and angle'),
    set_attr('ball', 'velocity', expr('vector(v0 * cos(angle), v0 * sin(angle), 0)')),

    {'type': 'time_step_block', 'fields': {'DT': '0.004'}},
    set_scalar('t', num(0)),
    set_scalar('max_height', num(0.0)),

    {'type': 'label_full_block', 'fields': {'NAME': 'telemetry', 'TEXT': ''},
     'values': {'POS': vec(8.5, 9.2, 0), 'HEIGHT': num(12)}},

    {'type': 'forever_loop_block', 'body': [
        {'type': 'rate_block', 'fields': {'N': '240'}},

        comment('Calculate speed (magnitude of velocity)'),
        set_scalar('speed', expr('mag(ball.velocity)')),

        comment('Calculate drag force (opposes motion)'),
        {'type': 'if_else_block', 'fields': {'COND': 'speed > 0'},
         'body': [
             set_scalar('drag', mul(mul(num(-1), mul(var('drag_k'), var('speed'))),
                                    expr('ball.velocity'))),
         ],
         'else_body': [
             set_scalar('drag', vec(0, 0, 0)),
         ]},

        comment('Acceleration = gravity + drag / mass'),
        set_scalar('acceleration', add(var('g'), div(var('drag'), var('m')))),

        add_attr('ball', 'velocity', mul(var('acceleration'), var('dt'))),
        {'type': 'update_position_block', 'fields': {'OBJ': 'ball'}, 'values': {'DT': var('dt')}},

        set_attr('v_arrow', 'pos', expr('ball.pos')),
        set_attr('v_arrow', 'axis', mul(expr('ball.velocity'), num(0.16))),

        comment('Ground collision: bounce the ball'),
        {'type': 'if_block', 'fields': {'COND': 'ball.pos.y < ball.radius'}, 'body': [
            set_attr('ball', 'pos.y', expr('ball.radius')),
            {'type': 'if_block', 'fields': {'COND': 'ball.velocity.y < 0'}, 'body': [
                set_attr('ball', 'velocity.y', mul(num(-0.55), expr('ball.velocity.y'))),
            ]},
            set_attr('ball', 'velocity.x', mul(expr('ball.velocity.x'), num(0.88))),
        ]},

        comment('Stop when ball is nearly at rest on ground'),
        {'type': 'if_block', 'fields': {'COND': 'ball.pos.y <= ball.radius + 0.01'}, 'body': [
            {'type': 'if_block', 'fields': {'COND': 'mag(ball.velocity) < 0.06'}, 'body': [
                set_attr('ball', 'velocity', expr('vector(0, 0, 0)')),
                {'type': 'break_loop_block'},
            ]},
        ]},

        set_scalar('h_above', sub(expr('ball.pos.y'), expr('ball.radius'))),
        {'type': 'if_block', 'fields': {'COND': 'h_above < 0'}, 'body': [
            set_scalar('h_above', num(0)),
        ]},
        comment('Update max height if current is higher'),
        {'type': 'if_block', 'fields': {'COND': 'h_above > max_height'}, 'body': [
            set_scalar('max_height', var('h_above')),
        ]},

        telemetry('telemetry',
                  ('t', 't', 2, 's'),
                  ('speed', 'mag(ball.velocity)', 2, 'm/s'),
                  ('height', 'h_above', 2, 'm'),
                  ('range', 'ball.pos.x', 2, 'm'),
                  ('peak', 'max_height', 2, 'm')),

        set_scalar('t', add(var('t'), var('dt'))),
    ]},
]


# =============================================================================
# SUN, EARTH AND MOON
# =============================================================================

def _orbit_accelerations() -> List[Dict[str, Any]]:
    """Gravitational accelerations of Earth and Moon from the current positions."""
    return [
        set_scalar('r_es', sub(expr('earth.pos'), expr('sun.pos'))),
        set_scalar('d_es', expr('max(mag(r_es), 1.2)')),
        set_scalar('a_earth', mul(div(mul(num(-1), mul(var('G'), var('M_sun'))), expr('d_es**2')),
                                  expr('norm(r_es)'))),
        set_scalar('r_ms', sub(expr('moon.pos'), expr('sun.pos'))),
        set_scalar('d_ms', expr('max(mag(r_ms), 1.2)')),
        set_scalar('r_me', sub(expr('moon.pos'), expr('earth.pos'))),
        set_scalar('d_me', expr('max(mag(r_me), 0.22)')),
        set_scalar('a_moon', sub(
            mul(div(mul(num(-1), mul(var('G'), var('M_sun'))), expr('d_ms**2')), expr('norm(r_ms)')),
            mul(div(mul(var('G'), var('M_earth')), expr('d_me**2')), expr('norm(r_me)')),
        )),
    ]


def _half_kick() -> List[Dict[str, Any]]:
    return [
        add_attr('earth', 'velocity', div(mul(var('a_earth'), var('dt')), num(2))),
        add_attr('moon', 'velocity', div(mul(var('a_moon'), var('dt')), num(2))),
    ]


ORBIT_BLOCKS = [
    {'type': 'scene_setup_block', 'fields': {'TITLE': 'Sun, Earth & Moon', 'BG': '#050917'}},
    {'type': 'scene_range_block', 'fields': {'R': '14'}},
    {'type': 'local_light_block', 'values': {'POS': vec(0, 0, 0), 'COL': col('#fff7d9')}},
    {'type': 'scene_forward_block', 'values': {'VEC': vec(-0.2, -0.3, -1)}},
    {'type': 'scene_caption_block',
     'fields': {'TEXT': 'Three-body gravity: Moon orbits Earth, Earth orbits Sun\n'}},
    {'type': 'scene_ambient_block', 'fields': {'GRAY': '0.22'}},

    set_scalar('c_sun', col('#ffde59')),
    set_scalar('c_corona', col('#ffb340')),
    set_scalar('c_earth', col('#42b8ff')),
    set_scalar('c_earth_trail', col('#73bfff')),
    set_scalar('c_moon', col('#e0e0f0')),
    set_scalar('c_moon_trail', col('#cccce6')),
    set_scalar('c_earth_arrow', col('#ff734d')),

    comment('Create random background stars'),
    {'type': 'for_range_block', 'fields': {'VAR': '_', 'START': '0', 'STOP': '120', 'STEP': '1'},
     'body': [
         comment('Random direction for star placement'),
         set_scalar('rx', sub(mul(num(2), expr('random()')), num(1))),
         set_scalar('ry', sub(mul(num(2), expr('random()')), num(1))),
         set_scalar('rz', sub(mul(num(2), expr('random()')), num(1))),
         set_scalar('p', expr('vector(rx, ry, rz)')),
         {'type': 'if_block', 'fields': {'COND': 'mag(p) == 0'}, 'body': [
             set_scalar('p', vec(1, 0, 0)),
         ]},
         set_scalar('p', mul(num(34), expr('norm(p)'))),
         {'type': 'sphere_emissive_block', 'fields': {'NAME': ''},
          'values': {'POS': expr('vector(p.x, p.y, p.z)'),
                     'RADIUS': add(num(0.05), mul(num(0.05), expr('random()'))),
                     'COL': expr('vector(0.7 + 0.3*random(), 0.7 + 0.3*random(), 1)'),
                     'OPACITY': num(0.9)}},
     ]},

    comment('Create Sun, Earth, and Moon'),
    {'type': 'sphere_emissive_block', 'fields': {'NAME': 'sun'},
     'values': {'POS': vec(0, 0, 0), 'RADIUS': num(1.05), 'COL': var('c_sun'), 'OPACITY': num(1)}},
    {'type': 'sphere_emissive_block', 'fields': {'NAME': 'corona'},
     'values': {'POS': vec(0, 0, 0), 'RADIUS': num(1.45), 'COL': var('c_corona'),
                'OPACITY': num(0.15)}},
    {'type': 'sphere_trail_block', 'fields': {'NAME': 'earth'},
     'values': {'POS': vec(8.2, 0, 0), 'RADIUS': num(0.42), 'COL': var('c_earth'),
                'TRAIL_R': num(0.04), 'TRAIL_COL': var('c_earth_trail'), 'RETAIN': num(3200)}},
    {'type': 'sphere_trail_block', 'fields': {'NAME': 'moon'},
     'values': {'POS': vec(8.2, 0.9, 0), 'RADIUS': num(0.13), 'COL': var('c_moon'),
                'TRAIL_R': num(0.02), 'TRAIL_COL': var('c_moon_trail'), 'RETAIN': num(1200)}},

    comment('Gravitational constants (scaled for simulation)'),
    set_scalar('G', num(10)),
    set_scalar('M_sun', num(10.33)),
    set_scalar('M_earth', num(1.0)),

    comment('Set orbital velocities'),
    {'type': 'set_velocity_block', 'fields': {'OBJ': 'earth'}, 'values': {'VEL': vec(0, 3.55, 0)}},
    set_attr('moon', 'velocity', add(expr('earth.velocity'), vec(-3.33, 0, 0))),

    {'type': 'time_step_block', 'fields': {'DT': '0.0008'}},
    set_scalar('t', num(0)),

    comment('Compute initial accelerations'),
    *_orbit_accelerations(),

    {'type': 'arrow_block', 'fields': {'NAME': 'earth_arrow'},
     'values': {'POS': vec(8.2, 0, 0), 'AXIS': vec(0, 0, 0), 'COL': var('c_earth_arrow')}},
    {'type': 'label_full_block', 'fields': {'NAME': 'telemetry', 'TEXT': ''},
     'values': {'POS': vec(-12, 11, 0), 'HEIGHT': num(12)}},

    {'type': 'forever_loop_block', 'body': [
        {'type': 'rate_block', 'fields': {'N': '900'}},

        comment('Velocity-Verlet: half-step velocity'),
        *_half_kick(),

        comment('Full-step position update'),
        {'type': 'update_position_block', 'fields': {'OBJ': 'earth'}, 'values': {'DT': var('dt')}},
        {'type': 'update_position_block', 'fields': {'OBJ': 'moon'}, 'values': {'DT': var('dt')}},

        comment('Recompute gravitational accelerations'),
        *_orbit_accelerations(),

        comment('Complete velocity update'),
        *_half_kick(),

        set_attr('corona', 'pos', expr('sun.pos')),
        set_attr('earth_arrow', 'pos', expr('earth.pos')),
        set_attr('earth_arrow', 'axis', mul(num(1.2), var('a_earth'))),

        telemetry('telemetry',
                  ('t', 't', 2, 's'),
                  ('Earth speed', 'mag(earth.velocity)', 3, ''),
                  ('Moon speed', 'mag(moon.velocity)', 3, ''),
                  ('Earth orbit r', 'mag(earth.pos)', 3, ''),
                  ('', '', 2, '')),

        set_scalar('t', add(var('t'), var('dt'))),
    ]},
]


# =============================================================================
# SPRING-MASS
# =============================================================================

SPRING_BLOCKS = [
    {'type': 'scene_setup_block', 'fields': {'TITLE': 'Spring-Mass Oscillator', 'BG': '#0f1224'}},
    {'type': 'scene_range_block', 'fields': {'R': '8.5'}},
    set_scalar('c_light_left', col('#e6e6ff')),
    set_scalar('c_light_right', col('#667388')),
    {'type': 'local_light_block', 'values': {'POS': vec(-2, 10, 8), 'COL': var('c_light_left')}},
    {'type': 'local_light_block', 'values': {'POS': vec(8, 5, -10), 'COL': var('c_light_right')}},
    {'type': 'scene_center_block', 'values': {'VEC': vec(-0.8, 0, 0)}},
    {'type': 'scene_forward_block', 'values': {'VEC': vec(-0.25, -0.12, -1)}},
    {'type': 'scene_caption_block', 'fields': {'TEXT': 'Damped oscillator with energy telemetry\n'}},
    {'type': 'scene_ambient_block', 'fields': {'GRAY': '0.38'}},

    set_scalar('c_floor', col('#3d4454')),
    set_scalar('c_rail', col('#737380')),
    set_scalar('c_wall', col('#616885')),
    set_scalar('c_spring', col('#c7ccdb')),
    set_scalar('c_mass', col('#39dcf2')),
    set_scalar('c_shadow', col('#121217')),
    set_scalar('c_phase_arrow', col('#ff8c33')),

    {'type': 'box_block', 'fields': {'NAME': 'floor'},
     'values': {'POS': vec(-0.5, -1.25, 0), 'SIZE': vec(17, 0.3, 5), 'COL': var('c_floor')}},
    {'type': 'box_block', 'fields': {'NAME': 'rail'},
     'values': {'POS': vec(-0.5, -0.65, 0), 'SIZE': vec(16, 0.14, 1.5), 'COL': var('c_rail')}},
    {'type': 'box_block', 'fields': {'NAME': 'wall'},
     'values': {'POS': vec(-6, 0, 0), 'SIZE': vec(0.52, 4.2, 4), 'COL': var('c_wall')}},

    comment('Spring: k=14 N/m, m=1.2 kg, damping b=0.22'),
    set_scalar('anchor', vec(-5.74, 0, 0)),
    {'type': 'helix_full_block', 'fields': {'NAME': 'spring'},
     'values': {'POS': var('anchor'), 'AXIS': vec(4.0, 0, 0), 'RADIUS': num(0.36),
                'COILS': num(16), 'THICK': num(0.055), 'COL': var('c_spring')}},
    {'type': 'box_block', 'fields': {'NAME': 'mass'},
     'values': {'POS': vec(-1.75, 0, 0), 'SIZE': vec(1.06, 1.0, 1.0), 'COL': var('c_mass')}},
    {'type': 'box_opacity_block', 'fields': {'NAME': 'shadow'},
     'values': {'POS': expr('vector(mass.pos.x, -1.08, 0)'), 'SIZE': vec(1.0, 0.01, 1.0),
                'COL': var('c_shadow'), 'OPACITY': num(0.45)}},

    comment('Physics parameters'),
    set_scalar('k', num(14.0)),
    set_scalar('m', num(1.2)),
    set_scalar('b', num(0.22)),
    set_scalar('L0', num(4.0)),
    set_scalar('x0', num(1.8)),
    set_scalar('v', num(0.0)),
    {'type': 'time_step_block', 'fields': {'DT': '0.004'}},
    set_scalar('t', num(0.0)),

    comment('Start mass at stretched position'),
    set_attr('mass', 'pos.x', add(add(add(expr('wall.pos.x'), num(0.25)), var('L0')), var('x0'))),

    {'type': 'label_full_block', 'fields': {'NAME': 'telemetry', 'TEXT': ''},
     'values': {'POS': vec(0.2, 2.9, 0), 'HEIGHT': num(12)}},
    {'type': 'arrow_block', 'fields': {'NAME': 'phase_arrow'},
     'values': {'POS': vec(4.8, -0.2, 0), 'AXIS': vec(0, 0, 0), 'COL': var('c_phase_arrow')}},

    {'type': 'forever_loop_block', 'body': [
        {'type': 'rate_block', 'fields': {'N': '260'}},

        comment("Hooke's law: F = -k * stretch"),
        set_scalar('stretch', sub(sub(sub(expr('mass.pos.x'), expr('wall.pos.x')), num(0.25)),
                                  var('L0'))),
        set_scalar('Fspring', mul(num(-1), mul(var('k'), var('stretch')))),
        set_scalar('Fdamp', mul(num(-1), mul(var('b'), var('v')))),
        set_scalar('a', div(add(var('Fspring'), var('Fdamp')), var('m'))),

        comment('Update velocity and position'),
        set_scalar('v', add(var('v'), mul(var('a'), var('dt')))),
        set_attr('mass', 'pos.x', add(expr('mass.pos.x'), mul(var('v'), var('dt')))),

        set_attr('spring', 'axis', expr('vector(mass.pos.x - spring.pos.x, 0, 0)')),
        comment('Color the spring based on tension'),
        set_scalar('stress', expr('min(1, abs(stretch) / 2.2)')),
        set_attr('spring', 'color',
                 expr('vector(0.55 + 0.45*stress, 0.82 - 0.45*stress, 0.92 - 0.5*stress)')),

        set_attr('shadow', 'pos.x', expr('mass.pos.x')),
        set_attr('phase_arrow', 'axis', expr('vector(0.35 * stretch, 0.28 * v, 0)')),

        comment('Calculate kinetic and potential energy'),
        set_scalar('KE', mul(mul(mul(num(0.5), var('m')), var('v')), var('v'))),
        set_scalar('PE', mul(mul(mul(num(0.5), var('k')), var('stretch')), var('stretch'))),

        telemetry('telemetry',
                  ('t', 't', 2, 's'),
                  ('stretch', 'stretch', 3, 'm'),
                  ('velocity', 'v', 3, 'm/s'),
                  ('KE', 'KE', 3, 'J'),
                  ('PE', 'PE', 3, 'J')),

        set_scalar('t', add(var('t'), var('dt'))),
    ]},
]


# =============================================================================
# CATALOGUE
# =============================================================================

@dataclass(frozen=True)
class WorkedExample:
    """Catalogue entry for a built-in example."""
    id: str
    title: str
    subtitle: str
    description: str
    blocks: tuple

    def to_dict(self) -> Dict[str, str]:
        return {
            'id': self.id,
            'title': self.title,
            'subtitle': self.subtitle,
            'description': self.description,
        }

    def to_workspace_json(self) -> Dict[str, Any]:
        return build_workspace_json(list(self.blocks))


WORKED_EXAMPLES: Dict[str, WorkedExample] = {
    example.id: example for example in (
        WorkedExample(
            id='blocks_projectile',
            title='Projectile (Blocks Template)',
            subtitle='Detailed ballistic launch with telemetry',
            description='Animated projectile with lighting, launch setup, drag model, '
                        'velocity arrow, and live telemetry.',
            blocks=tuple(PROJECTILE_BLOCKS),
        ),
        WorkedExample(
            id='blocks_spring',
            title='Spring-Mass (Blocks Template)',
            subtitle='Damped harmonic oscillator with energy telemetry',
            description="Spring-mass oscillator with Hooke's law, linear damping, "
                        'colour-mapped tension, phase-space arrow, and live KE/PE telemetry.',
            blocks=tuple(SPRING_BLOCKS),
        ),
        WorkedExample(
            id='blocks_orbits',
            title='Sun, Earth & Moon (Blocks Template)',
            subtitle='Three-body gravitational orbit system',
            description='Moon orbits Earth while Earth orbits Sun. Velocity-Verlet integration '
                        'with starfield, trails, and telemetry.',
            blocks=tuple(ORBIT_BLOCKS),
        ),
    )
}


def list_templates() -> List[Dict[str, str]]:
    return [example.to_dict() for example in WORKED_EXAMPLES.values()]


def load_template(template_id: str,
                  variables: Optional[VariableTable] = None,
                  constants: Optional[ConstantRegistry] = None,
                  registry: Optional[BlockRegistry] = None) -> Workspace:
    """Build the workspace of a built-in example.

    Raises:
        KeyError: no example has ``template_id``.
    """
    example = WORKED_EXAMPLES.get(template_id)
    if example is None:
        raise KeyError(f"Unknown template: {template_id}")
    return workspace_from_dict(example.to_workspace_json(), variables, constants, registry)

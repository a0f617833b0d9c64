"""
Toy Assembler - Inspection API (Flask)

Provides REST endpoints to assemble source text and to disassemble uploaded
object files.

Run with:
    flask --app toyasm.server run
"""

import os
import warnings

from flask import Flask, request, jsonify

from .assembler import Assembler
from .disassembler import Disassembler
from .errors import AssemblerError, ObjectFileWarning
from .instructions import get_all_mnemonics, get_instruction
from .objfile import ObjectFormat


def error_response(error: str, message: str, status: int = 400, **extra) -> tuple:
    """Create a standardized error response."""
    body = {'error': error, 'message': message}
    body.update(extra)
    return jsonify(body), status


def require_file_upload() -> tuple | None:
    """Validate file upload and return error response if invalid, None if valid."""
    if 'file' not in request.files:
        return error_response('No file provided', 'Request must include a file field')
    if request.files['file'].filename == '':
        return error_response('No file selected', 'File field is empty')
    return None


def create_app() -> Flask:
    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = 16 * 1024 * 1024  # 16MB max upload
    app.config['DEBUG'] = os.environ.get('FLASK_DEBUG', 'false').lower() == 'true'

    @app.after_request
    def add_cors_headers(response):
        """Add CORS headers to all responses for local development."""
        response.headers['Access-Control-Allow-Origin'] = '*'
        response.headers['Access-Control-Allow-Methods'] = 'GET, POST, OPTIONS'
        response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
        return response

    @app.errorhandler(400)
    def bad_request(error):
        return error_response('Bad request', str(error.description), 400)

    @app.errorhandler(404)
    def not_found(error):
        return error_response('Not found', str(error.description), 404)

    @app.route('/api/instructions', methods=['GET'])
    def list_instructions():
        """Get the opcode table."""
        table = [get_instruction(m) for m in get_all_mnemonics()]
        return jsonify({
            'mnemonics': get_all_mnemonics(),
            'instructions': [
                {
                    'mnemonic': instr.mnemonic,
                    'opcode': int(instr.opcode),
                    'format': instr.format.name,
                    'fields': {role: slot.name for role, slot in instr.fields.items()},
                }
                for instr in table
            ]
        })

    @app.route('/api/assemble', methods=['POST', 'OPTIONS'])
    def assemble():
        """Assemble JSON {"source": "..."} into words."""
        if request.method == 'OPTIONS':
            return '', 204

        payload = request.get_json(silent=True)
        if not isinstance(payload, dict) or not isinstance(payload.get('source'), str):
            return error_response('No source provided', 'Request body must be JSON with a "source" string')

        asm = Assembler()
        try:
            words = asm.assemble_string(payload['source'])
        except AssemblerError as e:
            return error_response(
                'Assembly failed', e.detail, line=e.line_num, text=e.line_text
            )

        return jsonify({
            'success': True,
            'count': len(words),
            'words': words,
            'hex': [f"{w:08X}" for w in words],
            'listing': asm.get_listing().splitlines(),
        })

    @app.route('/api/disassemble', methods=['POST', 'OPTIONS'])
    def disassemble():
        """Disassemble an uploaded object file."""
        if request.method == 'OPTIONS':
            return '', 204

        file_error = require_file_upload()
        if file_error:
            return file_error

        try:
            fmt = ObjectFormat.from_name(request.form.get('format', 'raw'))
        except ValueError as e:
            return error_response('Invalid format', str(e))

        data = request.files['file'].read()
        dis = Disassembler()
        try:
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter('always', ObjectFileWarning)
                dis.disassemble_bytes(data, fmt)
        except AssemblerError as e:
            return error_response('Invalid object file', str(e))

        return jsonify({
            'success': True,
            'count': len(dis.decoded),
            'unknown': sum(1 for d in dis.decoded if not d.known),
            'listing': dis.get_listing().splitlines(),
            'warnings': [str(w.message) for w in caught],
        })

    return app

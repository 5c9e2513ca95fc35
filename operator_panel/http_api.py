#!/usr/bin/env python3
"""
HTTP API for the operator panel
Exposes the latest building state and the three manual commands
"""
import threading

from flask import Flask, jsonify, request
from flask_cors import CORS

from .command_queue import OperatorCommandQueue
from .state_cache import LatestStateCache


def _bad_request(message: str):
    return jsonify({'error': message}), 400


def create_app(command_queue: OperatorCommandQueue, state_cache: LatestStateCache) -> Flask:
    """
    Build the Flask app

    Commands are only queued here; the control thread applies them on its
    next tick, so every command endpoint answers 202 Accepted.

    Args:
        command_queue: Queue drained by the UpdateTimer
        state_cache: Observer holding the latest published snapshot
    """
    app = Flask(__name__)
    CORS(app)  # Enable CORS for all routes

    @app.route('/api/status')
    def status():
        """Server status endpoint"""
        return jsonify({
            'status': 'ok',
            'server': 'Elevator Control Center Operator API',
            'connection_state': state_cache.connection_state,
            'pending_commands': command_queue.pending()
        })

    @app.route('/api/state')
    def get_state():
        """Latest published building state"""
        snapshot = state_cache.snapshot
        if snapshot is None:
            return jsonify({
                'error': 'No state published yet',
                'connection_state': state_cache.connection_state
            }), 503
        result = snapshot.to_dict()
        result['connection_state'] = state_cache.connection_state
        return jsonify(result)

    @app.route('/api/elevators/<int:index>/select', methods=['POST'])
    def select_elevator(index):
        command = command_queue.submit_select(index)
        return jsonify({'queued': command.to_dict()}), 202

    @app.route('/api/elevators/<int:index>/mode', methods=['POST'])
    def set_mode(index):
        data = request.get_json(silent=True) or {}
        automatic = data.get('automatic')
        if not isinstance(automatic, bool):
            return _bad_request("Body must contain boolean 'automatic'")
        command = command_queue.submit_mode(index, automatic)
        return jsonify({'queued': command.to_dict()}), 202

    @app.route('/api/elevators/<int:index>/target', methods=['POST'])
    def set_target(index):
        data = request.get_json(silent=True) or {}
        floor = data.get('floor')
        # bool is an int subclass; reject it explicitly
        if not isinstance(floor, int) or isinstance(floor, bool):
            return _bad_request("Body must contain integer 'floor'")
        command = command_queue.submit_target(index, floor)
        return jsonify({'queued': command.to_dict()}), 202

    return app


def run_server_in_thread(app: Flask, host='localhost', port=5000) -> threading.Thread:
    """Run the Flask server on a daemon thread next to the control loop"""
    print(f"Starting operator HTTP API on http://{host}:{port}")
    print(f"API endpoints:")
    print(f"  - GET  /api/status")
    print(f"  - GET  /api/state")
    print(f"  - POST /api/elevators/<index>/select")
    print(f"  - POST /api/elevators/<index>/mode    {{\"automatic\": true}}")
    print(f"  - POST /api/elevators/<index>/target  {{\"floor\": 3}}")

    thread = threading.Thread(
        target=app.run,
        kwargs={'host': host, 'port': port, 'debug': False, 'use_reloader': False, 'threaded': True},
        name="operator-http-api",
        daemon=True
    )
    thread.start()
    return thread

#!/usr/bin/env python3
"""
Frecency Rank Service - HTTP Access to the Ranking

Endpoints:
    GET  /health         - Service and history status
    GET  /rank           - Files ranked by frecency (?limit=N)
    GET  /rank/report    - Plain-text ranking report
    POST /rank/record    - Record a file access {"file": "/abs/path"}
    POST /rank/reset     - Forget every file
    POST /rank/save      - Persist the history now

Configuration comes from FRECENCY_* environment variables plus PORT.
The history is loaded at startup and saved at exit.
"""

import atexit
import os
import time
from typing import List, Tuple

from flask import Flask, Response, jsonify, request

from .backends import RedisBackend
from .config import FrecencyConfig
from .errors import FrecencyError, InvalidIdentifier
from .tracker import FrecencyTracker


def format_report(ranked: List[Tuple[str, float]]) -> str:
    """Render (file, score) pairs as an aligned text table."""
    if not ranked:
        return "No files tracked yet.\n"

    width = len(str(len(ranked)))
    lines = [f"{'#'.rjust(width)}  {'score':>9}  file"]
    for i, (file_path, score) in enumerate(ranked, 1):
        lines.append(f"{str(i).rjust(width)}  {score:>9.2f}  {file_path}")
    return '\n'.join(lines) + '\n'


def create_app(tracker: FrecencyTracker) -> Flask:
    """Build the Flask app around one tracker."""
    app = Flask(__name__)

    @app.route('/health')
    def health():
        body = {
            'status': 'ok',
            'files_tracked': len(tracker),
            'history': tracker.backend.location,
        }
        if isinstance(tracker.backend, RedisBackend):
            body['redis'] = tracker.backend.redis.ping()
            if not body['redis']:
                body['status'] = 'degraded'
        return jsonify(body)

    @app.route('/rank')
    def rank_files():
        """
        Get files ranked by frecency.

        Returns:
            {
                "files": ["/src/api/routes.py", ...],
                "details": [{"file": "...", "score": 12.0}, ...],
                "ms": 0.4
            }
        """
        start = time.time()
        limit = request.args.get('limit', type=int)
        ranked = tracker.list_ranked_with_score(limit)

        return jsonify({
            'files': [f for f, _ in ranked],
            'details': [{'file': f, 'score': round(s, 4)} for f, s in ranked],
            'ms': round((time.time() - start) * 1000, 2),
        })

    @app.route('/rank/report')
    def rank_report():
        limit = request.args.get('limit', type=int)
        return Response(format_report(tracker.list_ranked_with_score(limit)),
                        mimetype='text/plain')

    @app.route('/rank/record', methods=['POST'])
    def rank_record():
        """
        Record a file access.

        POST body:
            {"file": "/src/api/routes.py"}
        """
        data = request.get_json(silent=True)
        file_path = data.get('file') if isinstance(data, dict) else None

        if not file_path:
            return jsonify({'error': 'file parameter required'}), 400

        try:
            recorded = tracker.record_access(file_path)
        except InvalidIdentifier as e:
            return jsonify({'error': str(e)}), 400

        return jsonify({
            'recorded': file_path if recorded else None,
            'excluded': not recorded,
        })

    @app.route('/rank/reset', methods=['POST'])
    def rank_reset():
        tracker.reset()
        return jsonify({'reset': True})

    @app.route('/rank/save', methods=['POST'])
    def rank_save():
        try:
            tracker.save()
        except FrecencyError as e:
            return jsonify({'error': str(e)}), 500
        return jsonify({'saved': len(tracker), 'history': tracker.backend.location})

    return app


def main():
    port = int(os.environ.get('PORT', 9998))
    config = FrecencyConfig.from_env()
    tracker = FrecencyTracker.from_config(config)

    print("=" * 60)
    print("Frecency Rank Service")
    print(f"History: {tracker.backend.location}")
    if config.exclude_patterns:
        print(f"Excluding: {', '.join(config.exclude_patterns)}")
    print("=" * 60)

    if tracker.install():
        print("Created empty history")
    tracker.load()
    print(f"Loaded {len(tracker)} files")

    atexit.register(tracker.save)

    app = create_app(tracker)
    app.run(host='0.0.0.0', port=port, threaded=True)


if __name__ == '__main__':
    main()

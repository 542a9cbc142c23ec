import logging
import sys

from flask import Flask, request, jsonify
from flask_cors import CORS
import cv2
import numpy as np

from feedback.output_sink import EventRecorder
from trust.stabilizer import Stabilizer

logger = logging.getLogger(__name__)


def create_app(classifier=None, stabilizer=None):
    """
    Build the HTTP API.

    Args:
        classifier: Object with classify(frame_bgr); /api/classify returns 503 without one
        stabilizer: Session stabilizer; a fresh active one with an EventRecorder sink if None
    """
    app = Flask(__name__)
    CORS(app)  # Allow frontend to call API

    if stabilizer is None:
        stabilizer = Stabilizer(sink=EventRecorder())
        stabilizer.start()
    recorder = stabilizer.sink if isinstance(stabilizer.sink, EventRecorder) else None

    app.config["CLASSIFIER"] = classifier
    app.config["STABILIZER"] = stabilizer

    def drained_events():
        return [e.to_dict() for e in recorder.drain()] if recorder is not None else []

    @app.route('/api/classify', methods=['POST'])
    def classify():
        if classifier is None:
            return jsonify({'error': 'No classifier loaded'}), 503
        if 'image' not in request.files:
            return jsonify({'error': 'No image provided'}), 400

        img_bytes = request.files['image'].read()
        nparr = np.frombuffer(img_bytes, np.uint8)
        img = cv2.imdecode(nparr, cv2.IMREAD_COLOR) if nparr.size else None
        if img is None:
            return jsonify({'error': 'Could not decode image'}), 400

        try:
            candidates = classifier.classify(img)
        except Exception as e:
            logger.warning("Classification failed", exc_info=True)
            return jsonify({'error': str(e)}), 500

        return jsonify({'candidates': [
            {'label': label, 'confidence': float(conf)} for label, conf in candidates
        ]})

    @app.route('/api/observe', methods=['POST'])
    def observe():
        body = request.get_json(silent=True)
        candidates = body.get('candidates') if isinstance(body, dict) else None
        if not isinstance(candidates, list):
            return jsonify({'error': 'Expected {"candidates": [...]}'}), 400
        if not stabilizer.is_active:
            return jsonify({'error': f'Stabilizer is {stabilizer.status.value}'}), 409

        result = stabilizer.handle_candidates(candidates)
        return jsonify({
            'result': result.to_dict() if result is not None else None,
            'confirmed_label': stabilizer.confirmed_label,
            'events': drained_events(),
        })

    @app.route('/api/pause', methods=['POST'])
    def pause():
        clear_history = bool(request.args.get('clear_history', type=int, default=0))
        changed = stabilizer.pause(clear_history=clear_history)
        return jsonify({'changed': changed, 'state': stabilizer.snapshot(), 'events': drained_events()})

    @app.route('/api/resume', methods=['POST'])
    def resume():
        changed = stabilizer.resume()
        return jsonify({'changed': changed, 'state': stabilizer.snapshot()})

    @app.route('/api/state', methods=['GET'])
    def state():
        return jsonify(stabilizer.snapshot())

    @app.route('/api/health', methods=['GET'])
    def health():
        return jsonify({'status': 'ok'})

    return app


if __name__ == '__main__':
    from ml.classifier import BanknoteClassifier
    from ml.config import MODEL_PATH

    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    model = BanknoteClassifier(sys.argv[1] if len(sys.argv) > 1 else MODEL_PATH)
    create_app(model).run(host='0.0.0.0', port=5001, debug=True)

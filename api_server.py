#!/usr/bin/env python3
"""
BioGloss REST API Server
Provides HTTP endpoints for the reader frontend to annotate documents and fetch definitions
"""

import asyncio
import logging
import os

from flask import Flask, jsonify, request
from flask_cors import CORS

from biogloss.core.config import DICTIONARY_MODES, AnnotationConfig, BioGlossConfig
from biogloss.core.errors import ExtractionError
from biogloss.core.overlay import SIMPLE_SOURCE_LABEL
from biogloss.core.pipeline import AnnotationSession

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)  # Enable CORS for the reader frontend

config = BioGlossConfig()
session = AnnotationSession(config)


def _flag(value, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).lower() in ("true", "1", "yes", "on")


def _annotation_from(params) -> AnnotationConfig:
    defaults = config.annotation
    return AnnotationConfig(
        dictionary_mode=params.get('mode') or defaults.dictionary_mode,
        scientific_enabled=_flag(params.get('scientific'), defaults.scientific_enabled),
        simple_english_enabled=_flag(params.get('simple_english'), defaults.simple_english_enabled),
    )


@app.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    return jsonify({"status": "healthy", "message": "BioGloss API is running"})


@app.route('/api/dictionaries', methods=['GET'])
def dictionaries():
    """List dictionary modes with their term counts"""
    return jsonify({
        "modes": list(DICTIONARY_MODES),
        "default": config.annotation.dictionary_mode,
        "term_counts": session.catalog.get_stats(),
    })


@app.route('/api/annotate', methods=['POST'])
def annotate():
    """
    Annotate an uploaded document ("file" form field) or JSON {"text": ..., "title": ...}.
    Options: mode, scientific, simple_english.
    """
    max_bytes = config.api.max_content_size_mb * 1024 * 1024

    text = None
    if 'file' in request.files:
        upload = request.files['file']
        data = upload.read()
        filename = upload.filename or None
        params = request.form
    else:
        params = request.get_json(silent=True)
        if not isinstance(params, dict):
            params = {}
        text = params.get('text')
        if text is None or text == "":
            return jsonify({"error": "No file or text provided"}), 400
        if not isinstance(text, str):
            return jsonify({"error": "'text' must be a string"}), 400
        data = text.encode('utf-8')
        title = params.get('title')
        filename = title if isinstance(title, str) and title else None

    if len(data) > max_bytes:
        return jsonify({
            "error": f"Document exceeds {config.api.max_content_size_mb}MB limit ({len(data) / (1024*1024):.1f}MB)"
        }), 413

    try:
        annotation = _annotation_from(params)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    try:
        if text is not None:
            # Pasted text is annotated as given, never parsed as a file
            document = asyncio.run(session.annotate_pasted_text(text, filename, annotation))
        else:
            document = asyncio.run(session.annotate_document(data, filename, annotation))
    except ExtractionError as e:
        message, _ = session.status
        return jsonify({"error": message, "detail": str(e)}), 422

    message, status_type = session.status
    return jsonify({
        "title": filename,
        "html": document.to_html() if document is not None else None,
        "stats": document.stats() if document is not None else None,
        "status": {"message": message, "type": status_type},
    })


@app.route('/api/definition/<word>', methods=['GET'])
def definition(word):
    """Cached simple-English definition for a tagged term"""
    found = session.definition_for(word)
    if found is None:
        return jsonify({"error": f"No cached definition for '{word}'"}), 404

    return jsonify({"term": word.lower(), "definition": found, "source": SIMPLE_SOURCE_LABEL})


@app.route('/api/reset', methods=['POST'])
def reset():
    """Start a new session with an empty definition cache"""
    session.reset()
    return jsonify({"success": True})


if __name__ == '__main__':
    logging.basicConfig(level=getattr(logging, config.log_level.upper(), logging.INFO))

    port = int(os.getenv("BIOGLOSS_PORT", "5001"))
    logger.info(f"Starting BioGloss API server on port {port}")
    # Single-threaded: the session cache is not shared across threads
    app.run(host='0.0.0.0', port=port, debug=False, threaded=False)

#!/usr/bin/env python3
"""
Adaptive Icon API Server
Exposes foreground extraction and safe-area fitting over HTTP.
Renders are uploaded as PNGs; results are returned as PNGs.
"""

import os
import logging
from io import BytesIO
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from flask import Flask, request, jsonify, send_file
from flask_cors import CORS

from .errors import DimensionMismatchError
from .services.foreground_extraction_service import ForegroundExtractionService
from .services.image_service import ImageService
from .services.safe_area_service import SafeAreaService

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

app = Flask(__name__)
CORS(app)  # Enable CORS for frontend communication

# Configuration
MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_SIZE_MB", "20")) * 1024 * 1024
app.config['MAX_CONTENT_LENGTH'] = MAX_CONTENT_LENGTH
MAX_CANVAS_SIZE = int(os.getenv("MAX_CANVAS_SIZE", "2048"))

# Initialize services
image_service = ImageService()
extraction_service = ForegroundExtractionService()
safe_area_service = SafeAreaService()

logger = logging.getLogger(__name__)


def read_upload(field: str):
    """Decode an uploaded file into a RasterImage, or None when missing."""
    file = request.files.get(field)
    if file is None or file.filename == '':
        return None
    return image_service.decode(file.read())


def png_response(image, filename: str):
    buffer = BytesIO(image_service.to_png_bytes(image))
    return send_file(buffer, mimetype='image/png', download_name=filename)


def wants_fit() -> bool:
    return request.form.get('fit', '').lower() in ('1', 'true', 'yes')


@app.route('/api/extract-foreground', methods=['POST'])
def extract_foreground():
    """Recover the foreground layer from uploaded `full` and `background` renders."""
    try:
        full = read_upload('full')
        background = read_upload('background')
        if full is None or background is None:
            return jsonify({'success': False, 'message': 'Both full and background images are required'}), 400

        logger.info(f"Extracting foreground: full {full.size}, background {background.size}")
        foreground = extraction_service.extract(full, background)
        if wants_fit():
            foreground = safe_area_service.fit(foreground)

        return png_response(foreground, 'foreground.png')

    except DimensionMismatchError as e:
        logger.warning(f"Dimension mismatch: {e}")
        return jsonify({
            'success': False,
            'message': str(e),
            'full_size': list(e.full_size),
            'background_size': list(e.background_size),
        }), 400
    except ValueError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception as e:
        logger.error(f"Foreground extraction error: {e}")
        return jsonify({'success': False, 'message': f'Error extracting foreground: {str(e)}'}), 500


@app.route('/api/fit-safe-area', methods=['POST'])
def fit_safe_area():
    """Letterbox an uploaded `image` into the adaptive icon canvas."""
    try:
        image = read_upload('image')
        if image is None:
            return jsonify({'success': False, 'message': 'No image provided'}), 400

        canvas_size = request.form.get('canvas_size', type=int)
        safe_area_size = request.form.get('safe_area_size', type=int)
        if any(size is not None and size > MAX_CANVAS_SIZE for size in (canvas_size, safe_area_size)):
            return jsonify({'success': False, 'message': f'Canvas size is limited to {MAX_CANVAS_SIZE}px'}), 400
        fitted = safe_area_service.fit(image, canvas_size, safe_area_size)
        return png_response(fitted, 'fitted.png')

    except ValueError as e:
        return jsonify({'success': False, 'message': str(e)}), 400
    except Exception as e:
        logger.error(f"Safe-area fitting error: {e}")
        return jsonify({'success': False, 'message': f'Error fitting image: {str(e)}'}), 500


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    t = extraction_service.thresholds
    return jsonify({
        'status': 'healthy',
        'message': 'Adaptive Icon API is running',
        'canvas_size': safe_area_service.safe_area.canvas_size,
        'safe_area_size': safe_area_service.safe_area.safe_area_size,
        'identity_threshold': t.identity_threshold,
        'alpha_step': t.alpha_step,
    })


@app.errorhandler(413)
def too_large(e):
    """Handle file too large error."""
    return jsonify({'error': f'File too large. Maximum size is {MAX_CONTENT_LENGTH // (1024*1024)}MB.'}), 413


@app.errorhandler(500)
def internal_error(e):
    """Handle internal server error."""
    logger.error(f"Internal server error: {e}")
    return jsonify({'error': 'Internal server error'}), 500


def main():
    port = int(os.getenv("PORT", "5000"))
    print("🚀 Starting Adaptive Icon API Server...")
    print(f"🔧 Max upload size: {MAX_CONTENT_LENGTH // (1024*1024)}MB")
    print("📋 Endpoints:")
    print("   POST /api/extract-foreground")
    print("   POST /api/fit-safe-area")
    print("   GET  /api/health")
    print("="*60)
    app.run(host='0.0.0.0', port=port, debug=False)


if __name__ == '__main__':
    main()

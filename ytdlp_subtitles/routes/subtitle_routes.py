"""Subtitle routes: list and download subtitles for a video URL."""

import logging
from flask import Blueprint, Response, current_app, jsonify, request

from ..errors import (
    InvalidUrlError,
    NoSubtitlesError,
    SubtitleAdapterError,
    SubtitleLanguageNotFoundError,
    ToolInvocationError,
    ToolNotFoundError,
)
from ..utils.file_utils import sanitize_filename
from ..utils.url_utils import detect_platform

logger = logging.getLogger(__name__)

subtitles_bp = Blueprint('subtitles', __name__, url_prefix='/api/subtitles')


def _apply_cors_headers(response):
    response.headers.add('Access-Control-Allow-Origin', '*')
    response.headers.add('Access-Control-Allow-Headers', 'Content-Type,Authorization')
    response.headers.add('Access-Control-Allow-Methods', 'GET,POST,OPTIONS')
    return response


def _request_params():
    """合并查询参数、表单和JSON参数"""
    params = dict(request.args.items())
    if request.is_json:
        payload = request.get_json(silent=True)
        if isinstance(payload, dict):
            params.update(payload)
    else:
        params.update(request.form.items())
    return params


def _as_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


def _error_status(error):
    """把服务层异常映射为HTTP状态码"""
    if isinstance(error, InvalidUrlError):
        return 400
    if isinstance(error, (SubtitleLanguageNotFoundError, NoSubtitlesError)):
        return 404
    if isinstance(error, ToolNotFoundError):
        return 503
    if isinstance(error, ToolInvocationError):
        return 502
    return 500


def _error_response(error, status=None):
    status = status or _error_status(error)
    return _apply_cors_headers(jsonify({'success': False, 'error': str(error)})), status


@subtitles_bp.route('/list', methods=['GET', 'POST', 'OPTIONS'])
def list_subtitles():
    """列出视频的可用字幕语言"""
    if request.method == 'OPTIONS':
        return _apply_cors_headers(jsonify({'status': 'ok'}))

    url = str(_request_params().get('url') or '').strip()
    if not url:
        return _error_response(ValueError('url is required'), 400)

    try:
        report = current_app.subtitle_service.list_subtitles(url)
    except SubtitleAdapterError as e:
        logger.warning(f"列出字幕失败: {str(e)}")
        return _error_response(e)

    return _apply_cors_headers(jsonify({
        'success': True,
        'url': url,
        'platform': detect_platform(url),
        'subtitles': report,
    }))


@subtitles_bp.route('/download', methods=['GET', 'POST', 'OPTIONS'])
def download_subtitles():
    """下载指定语言的字幕"""
    if request.method == 'OPTIONS':
        return _apply_cors_headers(jsonify({'status': 'ok'}))

    params = _request_params()
    url = str(params.get('url') or '').strip()
    if not url:
        return _error_response(ValueError('url is required'), 400)

    service = current_app.subtitle_service
    language = str(params.get('language') or '').strip() or service.default_language
    strip_timestamps = _as_bool(
        params.get('strip_timestamps', params.get('without_timestamps', False))
    )

    try:
        content = service.download_subtitles(url, language, strip_timestamps)
    except SubtitleAdapterError as e:
        logger.warning(f"下载字幕失败: {str(e)}")
        return _error_response(e)

    if _as_bool(params.get('as_file', False)):
        ext = '.txt' if strip_timestamps else '.vtt'
        filename = sanitize_filename(f"subtitles.{language}{ext}")
        response = Response(content, mimetype='text/plain; charset=utf-8')
        response.headers['Content-Disposition'] = f'attachment; filename="{filename}"'
        return _apply_cors_headers(response)

    return _apply_cors_headers(jsonify({
        'success': True,
        'url': url,
        'language': language,
        'strip_timestamps': strip_timestamps,
        'content': content,
    }))

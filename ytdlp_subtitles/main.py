"""Main Flask application factory for the yt-dlp subtitle service."""

import logging
from datetime import datetime

from flask import Flask, jsonify, request

from . import __version__
from .config.config_manager import ConfigManager, get_config_value, set_config_manager
from .routes import subtitles_bp, tools_bp
from .services.logging_service import LoggingService
from .services.subtitle_service import SubtitleService
from .services.tool_service import SubtitleToolService

logger = logging.getLogger(__name__)


def create_app(config_path=None, subtitle_service=None):
    """创建Flask应用实例

    Args:
        config_path: 配置文件路径，可选
        subtitle_service: 预先构造的字幕服务，测试时可注入

    Returns:
        Flask: 配置好的Flask应用实例
    """
    app = Flask(__name__)

    # 初始化配置管理器
    config_manager = ConfigManager(config_path) if config_path else ConfigManager()
    set_config_manager(config_manager)

    # 初始化日志服务
    app.logging_service = LoggingService(
        log_file=get_config_value('logging.file'),
        level=get_config_value('logging.level', 'INFO'),
    )

    logger.info("启动字幕服务应用")

    _configure_app(app, config_manager)
    _initialize_services(app, subtitle_service)
    _register_blueprints(app)
    _register_error_handlers(app)
    register_main_routes(app)

    logger.info("应用初始化完成")
    return app


def _configure_app(app, config_manager):
    """配置Flask应用"""
    app.json.ensure_ascii = False
    app.config_manager = config_manager
    logger.info("Flask应用配置完成")


def _initialize_services(app, subtitle_service=None):
    """初始化所有服务"""
    try:
        app.subtitle_service = subtitle_service or SubtitleService()
        app.tool_service = SubtitleToolService(app.subtitle_service)
        logger.info("所有服务初始化完成")
    except Exception as e:
        logger.error(f"初始化服务失败: {str(e)}")
        raise


def _register_blueprints(app):
    """注册Flask蓝图"""
    app.register_blueprint(subtitles_bp)
    app.register_blueprint(tools_bp)
    logger.info("所有蓝图注册完成")


def _register_error_handlers(app):
    """注册错误处理器"""

    @app.errorhandler(404)
    def not_found_error(error):
        """404错误处理"""
        return jsonify({'error': 'Not found', 'path': request.path}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        """405错误处理"""
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        """500错误处理"""
        logger.error(f"Internal server error: {error}")
        return jsonify({'error': 'Internal server error'}), 500

    logger.info("错误处理器注册完成")


def register_main_routes(app):
    """注册主要路由"""

    @app.route('/health')
    def health_check():
        """健康检查接口"""
        runner = app.subtitle_service.runner
        available = runner.is_available()
        status = {
            'status': 'healthy' if available else 'degraded',
            'ytdlp': {
                'executable': runner.executable,
                'available': available,
                'version': runner.version() if available else None,
            },
            'default_language': app.subtitle_service.default_language,
            'timestamp': str(datetime.now()),
        }
        return jsonify(status), 200 if available else 503

    @app.route('/api/info')
    def api_info():
        """API信息接口"""
        return jsonify({
            'name': get_config_value('app.name', 'yt-dlp Subtitle Service'),
            'version': get_config_value('app.version', __version__),
            'description': 'List and download video subtitles through yt-dlp',
            'default_language': app.subtitle_service.default_language,
            'tools': [tool['name'] for tool in app.tool_service.list_tools()],
            'endpoints': {
                'list_subtitles': '/api/subtitles/list?url=<video_url>',
                'download_subtitles': '/api/subtitles/download?url=<video_url>&language=<code>',
                'list_tools': '/api/tools',
                'call_tool': '/api/tools/call',
                'health': '/health',
            }
        })


def main(argv=None):
    """主函数 - 用于直接运行应用"""
    import argparse

    parser = argparse.ArgumentParser(description='yt-dlp Subtitle Service')
    parser.add_argument('--config', '-c', help='配置文件路径')
    parser.add_argument('--host', default='127.0.0.1', help='绑定主机地址')
    parser.add_argument('--port', type=int, default=5000, help='端口号')
    parser.add_argument('--debug', action='store_true', help='调试模式')

    args = parser.parse_args(argv)

    app = create_app(args.config)
    if args.debug:
        app.logging_service.set_level(logging.DEBUG)

    logger.info(f"启动字幕服务 - 地址: {args.host}:{args.port}, 调试模式: {args.debug}")

    try:
        app.run(
            host=args.host,
            port=args.port,
            debug=args.debug,
            threaded=True
        )
    except KeyboardInterrupt:
        logger.info("应用被用户中断")


if __name__ == '__main__':
    main()

"""Route modules for Flask blueprints."""

from .subtitle_routes import subtitles_bp
from .tool_routes import tools_bp

__all__ = ['subtitles_bp', 'tools_bp']
